"""
doctrans - Incremental LLM translation of Markdown documentation.

Only what changed in git since the last translation is sent to the model:
new documents are translated whole (chunked at headings when large), updated
documents are patched through a unified diff produced by the model.
"""

__version__ = "1.0.0"
