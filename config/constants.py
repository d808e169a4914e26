"""
Centralized constants for doctrans.
All magic numbers used across the engine live here.
"""

# ===========================================
# CHUNKING
# ===========================================
CHUNK_DEFAULT_TARGET_SIZE = 32 * 1024  # bytes (UTF-8) per body chunk
CHUNK_SIZE_TOLERANCE = 0.2             # +/- 20% around the target size

# ===========================================
# TRANSLATION
# ===========================================
TRANSLATION_MAX_TOKENS = 16384         # max output tokens per request
TRANSLATION_TEMPERATURE = 0.3          # LLM temperature
TRANSLATION_TIMEOUT_SECONDS = 300.0    # per request, enforced by the SDK client
TRANSLATION_MAX_RETRIES = 3            # SDK-level retries for transient errors
SHORT_COMMIT_LENGTH = 7                # abbreviated hash in log lines
COMMIT_FIELD = "commit"                # front matter field holding the source revision

# Phase tags reported in failed results
PHASE_FRONT_MATTER = "FRONT_MATTER"
PHASE_BODY = "BODY"
PHASE_BODY_DIFF = "BODY_DIFF"
PHASE_BODY_CHUNK_PREFIX = "BODY_CHUNK_"

# ===========================================
# GIT
# ===========================================
GIT_TIMEOUT_SECONDS = 30               # per git invocation

# ===========================================
# BATCH EXECUTION
# ===========================================
BATCH_PARALLEL_WORKERS = 4             # default parallel jobs
SHUTDOWN_TIMEOUT_SECONDS = 60          # bounded wait when closing the pool
PROGRESS_BAR_WIDTH = 20                # characters inside [....]
BANNER_WIDTH = 70                      # width of the permanent failure banner

# ===========================================
# TRAVERSAL
# ===========================================
DEFAULT_FILE_REGEX = r"(?i).*\.md"
INSTRUCTIONS_FILE = ".doctrans-instructions"
INSTRUCTIONS_REPLACE_FILE = ".doctrans-instructions.replace"

# ===========================================
# LLM PROVIDERS
# ===========================================
DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL = "gpt-4o"
SUPPORTED_PROVIDERS = ("openai", "anthropic", "claude")  # "claude" is an alias of anthropic

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = "DEBUG"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_CONSOLE_FORMAT = "%(message)s"
LOG_FILE_NAME = "doctrans.log"
DEFAULT_LOG_DIR = "~/.doctrans/logs"  # File logging starts with a translation run
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
