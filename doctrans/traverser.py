"""
Traverser - Enumerates source documents with their translation instructions.

Files are visited in lexicographic path order. Instruction manifests are
directory scoped:

    .doctrans-instructions          comma separated list of instruction files,
                                    added to those inherited from parent dirs
    .doctrans-instructions.replace  same format, but drops everything inherited

Manifest entries are resolved relative to the directory holding the manifest.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from config.constants import DEFAULT_FILE_REGEX, INSTRUCTIONS_FILE, INSTRUCTIONS_REPLACE_FILE
from config.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceFile:
    """One matched document"""
    path: Path
    content: str
    instruction_files: List[Path] = field(default_factory=list)
    instructions: Optional[str] = None


class Traverser:
    """
    Depth-first, sorted walk over the source tree.

    Usage:
        for source in Traverser(Path("docs")).traverse():
            print(source.path, source.instructions)
    """

    def __init__(
        self,
        source_dir: Path,
        file_regex: str = DEFAULT_FILE_REGEX,
        exclusion_patterns: Optional[Sequence[str]] = None,
    ):
        self.source_dir = Path(source_dir).resolve()
        self.file_pattern = re.compile(file_regex)
        self.exclusion_patterns = [
            re.compile(p) for p in (exclusion_patterns or []) if p and p.strip()
        ]
        self._instruction_cache: Dict[Path, List[Path]] = {}

    def traverse(self) -> Iterator[SourceFile]:
        """
        Yield every matching, non-excluded document.

        Raises:
            FileNotFoundError: source directory does not exist.
            NotADirectoryError: source path is not a directory.
        """
        if not self.source_dir.exists():
            raise FileNotFoundError(f"Source directory does not exist: {self.source_dir}")
        if not self.source_dir.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {self.source_dir}")

        for path in sorted(self._collect_files(self.source_dir), key=str):
            if not self.file_pattern.fullmatch(str(path)):
                continue
            if self.is_excluded(path):
                logger.debug(f"Excluded {path}")
                continue
            content = path.read_text(encoding="utf-8")
            instruction_files = self.instruction_files_for(path.parent)
            yield SourceFile(
                path=path,
                content=content,
                instruction_files=instruction_files,
                instructions=self.read_instructions(instruction_files),
            )

    def is_excluded(self, path: Path) -> bool:
        relative = path.relative_to(self.source_dir).as_posix()
        return any(p.search(relative) for p in self.exclusion_patterns)

    def _collect_files(self, directory: Path) -> List[Path]:
        files = []
        for child in sorted(directory.iterdir(), key=str):
            # Symlinks are skipped
            if child.is_symlink():
                continue
            if child.is_dir():
                files.extend(self._collect_files(child))
            elif child.is_file():
                files.append(child)
        return files

    # ------------------------------------------------------------------
    # Instruction manifests
    # ------------------------------------------------------------------

    def instruction_files_for(self, directory: Path) -> List[Path]:
        """Accumulated instruction files for `directory`, cached per directory."""
        directory = Path(directory).resolve()
        if directory in self._instruction_cache:
            return list(self._instruction_cache[directory])

        replace_manifest = directory / INSTRUCTIONS_REPLACE_FILE
        result: List[Path] = []
        if replace_manifest.exists():
            result.extend(self._manifest_entries(directory, replace_manifest))
        elif directory != self.source_dir and self.source_dir in directory.parents:
            result.extend(self.instruction_files_for(directory.parent))

        manifest = directory / INSTRUCTIONS_FILE
        if manifest.exists():
            result.extend(self._manifest_entries(directory, manifest))

        self._instruction_cache[directory] = result
        return list(result)

    @staticmethod
    def _manifest_entries(directory: Path, manifest: Path) -> List[Path]:
        text = manifest.read_text(encoding="utf-8")
        return [directory / token.strip() for token in text.split(",") if token.strip()]

    @staticmethod
    def read_instructions(instruction_files: List[Path]) -> Optional[str]:
        """Contents of the instruction files joined by blank lines; None when there are none."""
        parts = []
        for path in instruction_files:
            if not path.is_file():
                logger.warning(f"Instruction file not found: {path}")
                continue
            text = path.read_text(encoding="utf-8").strip()
            if text:
                parts.append(text)
        return "\n\n".join(parts) if parts else None
