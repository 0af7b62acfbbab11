"""
Import extraction from Python source text.

The shipped extractor is a line-anchored pattern scan: only statements that
start at column zero are recognised, so imports inside functions, ``try``
blocks and conditionals are missed.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from .error_handling import log_read_error

_DOTTED_NAME = r"[a-zA-Z_][a-zA-Z0-9_]*(?:\.[a-zA-Z_][a-zA-Z0-9_]*)*"

IMPORT_PATTERN = re.compile(rf"^import\s+({_DOTTED_NAME})", re.MULTILINE)
FROM_IMPORT_PATTERN = re.compile(rf"^from\s+({_DOTTED_NAME})\s+import", re.MULTILINE)


def top_level_module(dotted_path: str) -> str:
    """Return the first segment of a dotted import path."""
    return dotted_path.split(".")[0]


class ImportExtractor(ABC):
    """Turns the text of one source file into referenced module names."""

    @abstractmethod
    def extract(self, text: str) -> List[str]:
        """Return top-level module names; duplicates are allowed."""
        pass


class RegexImportExtractor(ImportExtractor):
    """Extracts ``import x`` and ``from x import y`` statements at line start."""

    def extract(self, text: str) -> List[str]:
        modules = [
            top_level_module(match.group(1))
            for match in IMPORT_PATTERN.finditer(text)
        ]
        modules.extend(
            top_level_module(match.group(1))
            for match in FROM_IMPORT_PATTERN.finditer(text)
        )
        return modules


@dataclass
class ScanOutcome:
    """Modules collected from a set of files."""

    modules: Set[str] = field(default_factory=set)
    files_scanned: int = 0
    unreadable_files: List[str] = field(default_factory=list)


def read_source(file_path: str, encoding: str = "utf-8") -> str:
    # Undecodable bytes are replaced so only I/O failures count as unreadable.
    # newline="" keeps a lone carriage return inside its line.
    with open(file_path, encoding=encoding, errors="replace", newline="") as f:
        return f.read()


def extract_modules_from_file(
    file_path: str,
    extractor: Optional[ImportExtractor] = None,
    encoding: str = "utf-8",
) -> List[str]:
    """
    Read one file and extract its module references.

    Raises:
        OSError: If the file cannot be read
    """
    extractor = extractor or RegexImportExtractor()
    return extractor.extract(read_source(file_path, encoding))


def scan_files(
    file_paths: Iterable[str],
    extractor: Optional[ImportExtractor] = None,
    encoding: str = "utf-8",
) -> ScanOutcome:
    """
    Extract modules from every file, skipping the ones that cannot be read.

    Each unreadable file is reported as a warning with its path and cause.
    """
    extractor = extractor or RegexImportExtractor()
    outcome = ScanOutcome()

    for file_path in file_paths:
        outcome.files_scanned += 1
        try:
            modules = extract_modules_from_file(file_path, extractor, encoding)
        except (OSError, LookupError) as e:
            log_read_error(file_path, e, "extractor", "scan_files")
            outcome.unreadable_files.append(file_path)
            continue
        outcome.modules.update(modules)

    return outcome
