# In src/pinreqs/requirement.py
from dataclasses import dataclass
from typing import FrozenSet, List


def normalize_name(name: str) -> str:
    """Canonical matching key: lowercase with hyphens mapped to underscores."""
    return name.lower().replace("-", "_")


@dataclass(frozen=True)
class InstalledPackage:
    """A package reported by the package manager's freeze listing."""

    name: str
    version: str
    raw: str

    @property
    def normalized_key(self) -> str:
        return normalize_name(self.name)


@dataclass(frozen=True)
class GenerationResult:
    """Summary of a single requirements generation run."""

    target_dir: str
    output_file: str
    files_scanned: int
    found_modules: FrozenSet[str]
    installed_count: int
    requirements: List[str]
    unreadable_files: List[str]
    duration_ms: int

    @property
    def has_requirements(self) -> bool:
        return bool(self.requirements)

