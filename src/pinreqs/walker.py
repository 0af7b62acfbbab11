"""
Source file discovery.
"""

import fnmatch
import os
from typing import Iterable, List

from .error_handling import ScanError, TargetNotFoundError


def _raise_walk_error(error: OSError) -> None:
    raise ScanError(f"failed to walk '{error.filename}': {error.strerror or error}")


def _is_excluded(dirname: str, exclude_dirs: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(dirname, pattern) for pattern in exclude_dirs)


def find_source_files(
    root: str, suffix: str = ".py", exclude_dirs: Iterable[str] = ()
) -> List[str]:
    """
    Recursively collect files under ``root`` whose name ends with ``suffix``.

    Args:
        root: Directory to scan. A matching file is accepted as its own result.
        suffix: File name suffix that marks a source file
        exclude_dirs: fnmatch patterns for directory names to prune

    Returns:
        List[str]: Matching paths in sorted order

    Raises:
        TargetNotFoundError: If ``root`` does not exist
        ScanError: If an entry cannot be traversed
    """
    if not os.path.exists(root):
        raise TargetNotFoundError(root)

    if os.path.isfile(root):
        return [root] if root.endswith(suffix) else []

    exclude_dirs = list(exclude_dirs)
    found = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        if exclude_dirs:
            dirnames[:] = [d for d in dirnames if not _is_excluded(d, exclude_dirs)]
        for filename in filenames:
            if filename.endswith(suffix):
                found.append(os.path.join(dirpath, filename))

    return sorted(found)
