"""
Requirements file output.
"""

import os
from typing import Iterable

from .error_handling import OutputWriteError


def write_requirements(output_file: str, requirements: Iterable[str]) -> None:
    """
    Write one requirement per line, replacing any existing file.

    The data is flushed and synced to storage before returning. A failure
    part way through may leave a truncated file behind.

    Raises:
        OutputWriteError: If the file cannot be created or written
    """
    try:
        with open(output_file, "w", encoding="utf-8", newline="\n") as f:
            for requirement in requirements:
                f.write(f"{requirement}\n")
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        raise OutputWriteError(
            f"failed to write requirements to '{output_file}': {e}"
        )
