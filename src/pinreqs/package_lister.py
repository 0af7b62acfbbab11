"""
Installed package discovery through the package manager's freeze listing.
"""

import subprocess
from typing import Dict, Sequence

from .error_handling import PackageListingError
from .requirement import InstalledPackage

DEFAULT_FREEZE_COMMAND = ("pip", "freeze")

VERSION_SEPARATOR = "=="


def parse_freeze_output(output: str) -> Dict[str, InstalledPackage]:
    """
    Parse ``name==version`` lines into packages keyed by lowercased name.

    Lines without ``==`` (editable installs, direct URL references, comments,
    blank lines) are skipped. A repeated name keeps the last line seen.
    """
    packages: Dict[str, InstalledPackage] = {}

    for line in output.split("\n"):
        line = line.strip()
        if VERSION_SEPARATOR not in line:
            continue

        name, _, version = line.partition(VERSION_SEPARATOR)
        key = name.lower()
        packages[key] = InstalledPackage(name=key, version=version, raw=line)

    return packages


def run_freeze_command(command: Sequence[str] = DEFAULT_FREEZE_COMMAND) -> str:
    """
    Run the freeze command and return its standard output.

    Blocks until the command exits.

    Raises:
        PackageListingError: If the command is missing, cannot be run, or
            exits with a non-zero status
    """
    command = [str(arg) for arg in command]
    if not command:
        raise PackageListingError("package manager command is empty")

    display = " ".join(command)
    try:
        completed = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=True,
        )
    except FileNotFoundError:
        raise PackageListingError(
            f"failed to run '{display}': executable '{command[0]}' not found"
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or b"").decode("utf-8", errors="replace").strip()
        detail = f": {stderr}" if stderr else ""
        raise PackageListingError(
            f"failed to run '{display}': exit status {e.returncode}{detail}"
        )
    except OSError as e:
        raise PackageListingError(f"failed to run '{display}': {e}")

    return completed.stdout.decode("utf-8", errors="replace")


def get_installed_packages(
    command: Sequence[str] = DEFAULT_FREEZE_COMMAND,
) -> Dict[str, InstalledPackage]:
    """List installed packages as reported by ``command``."""
    return parse_freeze_output(run_freeze_command(command))
