"""
Matching of discovered modules against installed packages.
"""

from typing import Dict, Iterable, List

from .requirement import InstalledPackage, normalize_name


def match_requirements(
    found_modules: Iterable[str], installed: Dict[str, InstalledPackage]
) -> List[str]:
    """
    Select the freeze lines of installed packages that were imported.

    Packages are visited in ascending order of their lowercased listing name
    (the mapping key), not of the normalized key, and an entry is kept when
    its normalized key equals the normalized key of some found module.

    Args:
        found_modules: Top-level module names found in the source tree
        installed: Installed packages keyed by lowercased name

    Returns:
        List[str]: Raw ``name==version`` lines in output order
    """
    found_keys = {normalize_name(module) for module in found_modules}

    return [
        installed[name].raw
        for name in sorted(installed)
        if installed[name].normalized_key in found_keys
    ]
