"""Version parsing and comparison utilities.

Handles conversion between version strings reported by package managers and
semver objects, with special handling for incomplete version strings
(e.g., "9.1" → "9.1.0").
"""

from __future__ import annotations

import re

import semver

_CORE_RE = re.compile(r"^v?(?P<core>\d+(?:\.\d+)*)(?P<rest>[-+].*)?$")


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros and tolerates a leading
    "v" and surrounding whitespace, as printed by `npm --version`:
    - "8" → "8.0.0"
    - "8.5" → "8.5.0"
    - "v10.2.4\\n" → "10.2.4"

    Prerelease and build suffixes are kept ("9.0.0-pre.1").

    Raises:
        ValueError: If the string is not a version at all.
    """
    match = _CORE_RE.match(version_str.strip())
    if not match:
        raise ValueError(f"{version_str!r} is not a valid version string")
    parts = match.group("core").split(".")
    # Pad with zeros to ensure we have at least 3 parts
    while len(parts) < 3:
        parts.append("0")
    return semver.Version.parse(".".join(parts[:3]) + (match.group("rest") or ""))


def version_at_least(version_str: str, minimum: str) -> bool:
    """Return True if version_str is greater than or equal to minimum.

    Compares numerically per component, so "8.50.0" is newer than "8.5.0"
    and "10.0.0" is newer than "9.9.9".
    """
    return parse_version(version_str).compare(parse_version(minimum)) >= 0
