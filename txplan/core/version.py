"""
Version comparison for operation display.

Simplified rpmvercmp: versions are compared as [epoch:]version[-release],
each part split into numeric and alphabetic runs. A leading "v" (v1.2.3)
is ignored.
"""

import re
from typing import Any, Tuple

_SEGMENT_RE = re.compile(r'\d+|[a-z]+', re.IGNORECASE)


def segments(part: str) -> Tuple[Tuple[int, Any], ...]:
    """Comparable segments of a version part.

    Numeric runs compare as numbers and rank above alphabetic runs, as in
    rpmvercmp ("1.0rc1" < "1.0.1"). Letters compare case-insensitively.
    """
    return tuple((1, int(run)) if run.isdigit() else (0, run.lower())
                 for run in _SEGMENT_RE.findall(part))


def version_key(version: str) -> Tuple:
    """Return a sortable key for an [epoch:]version[-release] string.

    Example:
        versions.sort(key=version_key, reverse=True)  # newest first
    """
    if version[:1] in ('v', 'V') and version[1:2].isdigit():
        version = version[1:]
    epoch = 0
    if ':' in version:
        head, rest = version.split(':', 1)
        if head.isdigit():
            epoch = int(head)
            version = rest
    release = ''
    if '-' in version:
        version, release = version.rsplit('-', 1)
    return (epoch, segments(version), segments(release))


def compare_versions(a: str, b: str) -> int:
    """Compare two versions.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    ka, kb = version_key(a), version_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


def is_upgrade(from_version: str, to_version: str) -> bool:
    """True unless going from from_version to to_version is a downgrade."""
    return compare_versions(to_version, from_version) >= 0
