"""Version normalization and ordering.

Versions are compared segment by segment on their numeric content, with
a lexical tie-break so the ordering is total. This is deliberately not
semver precedence: pre-release and build suffixes contribute only their
digits (``1.0.0-beta`` and ``1.0.0`` are numerically equal).
"""

import functools
import re

# Leading range operators and whitespace in a version spec
_RANGE_PREFIX = re.compile(r"^[~^><=*\s]+")
_NON_DIGITS = re.compile(r"[^0-9]+")


def normalize_version(spec: str | None) -> str | None:
    """Strip leading range operators from a version spec.

    Args:
        spec: Version spec as declared (e.g., '^1.2.3', '>= 2.0').

    Returns:
        The bare version string, or None if nothing usable remains.

    Example:
        >>> normalize_version("^1.2.3")
        '1.2.3'
        >>> normalize_version("   ") is None
        True
    """
    if not spec:
        return None
    cleaned = _RANGE_PREFIX.sub("", spec.strip())
    return cleaned or None


def _parse_segments(version: str) -> list[tuple[int, str]]:
    # (length, digits) without leading zeros orders like the integer value
    # and has no size limit; an empty segment is 0
    segments: list[tuple[int, str]] = []
    for part in version.split("."):
        digits = _NON_DIGITS.sub("", part).lstrip("0")
        segments.append((len(digits), digits))
    return segments


_ZERO: tuple[int, str] = (0, "")


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings.

    Segments are compared numerically up to the longer of the two, with
    missing segments counting as 0. When every segment is equal the
    original strings are compared lexically.

    Args:
        a: First version.
        b: Second version.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b.
    """
    a_parts = _parse_segments(a)
    b_parts = _parse_segments(b)

    for i in range(max(len(a_parts), len(b_parts))):
        a_value = a_parts[i] if i < len(a_parts) else _ZERO
        b_value = b_parts[i] if i < len(b_parts) else _ZERO
        if a_value > b_value:
            return 1
        if a_value < b_value:
            return -1

    if a == b:
        return 0
    return 1 if a > b else -1


# Key function for sorted()/max() using compare_versions ordering
version_sort_key = functools.cmp_to_key(compare_versions)


def is_outdated(current: str | None, latest: str | None) -> bool:
    """Decide whether a declared version is behind the latest release.

    Args:
        current: Declared version spec (range operators allowed).
        latest: Latest published version.

    Returns:
        True if both versions are usable and latest sorts after current.
    """
    clean_current = normalize_version(current)
    clean_latest = normalize_version(latest)
    if clean_current is None or clean_latest is None:
        return False
    return compare_versions(clean_latest, clean_current) > 0
