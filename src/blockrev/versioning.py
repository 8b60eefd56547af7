"""Semantic version parsing, formatting and incrementing.

Document versions are ``major.minor.patch`` strings.  Parsing never fails:
missing or malformed input degrades to ``1.0.0``, and each malformed segment
falls back to its positional default.
"""

from __future__ import annotations

from blockrev.models import ChangeType, SemVer

_SEGMENT_DEFAULTS: tuple[int, int, int] = (1, 0, 0)


def _coerce_segment(raw: str, default: int) -> int:
    """Return *raw* as a non-negative int, or *default* if it is not one.

    A zero counts as invalid only where the default is non-zero (the major
    segment), so ``"0.4.2"`` parses as ``1.4.2``.
    """
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        return default
    value = int(text)
    return value or default


def parse_version(version: str | None) -> SemVer:
    """Parse a version string into a :class:`SemVer`.

    Examples
    --------
    >>> parse_version("2.5.1")
    SemVer(major=2, minor=5, patch=1)
    >>> parse_version(None)
    SemVer(major=1, minor=0, patch=0)
    >>> parse_version("3.x")
    SemVer(major=3, minor=0, patch=0)
    """
    if not version:
        return SemVer()
    segments = version.split(".")
    major, minor, patch = (
        _coerce_segment(segments[i], default) if i < len(segments) else default
        for i, default in enumerate(_SEGMENT_DEFAULTS)
    )
    return SemVer(major=major, minor=minor, patch=patch)


def format_version(version: SemVer) -> str:
    """Return ``"major.minor.patch"``."""
    return f"{version.major}.{version.minor}.{version.patch}"


def increment_version(version: SemVer, change_type: ChangeType | str) -> SemVer:
    """Return the version that follows *version* for a change of *change_type*.

    ``major`` resets minor and patch, ``minor`` resets patch, ``patch`` bumps
    the last segment, and ``none`` returns *version* unchanged.
    """
    kind = ChangeType(change_type)
    if kind is ChangeType.MAJOR:
        return SemVer(major=version.major + 1, minor=0, patch=0)
    if kind is ChangeType.MINOR:
        return SemVer(major=version.major, minor=version.minor + 1, patch=0)
    if kind is ChangeType.PATCH:
        return SemVer(major=version.major, minor=version.minor, patch=version.patch + 1)
    return version


def next_version(current: str | None, change_type: ChangeType | str) -> str:
    """Parse *current*, increment it for *change_type* and format the result."""
    return format_version(increment_version(parse_version(current), change_type))
