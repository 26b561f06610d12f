"""Parsing utilities for base versions, display versions and coordinates."""

import re
from typing import Optional, Tuple

import semantic_version

from constants import Constants
from .errors import IncompatibleBuildType, InvalidVersionFormat
from .models import BuildType

_CANDIDATE_IDENT = re.compile(rf"^{Constants.CANDIDATE_QUALIFIER}\d*$", re.IGNORECASE)
_CANDIDATE_SUFFIX = re.compile(rf"-{Constants.CANDIDATE_QUALIFIER}\.(\d+)$")
_SNAPSHOT_SUFFIX = f"-{Constants.SNAPSHOT_QUALIFIER}"


def parse_base_version(raw: str) -> semantic_version.Version:
    """Parse a strict semantic version.

    Rejects partial versions ("1.2"), prefixed versions ("v1.2.3") and empty
    input.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidVersionFormat(str(raw) if raw is not None else "", "version is empty")
    text = raw.strip()
    try:
        return semantic_version.Version(text)
    except ValueError as e:
        raise InvalidVersionFormat(text) from e


def find_build_qualifier(version: semantic_version.Version) -> Optional[str]:
    """Return an embedded snapshot or candidate pre-release identifier, if any.

    Hyphenated identifiers are inspected piecewise so "1.0.0-beta-SNAPSHOT"
    is caught as well as "1.0.0-SNAPSHOT" and "1.0.0-rc.2".
    """
    for ident in version.prerelease or ():
        for piece in ident.split("-"):
            if piece.upper() == Constants.SNAPSHOT_QUALIFIER:
                return piece
            if _CANDIDATE_IDENT.match(piece):
                return piece
    return None


def parse_display_version(text: str) -> Tuple[semantic_version.Version, BuildType, Optional[int]]:
    """Split a display version into (base version, build type, candidate index).

    A trailing "-SNAPSHOT" marks a snapshot build and a trailing "-rc.N" a
    candidate build; anything else is a release. Build metadata may follow
    either qualifier. Whatever base remains must be free of snapshot and
    candidate qualifiers, so "1.0.0-snapshot" or "1.0.0-rc.1-SNAPSHOT" are
    rejected rather than read back as a different build.

    Raises:
        InvalidVersionFormat: The text is not a version or the index is not positive.
        IncompatibleBuildType: The base still carries a qualifier.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidVersionFormat(str(text) if text is not None else "", "version is empty")
    stripped = text.strip()
    head, sep, build = stripped.partition("+")

    build_type = BuildType.RELEASE
    candidate_index = None
    if head.endswith(_SNAPSHOT_SUFFIX):
        head = head[:-len(_SNAPSHOT_SUFFIX)]
        build_type = BuildType.SNAPSHOT
    else:
        m = _CANDIDATE_SUFFIX.search(head)
        if m:
            head = head[:m.start()]
            build_type = BuildType.CANDIDATE
            candidate_index = int(m.group(1))
            if candidate_index < 1:
                raise InvalidVersionFormat(stripped, "candidate index must be a positive integer")

    try:
        base = semantic_version.Version(head + sep + build)
    except ValueError as e:
        raise InvalidVersionFormat(stripped) from e

    qualifier = find_build_qualifier(base)
    if qualifier is not None:
        raise IncompatibleBuildType(stripped, build_type.value, qualifier)
    return base, build_type, candidate_index


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, version or None) using the rightmost-colon rule."""
    s = s.strip()
    if ':' not in s:
        return s, None
    identifier, version_part = s.rsplit(':', 1)
    version = version_part.strip() or None
    return identifier.strip(), version
