"""Data models for build types, build context and resolved versions."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import semantic_version

from constants import Constants
from .errors import IncompatibleBuildType, InvalidBuildType


class BuildType(Enum):
    """Closed set of build classifications."""
    SNAPSHOT = "snapshot"
    CANDIDATE = "candidate"
    RELEASE = "release"

    @property
    def rank(self) -> int:
        """Ordering tiebreak when base versions are equal."""
        return _BUILD_TYPE_RANK[self]

    @classmethod
    def from_value(cls, value: Any) -> "BuildType":
        """Return the build type named by ``value`` (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidBuildType(value, [b.value for b in cls])


_BUILD_TYPE_RANK = {
    BuildType.SNAPSHOT: 0,
    BuildType.CANDIDATE: 1,
    BuildType.RELEASE: 2,
}


@dataclass(frozen=True)
class BuildContext:
    """Build provenance captured once by the caller and passed into resolution."""
    build_date: Optional[datetime] = None
    build_number: Optional[str] = None
    candidate_index: Optional[int] = None

    def __post_init__(self):
        # Empty values mean "absent"
        if self.build_number is not None:
            number = str(self.build_number).strip()
            object.__setattr__(self, "build_number", number or None)

    @classmethod
    def from_environment(cls, environ=None, now: Optional[datetime] = None) -> "BuildContext":
        """Capture provenance from environment variables; see ``versioning.context``."""
        from .context import context_from_environment  # pylint: disable=import-outside-toplevel
        return context_from_environment(environ, now)


def format_build_date(value: Optional[datetime]) -> str:
    """Render a build date as ISO-8601 UTC, or an empty string when absent."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(Constants.BUILD_DATE_FORMAT)


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class VersionIdentifier:
    """Resolved, immutable project version.

    Identity is the base version precedence, the build type and the candidate
    index. Build date and build number are metadata only and take no part in
    equality, ordering or hashing.
    """
    base_version: semantic_version.Version
    build_type: BuildType
    build_date: Optional[datetime] = None
    build_number: Optional[str] = None
    candidate_index: Optional[int] = None

    def __post_init__(self):
        if self.build_type is BuildType.CANDIDATE:
            if isinstance(self.candidate_index, bool) or not isinstance(self.candidate_index, int) \
                    or self.candidate_index < 1:
                raise ValueError(
                    f"Candidate builds need a positive candidate_index, got {self.candidate_index!r}"
                )
        elif self.candidate_index is not None:
            raise ValueError(f"candidate_index is only valid for candidate builds, not {self.build_type.value}")

        from .parser import find_build_qualifier  # pylint: disable=import-outside-toplevel
        qualifier = find_build_qualifier(self.base_version)
        if qualifier is not None:
            raise IncompatibleBuildType(str(self.base_version), self.build_type.value, qualifier)

    @property
    def display_version(self) -> str:
        """Canonical string form used for artifacts, manifests and publication."""
        base = self.base_version
        text = f"{base.major}.{base.minor}.{base.patch}"
        if base.prerelease:
            text += "-" + ".".join(base.prerelease)
        if self.build_type is BuildType.SNAPSHOT:
            text += f"-{Constants.SNAPSHOT_QUALIFIER}"
        elif self.build_type is BuildType.CANDIDATE:
            text += f"-{Constants.CANDIDATE_QUALIFIER}.{self.candidate_index}"
        if base.build:
            text += "+" + ".".join(base.build)
        return text

    @property
    def is_snapshot_build(self) -> bool:
        return self.build_type is BuildType.SNAPSHOT

    @property
    def is_candidate_build(self) -> bool:
        return self.build_type is BuildType.CANDIDATE

    @property
    def is_release_build(self) -> bool:
        return self.build_type is BuildType.RELEASE

    @property
    def build_date_text(self) -> str:
        return format_build_date(self.build_date)

    @property
    def build_number_text(self) -> str:
        return self.build_number or ""

    @classmethod
    def parse(cls, display: str) -> "VersionIdentifier":
        """Reconstruct an identifier from its display form.

        Build date and number are not part of the display form and come back
        empty.
        """
        from .parser import parse_display_version  # pylint: disable=import-outside-toplevel
        base, build_type, candidate_index = parse_display_version(display)
        return cls(base_version=base, build_type=build_type, candidate_index=candidate_index)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable view of the identifier."""
        return {
            "version": self.display_version,
            "base_version": str(self.base_version),
            "build_type": self.build_type.value,
            "build_date": self.build_date_text,
            "build_number": self.build_number_text,
            "candidate_index": self.candidate_index,
            "snapshot": self.is_snapshot_build,
        }

    def _key(self) -> Tuple[semantic_version.Version, int, int]:
        # Build metadata never affects precedence
        precedence = self.base_version.truncate("prerelease")
        return precedence, self.build_type.rank, self.candidate_index or 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionIdentifier):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, VersionIdentifier):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.display_version
