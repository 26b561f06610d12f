"""Project versioning scheme: build types, provenance and version resolution."""

from .errors import (
    IncompatibleBuildType,
    InvalidBuildType,
    InvalidVersionFormat,
    MissingProvenance,
    VersioningError,
)
from .models import BuildContext, BuildType, VersionIdentifier
from .resolver import ResolutionResult, VersionRequest, VersionResolver, resolve

__all__ = [
    "BuildContext",
    "BuildType",
    "IncompatibleBuildType",
    "InvalidBuildType",
    "InvalidVersionFormat",
    "MissingProvenance",
    "ResolutionResult",
    "VersionIdentifier",
    "VersionRequest",
    "VersionResolver",
    "VersioningError",
    "resolve",
]
