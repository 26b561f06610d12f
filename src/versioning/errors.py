"""Error types raised while resolving project versions."""

from typing import Optional

from constants import Constants


class VersioningError(Exception):
    """Base class for fatal version resolution errors."""


class InvalidVersionFormat(VersioningError, ValueError):
    """The base version string does not follow semantic versioning."""

    def __init__(self, raw: str, reason: Optional[str] = None):
        self.raw = raw
        self.reason = reason
        message = (
            f"Invalid version '{raw}': expected {Constants.SEMVER_GRAMMAR} "
            "(e.g. 1.2.3, 1.2.3-beta.1, 1.2.3+20240101)"
        )
        if reason:
            message = f"{message}; {reason}"
        super().__init__(message)


class InvalidBuildType(VersioningError, ValueError):
    """The build type name is not one of snapshot, candidate or release."""

    def __init__(self, value: object, choices):
        self.value = value
        self.choices = list(choices)
        super().__init__(
            f"Invalid build type '{value}': expected one of {', '.join(self.choices)}"
        )


class IncompatibleBuildType(VersioningError):
    """The base version already embeds a qualifier that conflicts with the build type."""

    def __init__(self, raw: str, build_type: str, qualifier: str):
        self.raw = raw
        self.build_type = build_type
        self.qualifier = qualifier
        super().__init__(
            f"Version '{raw}' already carries the '{qualifier}' qualifier and cannot be "
            f"resolved as a {build_type} build; declare the bare base version "
            f"({Constants.SEMVER_GRAMMAR}) and select the build type explicitly"
        )


class MissingProvenance(UserWarning):
    """Advisory build metadata is unavailable; resolution continues without it."""

    def __init__(self, field: str, build_type: str):
        self.field = field
        self.build_type = build_type
        super().__init__(
            f"No {field.replace('_', ' ')} available for {build_type} build; "
            "leaving it empty"
        )
