"""Release dependency validation.

A release build may only depend on release builds of internal artifacts.
Dependencies on snapshot, timestamped or dynamic ("+") versions of any
internal group in a build configuration abort the release.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from constants import Constants
from versioning.models import VersionIdentifier
from versioning.parser import tokenize_rightmost_colon

logger = logging.getLogger(__name__)

_SNAPSHOT_DEPENDENCY = re.compile(Constants.SNAPSHOT_DEPENDENCY_PATTERN)


class ReleaseDependencyError(Exception):
    """A release build depends on snapshot internal artifacts."""

    def __init__(self, offenders: List["Dependency"]):
        self.offenders = offenders
        super().__init__(
            "Release build depends on snapshot artifacts: "
            + ", ".join(d.describe() for d in offenders)
        )


@dataclass(frozen=True)
class Dependency:
    """A declared dependency of the project."""
    group: Optional[str]
    name: str
    version: Optional[str]
    configuration: str = "implementation"

    def describe(self) -> str:
        return f"{self.group}:{self.name}:{self.version} ({self.configuration})"


def parse_dependency(line: str, default_configuration: str = "implementation") -> Dependency:
    """Parse ``group:name[:version][@configuration]``.

    Raises:
        ValueError: The line has no group or no name.
    """
    text = line.strip()
    configuration = default_configuration
    if "@" in text:
        text, configuration = text.rsplit("@", 1)
        configuration = configuration.strip() or default_configuration

    if text.count(":") >= 2:
        coordinate, version = tokenize_rightmost_colon(text)
    else:
        coordinate, version = text, None

    group, _, name = coordinate.partition(":")
    if not group.strip() or not name.strip():
        raise ValueError(f"Invalid dependency '{line.strip()}': expected group:name[:version][@configuration]")
    return Dependency(group=group.strip(), name=name.strip(), version=version, configuration=configuration)


def load_dependencies(path: str) -> List[Dependency]:
    """Read one dependency per line, skipping blank lines and ``#`` comments."""
    deps: List[Dependency] = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            deps.append(parse_dependency(stripped))
    return deps


def is_snapshot_version(version: Optional[str]) -> bool:
    """Return True for unpinned, snapshot, timestamped or dynamic versions."""
    return version is None or bool(_SNAPSHOT_DEPENDENCY.match(version))


def find_snapshot_dependencies(
    dependencies: Iterable[Dependency],
    internal_groups: Iterable[str],
    build_configs: Optional[Iterable[str]] = None,
) -> List[Dependency]:
    """Return internal dependencies in build configurations that are not releases."""
    groups = set(internal_groups)
    configs = set(build_configs if build_configs is not None else Constants.BUILD_CONFIGS)
    return [
        dep for dep in dependencies
        if dep.configuration in configs
        and dep.group is not None and dep.group in groups
        and is_snapshot_version(dep.version)
    ]


def validate_release_dependencies(
    identifier: VersionIdentifier,
    dependencies: Iterable[Dependency],
    internal_groups: Iterable[str],
    build_configs: Optional[Iterable[str]] = None,
) -> None:
    """Fail a release build that depends on snapshot internal artifacts.

    Non-release builds are not checked.

    Raises:
        ReleaseDependencyError: One or more offending dependencies were found.
    """
    if not identifier.is_release_build:
        return
    offenders = find_snapshot_dependencies(dependencies, internal_groups, build_configs)
    for dep in offenders:
        logger.error("Release build depends on snapshot artifact %s", dep.describe())
    if offenders:
        raise ReleaseDependencyError(offenders)
