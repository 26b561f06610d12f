"""Write the resolved project version to a file in the build directory."""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from constants import Constants
from versioning.models import VersionIdentifier

logger = logging.getLogger(__name__)


class VersionFileError(Exception):
    """The version file could not be written."""


def should_write_version_file(task_names: Optional[Sequence[str]]) -> bool:
    """Return False only when tasks were named and all of them are "clean"."""
    if not task_names:
        return True
    return any(name != Constants.CLEAN_TASK_NAME for name in task_names)


def write_version_file(
    identifier: VersionIdentifier,
    build_dir: str,
    filename: str = Constants.VERSION_FILENAME,
) -> str:
    """Write ``identifier``'s display version to ``build_dir/filename``.

    Returns:
        Path of the written file.

    Raises:
        VersionFileError: The directory or file could not be written.
    """
    path = os.path.join(build_dir, filename)
    try:
        os.makedirs(build_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(identifier.display_version)
    except OSError as e:
        raise VersionFileError(f"Cannot write version file {path}: {e}") from e
    logger.info("Project version %s written to %s", identifier.display_version, path)
    return path
