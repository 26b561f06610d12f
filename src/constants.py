"""Constants used in the project."""

import json
import logging
import os
from enum import Enum

import yaml

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    VERSION_ERROR = 1
    USAGE_ERROR = 2
    POLICY_REFUSED = 3


class OutputFormats(Enum):
    """Output formats for the resolve command.

    Args:
        Enum (string): Output formats supported by the program.
    """

    JSON = "json"
    PROPERTIES = "properties"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "VERSCHEME_LOG_LEVEL"

    SEMVER_GRAMMAR = "MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]"
    SNAPSHOT_QUALIFIER = "SNAPSHOT"
    CANDIDATE_QUALIFIER = "rc"
    DEFAULT_CANDIDATE_INDEX = 1
    BUILD_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

    # Build provenance, first non-empty variable wins
    ENV_BUILD_NUMBER = [
        "VERSCHEME_BUILD_NUMBER",
        "BUILD_NUMBER",
        "GITHUB_RUN_NUMBER",
        "CI_PIPELINE_IID",
    ]
    ENV_CANDIDATE_INDEX = "VERSCHEME_CANDIDATE_INDEX"

    # Settings overrides
    ENV_VERSION = "VERSCHEME_VERSION"
    ENV_BUILD_TYPE = "VERSCHEME_BUILD_TYPE"

    VERSION_FILENAME = "projectversion.txt"
    DEFAULT_BUILD_DIR = "build"
    CLEAN_TASK_NAME = "clean"

    SNAPSHOT_DEPENDENCY_PATTERN = r".*(?:\+|-SNAPSHOT|-\d+)$"
    BUILD_CONFIGS = [
        "api",
        "compileOnly",
        "compileOnlyApi",
        "implementation",
        "runtimeOnly",
    ]
    PERMANENT_CHANNELS = ["release", "portal"]
    PROPERTY_PREFIX = "verscheme"

    PYPROJECT_FILE = "pyproject.toml"
    DEFAULT_CONFIG_FILES = [
        "verscheme.yml",
        "verscheme.yaml",
        ".verscheme.yml",
        "verscheme.json",
    ]


def _load_yaml_config(search_dir=None):
    """Load the first default configuration file found in ``search_dir``.

    Returns an empty dict when no default file exists or it cannot be parsed;
    default locations are optional.
    """
    base = search_dir or os.getcwd()
    for name in Constants.DEFAULT_CONFIG_FILES:
        path = os.path.join(base, name)
        if not os.path.isfile(path):
            continue
        try:
            with open(path, "r", encoding="utf-8") as fh:
                if name.endswith(".json"):
                    data = json.load(fh)
                else:
                    data = yaml.safe_load(fh)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.warning("Ignoring unreadable config file %s: %s", path, exc)
            return {}
        return data if isinstance(data, dict) else {}
    return {}
