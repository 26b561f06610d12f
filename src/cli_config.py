"""Settings for the versioning CLI.

Merges values from, lowest to highest precedence: built-in defaults,
``pyproject.toml`` (``[project]`` and ``[tool.verscheme]``), a YAML/JSON config
file (explicit ``--config`` or a default location), environment variables and
CLI arguments.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

import yaml

from constants import Constants, _load_yaml_config

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """An explicitly requested configuration source cannot be used."""


def load_config_file(path: str) -> Dict[str, Any]:
    """Load an explicit YAML or JSON config file.

    Raises:
        ConfigError: The file is missing, unreadable or not a mapping.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_pyproject(search_dir: Optional[str] = None) -> Dict[str, Any]:
    """Return settings found in ``pyproject.toml``, or an empty dict."""
    path = os.path.join(search_dir or os.getcwd(), Constants.PYPROJECT_FILE)
    if not os.path.isfile(path):
        return {}
    try:
        try:
            import tomllib as toml  # type: ignore
        except Exception:  # pylint: disable=broad-exception-caught
            import tomli as toml  # type: ignore

        with open(path, "rb") as f:
            data = toml.load(f) or {}
    except (OSError, ValueError) as e:
        # tomllib.TOMLDecodeError is a ValueError
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return {}

    result: Dict[str, Any] = {}
    project = data.get("project")
    if isinstance(project, dict):
        if isinstance(project.get("version"), str):
            result["version"] = project["version"]
        if isinstance(project.get("name"), str):
            result["title"] = project["name"]
    tool = data.get("tool")
    if isinstance(tool, dict) and isinstance(tool.get("verscheme"), dict):
        result.update(tool["verscheme"])
    return result


def _as_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return [str(v) for v in value]


@dataclass
class VersioningSettings:
    """Resolved settings for one CLI invocation."""

    version: Optional[str] = None
    build_type: Optional[str] = None
    title: Optional[str] = None
    vendor: Optional[str] = None
    build_dir: str = Constants.DEFAULT_BUILD_DIR
    internal_groups: List[str] = field(default_factory=list)
    build_configs: List[str] = field(default_factory=lambda: list(Constants.BUILD_CONFIGS))
    snapshots_url: Optional[str] = None
    candidates_url: Optional[str] = None
    property_prefix: str = Constants.PROPERTY_PREFIX

    def apply(self, values: Mapping[str, Any]) -> None:
        """Overlay non-None ``values`` onto these settings; unknown keys are ignored."""
        flat = dict(values)
        repos = flat.pop("repositories", None)
        if isinstance(repos, dict):
            flat.setdefault("snapshots_url", repos.get("snapshots_url") or repos.get("snapshots"))
            flat.setdefault("candidates_url", repos.get("candidates_url") or repos.get("candidates"))
        known = {f.name for f in fields(self)}
        for key, value in flat.items():
            name = key.replace("-", "_")
            if name not in known:
                if value is not None:
                    logger.debug("Ignoring unknown setting %s", key)
                continue
            if value is None:
                continue
            if name in ("internal_groups", "build_configs"):
                value = _as_list(value)
            elif not isinstance(value, str):
                value = str(value)
            setattr(self, name, value)

    @classmethod
    def from_sources(
        cls,
        args: Any = None,
        environ: Optional[Mapping[str, str]] = None,
        search_dir: Optional[str] = None,
    ) -> "VersioningSettings":
        """Build settings from all sources.

        Raises:
            ConfigError: ``--config`` was given and cannot be loaded.
        """
        env = os.environ if environ is None else environ
        settings = cls()
        settings.apply(load_pyproject(search_dir))

        config_path = getattr(args, "CONFIG", None)
        if isinstance(config_path, str) and config_path.strip():
            settings.apply(load_config_file(config_path))
        else:
            settings.apply(_load_yaml_config(search_dir))

        settings.apply({
            "version": env.get(Constants.ENV_VERSION) or None,
            "build_type": env.get(Constants.ENV_BUILD_TYPE) or None,
        })

        if args is not None:
            settings.apply({
                "version": getattr(args, "VERSION", None),
                "build_type": getattr(args, "BUILD_TYPE", None),
                "build_dir": getattr(args, "BUILD_DIR", None),
                "title": getattr(args, "TITLE", None),
                "vendor": getattr(args, "VENDOR", None),
                "internal_groups": getattr(args, "INTERNAL_GROUPS", None),
                "snapshots_url": getattr(args, "SNAPSHOTS_URL", None),
                "candidates_url": getattr(args, "CANDIDATES_URL", None),
            })
        return settings
