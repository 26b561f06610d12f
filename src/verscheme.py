"""verscheme - Project versioning scheme resolver

Resolves the project version once per invocation and serves it to the
sub-commands: display, property export, version file, release dependency
check and publishing repository selection.

    Returns:
        int: Exit code
"""
import dataclasses
import json
import logging
import sys

from args import parse_args
from cli_config import ConfigError, VersioningSettings
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes, OutputFormats
from publishing import (
    PublishRefused,
    ensure_publishable,
    manifest_attributes,
    publication_properties,
    select_repository,
)
from release_guard import ReleaseDependencyError, load_dependencies, validate_release_dependencies
from version_file import VersionFileError, should_write_version_file, write_version_file
from versioning.errors import VersioningError
from versioning.models import BuildContext, BuildType, VersionIdentifier
from versioning.resolver import VersionResolver

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Required input is missing from every configuration source."""


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    level = None
    if getattr(args, "QUIET", False):
        level = logging.CRITICAL
    elif getattr(args, "LOG_LEVEL", None):
        level = getattr(logging, str(args.LOG_LEVEL).upper(), logging.INFO)
    configure_logging(level)
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        add_file_handler(log_file)
        logger.info("Logging to file: %s", log_file)


def build_context(args) -> BuildContext:
    """Capture provenance from the environment, then apply CLI overrides."""
    ctx = BuildContext.from_environment()
    overrides = {}
    if getattr(args, "BUILD_NUMBER", None):
        overrides["build_number"] = args.BUILD_NUMBER
    if getattr(args, "CANDIDATE_INDEX", None) is not None:
        if args.CANDIDATE_INDEX < 1:
            raise UsageError("--candidate-index must be a positive integer")
        overrides["candidate_index"] = args.CANDIDATE_INDEX
    return dataclasses.replace(ctx, **overrides) if overrides else ctx


def resolve_project_version(args, settings: VersioningSettings) -> VersionIdentifier:
    """Resolve the version named by ``settings`` for this invocation.

    Raises:
        UsageError: No base version or no build type was supplied.
        VersioningError: The version cannot be resolved.
    """
    if not settings.version:
        raise UsageError(
            "No base version given: use --base-version, "
            f"{Constants.ENV_VERSION}, a config file or [project].version in pyproject.toml"
        )
    if not settings.build_type:
        raise UsageError(
            f"No build type given: use --build-type or {Constants.ENV_BUILD_TYPE} "
            f"({', '.join(b.value for b in BuildType)})"
        )
    return VersionResolver().resolve(settings.version, settings.build_type, build_context(args))


def _print_properties(values) -> None:
    for key, value in values.items():
        print(f"{key}={'' if value is None else value}")


def cmd_version(_args, _settings, identifier) -> int:
    print(identifier.display_version)
    return ExitCodes.SUCCESS.value


def cmd_resolve(args, settings, identifier) -> int:
    props = publication_properties(identifier, settings.property_prefix)
    manifest = manifest_attributes(identifier, settings.title or "", settings.vendor)
    if getattr(args, "OUTPUT_FORMAT", OutputFormats.JSON.value) == OutputFormats.PROPERTIES.value:
        flat = {f"version.{k}": v for k, v in identifier.to_dict().items()}
        flat.update(props)
        flat.update(manifest)
        _print_properties(flat)
    else:
        print(json.dumps({
            **identifier.to_dict(),
            "properties": props,
            "manifest": manifest,
        }, indent=2))
    return ExitCodes.SUCCESS.value


def cmd_write_version_file(args, settings, identifier) -> int:
    if not should_write_version_file(getattr(args, "TASKS", None)):
        logger.info("Only the clean task requested; not writing the version file")
        return ExitCodes.SUCCESS.value
    path = write_version_file(identifier, settings.build_dir)
    print(path)
    return ExitCodes.SUCCESS.value


def cmd_check_deps(args, settings, identifier) -> int:
    try:
        deps = load_dependencies(args.DEPENDENCIES_FILE)
    except OSError as e:
        logger.error("Cannot read dependencies file %s: %s", args.DEPENDENCIES_FILE, e)
        return ExitCodes.VERSION_ERROR.value
    except ValueError as e:
        logger.error("%s", e)
        return ExitCodes.VERSION_ERROR.value
    try:
        validate_release_dependencies(identifier, deps, settings.internal_groups, settings.build_configs)
    except ReleaseDependencyError as e:
        sys.stderr.write(f"Error: {e}\n")
        return ExitCodes.POLICY_REFUSED.value
    logger.info("Checked %d dependencies for %s build", len(deps), identifier.build_type.value)
    return ExitCodes.SUCCESS.value


def cmd_publish_target(args, settings, identifier) -> int:
    try:
        ensure_publishable(identifier, getattr(args, "CHANNEL", "repository"))
    except PublishRefused as e:
        sys.stderr.write(f"Error: {e}\n")
        return ExitCodes.POLICY_REFUSED.value
    url = select_repository(identifier, settings.snapshots_url, settings.candidates_url)
    if url:
        print(url)
    return ExitCodes.SUCCESS.value


COMMANDS = {
    "version": cmd_version,
    "resolve": cmd_resolve,
    "write-version-file": cmd_write_version_file,
    "check-deps": cmd_check_deps,
    "publish-target": cmd_publish_target,
}


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    try:
        settings = VersioningSettings.from_sources(args)
        identifier = resolve_project_version(args, settings)
    except ConfigError as e:
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(ExitCodes.VERSION_ERROR.value)
    except UsageError as e:
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(ExitCodes.USAGE_ERROR.value)
    except VersioningError as e:
        sys.stderr.write(f"Error: {e}\n")
        sys.exit(ExitCodes.VERSION_ERROR.value)

    try:
        code = COMMANDS[args.action](args, settings, identifier)
    except VersionFileError as e:
        sys.stderr.write(f"Error: {e}\n")
        code = ExitCodes.VERSION_ERROR.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action=args.action,
                                outcome="success" if code == 0 else "failure")
        )
    sys.exit(code)


if __name__ == "__main__":
    main()
