"""Argument parsing functionality for verscheme."""

import argparse

from constants import OutputFormats

BUILD_TYPES = ["snapshot", "candidate", "release"]


def _add_common_options(parser):
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")


def _add_version_options(parser):
    parser.add_argument("-V", "--base-version",
                        dest="VERSION",
                        help="Base semantic version, i.e: 1.2.3 (default: config, pyproject.toml)",
                        action="store",
                        type=str)
    parser.add_argument("-t", "--build-type",
                        dest="BUILD_TYPE",
                        help="Build type: snapshot, candidate or release (no default)",
                        action="store",
                        type=str.lower,
                        choices=BUILD_TYPES)
    parser.add_argument("--build-number",
                        dest="BUILD_NUMBER",
                        help="Build number (default: CI environment)",
                        action="store",
                        type=str)
    parser.add_argument("--candidate-index",
                        dest="CANDIDATE_INDEX",
                        help="Release candidate index for candidate builds (default: 1)",
                        action="store",
                        type=int)


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="verscheme",
        description="verscheme - Project versioning scheme resolver",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action")
    subparsers.required = True

    p_version = subparsers.add_parser("version", help="Display the project version")
    _add_version_options(p_version)
    _add_common_options(p_version)

    p_resolve = subparsers.add_parser("resolve", help="Resolve the version and print its properties")
    _add_version_options(p_resolve)
    _add_common_options(p_resolve)
    p_resolve.add_argument("-f", "--format",
                           dest="OUTPUT_FORMAT",
                           help="Output format (json or properties)",
                           action="store",
                           type=str.lower,
                           choices=[f.value for f in OutputFormats],
                           default=OutputFormats.JSON.value)
    p_resolve.add_argument("--title",
                           dest="TITLE",
                           help="Implementation title for manifest attributes",
                           action="store",
                           type=str)
    p_resolve.add_argument("--vendor",
                           dest="VENDOR",
                           help="Implementation vendor for manifest attributes",
                           action="store",
                           type=str)

    p_file = subparsers.add_parser("write-version-file", help="Write the project version file")
    _add_version_options(p_file)
    _add_common_options(p_file)
    p_file.add_argument("-o", "--build-dir",
                        dest="BUILD_DIR",
                        help="Directory for the version file (default: build)",
                        action="store",
                        type=str)
    p_file.add_argument("--tasks",
                        dest="TASKS",
                        help="Tasks of the current build; nothing is written when all are 'clean'",
                        nargs="*",
                        default=[])

    p_deps = subparsers.add_parser("check-deps", help="Check that a release build has no snapshot dependencies")
    _add_version_options(p_deps)
    _add_common_options(p_deps)
    p_deps.add_argument("-d", "--dependencies",
                        dest="DEPENDENCIES_FILE",
                        help="File listing group:name[:version][@configuration], one per line",
                        action="store",
                        type=str,
                        required=True)
    p_deps.add_argument("-g", "--internal-group",
                        dest="INTERNAL_GROUPS",
                        help="Group whose artifacts must be releases (repeatable)",
                        action="append",
                        type=str)

    p_pub = subparsers.add_parser("publish-target", help="Select the publishing repository for the build")
    _add_version_options(p_pub)
    _add_common_options(p_pub)
    p_pub.add_argument("--channel",
                       dest="CHANNEL",
                       help="Publishing channel; snapshots are refused on release/portal",
                       action="store",
                       type=str.lower,
                       default="repository")
    p_pub.add_argument("--snapshots-url",
                       dest="SNAPSHOTS_URL",
                       help="Snapshots repository URL",
                       action="store",
                       type=str)
    p_pub.add_argument("--candidates-url",
                       dest="CANDIDATES_URL",
                       help="Candidates (staging) repository URL",
                       action="store",
                       type=str)

    return parser.parse_args(argv)
