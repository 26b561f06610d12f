"""Tests for version resolution across build types."""

import dataclasses
import logging
from datetime import datetime, timezone

import pytest
import semantic_version

from versioning import resolve
from versioning.errors import (
    IncompatibleBuildType,
    InvalidBuildType,
    InvalidVersionFormat,
    VersioningError,
)
from versioning.models import BuildContext, BuildType, VersionIdentifier
from versioning.resolver import VersionRequest, VersionResolver

T = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def resolver():
    return VersionResolver()


@pytest.fixture
def full_ctx():
    return BuildContext(build_date=T, build_number="42")


class TestScenarios:
    """Reference scenarios for the resolver contract."""

    def test_release_is_bare_base_version(self, resolver):
        ident = resolver.resolve("3.0.1", BuildType.RELEASE, BuildContext())
        assert ident.display_version == "3.0.1"
        assert ident.is_snapshot_build is False
        assert ident.is_release_build is True

    def test_snapshot_appends_qualifier_and_captures_date(self, resolver):
        ident = resolver.resolve("3.0.1", BuildType.SNAPSHOT, BuildContext(build_date=T))
        assert ident.display_version == "3.0.1-SNAPSHOT"
        assert ident.build_date == T
        assert ident.is_snapshot_build is True

    def test_release_rejects_snapshot_qualifier(self, resolver):
        with pytest.raises(IncompatibleBuildType) as exc:
            resolver.resolve("3.0.1-SNAPSHOT", BuildType.RELEASE, BuildContext())
        assert "3.0.1-SNAPSHOT" in str(exc.value)
        assert exc.value.build_type == "release"

    def test_malformed_version_fails(self, resolver):
        with pytest.raises(InvalidVersionFormat) as exc:
            resolver.resolve("not-a-version", BuildType.SNAPSHOT, BuildContext())
        message = str(exc.value)
        assert "not-a-version" in message
        assert "MAJOR.MINOR.PATCH" in message

    def test_candidate_has_rc_qualifier_and_build_number(self, resolver):
        ident = resolver.resolve("3.0.1", BuildType.CANDIDATE, BuildContext(build_number="42"))
        assert "-rc" in ident.display_version
        assert ident.display_version == "3.0.1-rc.1"
        assert ident.build_number == "42"
        assert ident.is_candidate_build is True
        assert ident.is_snapshot_build is False


class TestFormatting:
    """Display version composition."""

    def test_snapshot_after_existing_prerelease(self, resolver, full_ctx):
        ident = resolver.resolve("1.0.0-beta.2", BuildType.SNAPSHOT, full_ctx)
        assert ident.display_version == "1.0.0-beta.2-SNAPSHOT"

    def test_qualifier_precedes_build_metadata(self, resolver, full_ctx):
        ident = resolver.resolve("1.0.0+exp.sha.5114f85", BuildType.SNAPSHOT, full_ctx)
        assert ident.display_version == "1.0.0-SNAPSHOT+exp.sha.5114f85"

    def test_candidate_index_from_context(self, resolver):
        ident = resolver.resolve("2.1.0", BuildType.CANDIDATE, BuildContext(build_date=T, candidate_index=3))
        assert ident.display_version == "2.1.0-rc.3"
        assert ident.candidate_index == 3

    def test_release_keeps_plain_prerelease(self, resolver):
        ident = resolver.resolve("1.0.0-beta", BuildType.RELEASE, BuildContext())
        assert ident.display_version == "1.0.0-beta"

    def test_release_records_supplied_metadata(self, resolver, full_ctx):
        ident = resolver.resolve("1.0.0", BuildType.RELEASE, full_ctx)
        assert ident.display_version == "1.0.0"
        assert ident.build_number == "42"
        assert ident.build_date_text == "2024-05-01T12:30:00Z"

    def test_whitespace_is_trimmed(self, resolver):
        assert resolver.resolve("  1.2.3 ", "release").display_version == "1.2.3"

    def test_str_is_display_version(self, resolver, full_ctx):
        ident = resolver.resolve("1.2.3", BuildType.SNAPSHOT, full_ctx)
        assert str(ident) == "1.2.3-SNAPSHOT"

    def test_to_dict(self, resolver, full_ctx):
        data = resolver.resolve("1.2.3", BuildType.CANDIDATE, full_ctx).to_dict()
        assert data == {
            "version": "1.2.3-rc.1",
            "base_version": "1.2.3",
            "build_type": "candidate",
            "build_date": "2024-05-01T12:30:00Z",
            "build_number": "42",
            "candidate_index": 1,
            "snapshot": False,
        }


class TestErrors:
    """Format and policy failures."""

    @pytest.mark.parametrize("raw", ["1.2", "v1.2.3", "1.2.3.4", "", "   ", "1.2.3-"])
    def test_invalid_formats(self, resolver, raw):
        with pytest.raises(InvalidVersionFormat):
            resolver.resolve(raw, BuildType.RELEASE, BuildContext())

    def test_none_version(self, resolver):
        with pytest.raises(InvalidVersionFormat):
            resolver.resolve(None, BuildType.RELEASE, BuildContext())

    @pytest.mark.parametrize("raw", ["1.0.0-rc.1", "1.0.0-RC1", "1.0.0-rc", "1.0.0-beta-SNAPSHOT", "1.0.0-snapshot"])
    def test_embedded_qualifiers_rejected_for_release(self, resolver, raw):
        with pytest.raises(IncompatibleBuildType):
            resolver.resolve(raw, BuildType.RELEASE, BuildContext())

    @pytest.mark.parametrize("build_type", [BuildType.SNAPSHOT, BuildType.CANDIDATE])
    def test_embedded_qualifiers_rejected_for_prerelease_builds(self, resolver, full_ctx, build_type):
        with pytest.raises(IncompatibleBuildType):
            resolver.resolve("1.0.0-SNAPSHOT", build_type, full_ctx)

    def test_build_type_from_string(self, resolver):
        assert resolver.resolve("1.0.0", "Release").build_type is BuildType.RELEASE

    def test_unknown_build_type(self, resolver):
        with pytest.raises(InvalidBuildType) as exc:
            resolver.resolve("1.0.0", "nightly", BuildContext())
        assert isinstance(exc.value, ValueError)
        assert "nightly" in str(exc.value)

    def test_build_type_has_no_default(self, resolver):
        with pytest.raises(InvalidBuildType):
            resolver.resolve("1.0.0", None, BuildContext())

    def test_errors_share_base_class(self):
        assert issubclass(InvalidVersionFormat, VersioningError)
        assert issubclass(IncompatibleBuildType, VersioningError)

    def test_rejection_is_left_to_the_caller_to_report(self, resolver, caplog):
        caplog.set_level(logging.INFO)
        with pytest.raises(IncompatibleBuildType):
            resolver.resolve("1.0.0-SNAPSHOT", BuildType.RELEASE, BuildContext())
        with pytest.raises(InvalidVersionFormat):
            resolver.resolve("1.0", BuildType.RELEASE, BuildContext())
        assert caplog.records == []


class TestProvenance:
    """Missing build metadata is reported, never fatal."""

    def test_snapshot_without_build_number_warns(self, resolver, caplog):
        caplog.set_level(logging.WARNING)
        ident = resolver.resolve("1.0.0", BuildType.SNAPSHOT, BuildContext(build_date=T))
        assert ident.build_number is None
        assert ident.build_number_text == ""
        assert "No build number available for snapshot build" in caplog.text
        assert "build date" not in caplog.text

    def test_candidate_without_any_provenance_warns_twice(self, resolver, caplog):
        caplog.set_level(logging.WARNING)
        ident = resolver.resolve("1.0.0", BuildType.CANDIDATE, BuildContext())
        assert ident.build_date is None
        assert ident.build_date_text == ""
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2

    def test_release_without_provenance_is_silent(self, resolver, caplog):
        caplog.set_level(logging.WARNING)
        resolver.resolve("1.0.0", BuildType.RELEASE, BuildContext())
        assert caplog.records == []

    def test_none_context_means_no_provenance(self, resolver):
        ident = resolver.resolve("1.0.0", BuildType.SNAPSHOT, None)
        assert ident.build_date is None
        assert ident.build_number is None


class TestPurity:
    """Resolution is deterministic and the result is immutable."""

    def test_identical_inputs_identical_output(self, resolver, full_ctx):
        a = resolver.resolve("4.5.6", BuildType.SNAPSHOT, full_ctx)
        b = resolver.resolve("4.5.6", BuildType.SNAPSHOT, full_ctx)
        assert a == b
        assert a.display_version == b.display_version
        assert a.build_date == b.build_date
        assert a.build_number == b.build_number

    def test_identifier_is_frozen(self, resolver, full_ctx):
        ident = resolver.resolve("4.5.6", BuildType.SNAPSHOT, full_ctx)
        with pytest.raises(dataclasses.FrozenInstanceError):
            ident.build_type = BuildType.RELEASE

    def test_module_level_resolve(self, full_ctx):
        ident = resolve("1.0.0", BuildType.SNAPSHOT, full_ctx)
        assert isinstance(ident, VersionIdentifier)
        assert ident.display_version == "1.0.0-SNAPSHOT"


class TestResolveAll:
    """Independent resolution of several sub-projects."""

    def test_results_keyed_by_project(self, resolver, full_ctx):
        requests = [
            VersionRequest("core", "1.0.0", BuildType.RELEASE, full_ctx),
            VersionRequest("api", "2.0.0", BuildType.SNAPSHOT, full_ctx),
            VersionRequest("broken", "2.0", BuildType.SNAPSHOT, full_ctx),
        ]
        results = resolver.resolve_all(requests, max_workers=2)
        assert set(results) == {"core", "api", "broken"}
        assert results["core"].identifier.display_version == "1.0.0"
        assert results["api"].identifier.display_version == "2.0.0-SNAPSHOT"
        assert results["broken"].identifier is None
        assert isinstance(results["broken"].error, InvalidVersionFormat)

    def test_empty(self, resolver):
        assert resolver.resolve_all([]) == {}

    def test_duplicate_project_names_rejected(self, resolver, full_ctx):
        requests = [
            VersionRequest("core", "1.0.0", BuildType.RELEASE, full_ctx),
            VersionRequest("core", "2.0.0", BuildType.SNAPSHOT, full_ctx),
        ]
        with pytest.raises(ValueError) as exc:
            resolver.resolve_all(requests)
        assert "core" in str(exc.value)


class TestIdentifierInvariants:
    """Directly constructed identifiers obey the same rules as resolved ones."""

    def test_candidate_requires_index(self):
        with pytest.raises(ValueError):
            VersionIdentifier(semantic_version.Version("1.0.0"), BuildType.CANDIDATE)

    @pytest.mark.parametrize("index", [0, -1, True, "2"])
    def test_candidate_index_must_be_positive_int(self, index):
        with pytest.raises(ValueError):
            VersionIdentifier(semantic_version.Version("1.0.0"), BuildType.CANDIDATE, candidate_index=index)

    @pytest.mark.parametrize("build_type", [BuildType.SNAPSHOT, BuildType.RELEASE])
    def test_index_only_for_candidates(self, build_type):
        with pytest.raises(ValueError):
            VersionIdentifier(semantic_version.Version("1.0.0"), build_type, candidate_index=2)

    @pytest.mark.parametrize("raw", ["1.0.0-SNAPSHOT", "1.0.0-snapshot", "1.0.0-rc.1", "1.0.0-beta-RC2"])
    def test_embedded_qualifier_rejected(self, raw):
        with pytest.raises(IncompatibleBuildType) as exc:
            VersionIdentifier(semantic_version.Version(raw), BuildType.RELEASE)
        assert exc.value.build_type == "release"

    def test_valid_direct_construction(self):
        ident = VersionIdentifier(semantic_version.Version("1.0.0-beta"), BuildType.CANDIDATE, candidate_index=2)
        assert ident.display_version == "1.0.0-beta-rc.2"
