"""Tests for capturing build provenance from the environment."""

import logging
from datetime import datetime, timezone

from versioning.context import context_from_environment
from versioning.models import BuildContext

NOW = datetime(2024, 5, 1, 12, 30, 15, 987654, tzinfo=timezone.utc)


def test_timestamp_is_captured_once_and_truncated():
    ctx = context_from_environment({}, now=NOW)
    assert ctx.build_date == datetime(2024, 5, 1, 12, 30, 15, tzinfo=timezone.utc)


def test_naive_timestamp_is_treated_as_utc():
    ctx = context_from_environment({}, now=datetime(2024, 5, 1, 8, 0, 0))
    assert ctx.build_date.tzinfo == timezone.utc
    assert ctx.build_date.hour == 8


def test_default_timestamp_is_current_time():
    before = datetime.now(timezone.utc).replace(microsecond=0)
    ctx = context_from_environment({})
    assert ctx.build_date >= before


def test_build_number_precedence():
    env = {"GITHUB_RUN_NUMBER": "9", "BUILD_NUMBER": "7", "VERSCHEME_BUILD_NUMBER": ""}
    assert context_from_environment(env, now=NOW).build_number == "7"
    env["VERSCHEME_BUILD_NUMBER"] = "101"
    assert context_from_environment(env, now=NOW).build_number == "101"


def test_missing_build_number_is_absent():
    ctx = context_from_environment({"BUILD_NUMBER": "   "}, now=NOW)
    assert ctx.build_number is None


def test_candidate_index():
    ctx = context_from_environment({"VERSCHEME_CANDIDATE_INDEX": "2"}, now=NOW)
    assert ctx.candidate_index == 2


def test_bad_candidate_index_is_ignored(caplog):
    caplog.set_level(logging.WARNING)
    ctx = context_from_environment({"VERSCHEME_CANDIDATE_INDEX": "two"}, now=NOW)
    assert ctx.candidate_index is None
    assert "VERSCHEME_CANDIDATE_INDEX" in caplog.text

    ctx = context_from_environment({"VERSCHEME_CANDIDATE_INDEX": "0"}, now=NOW)
    assert ctx.candidate_index is None


def test_from_environment_classmethod(monkeypatch):
    monkeypatch.setenv("VERSCHEME_BUILD_NUMBER", "55")
    ctx = BuildContext.from_environment(now=NOW)
    assert ctx.build_number == "55"


def test_empty_build_number_normalized():
    assert BuildContext(build_number="").build_number is None
    assert BuildContext(build_number=" 12 ").build_number == "12"
