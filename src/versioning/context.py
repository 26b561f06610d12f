"""Capture build provenance from the invoking environment.

This is the only place that reads the clock or environment variables; the
resolver itself receives a ready ``BuildContext``.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Mapping, Optional

from common.logging_utils import extra_context
from constants import Constants
from .models import BuildContext

logger = logging.getLogger(__name__)


def _first_env(environ: Mapping[str, str], names) -> Optional[str]:
    for name in names:
        value = environ.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _candidate_index(environ: Mapping[str, str]) -> Optional[int]:
    raw = environ.get(Constants.ENV_CANDIDATE_INDEX)
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        value = 0
    if value < 1:
        logger.warning(
            "Ignoring %s=%r: expected a positive integer",
            Constants.ENV_CANDIDATE_INDEX, raw,
            extra=extra_context(event="config", component="context", action="candidate_index", outcome="ignored"),
        )
        return None
    return value


def context_from_environment(
    environ: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
) -> BuildContext:
    """Build a ``BuildContext`` from environment variables.

    Args:
        environ: Mapping to read instead of ``os.environ``.
        now: Timestamp to record instead of the current time.

    Returns:
        BuildContext with the timestamp truncated to whole seconds (UTC).
    """
    env = os.environ if environ is None else environ
    stamp = now if now is not None else datetime.now(timezone.utc)
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return BuildContext(
        build_date=stamp.astimezone(timezone.utc).replace(microsecond=0),
        build_number=_first_env(env, Constants.ENV_BUILD_NUMBER),
        candidate_index=_candidate_index(env),
    )
