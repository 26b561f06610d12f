"""Publication metadata derived from a resolved version."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from constants import Constants
from versioning.models import VersionIdentifier

logger = logging.getLogger(__name__)


class PublishRefused(Exception):
    """Publishing this build to the requested channel is not allowed."""


def manifest_attributes(identifier: VersionIdentifier, title: str, vendor: Optional[str] = None) -> Dict[str, str]:
    """Return archive manifest attributes for ``identifier``."""
    attrs = {
        "Implementation-Title": title,
        "Implementation-Version": identifier.display_version,
    }
    if vendor:
        attrs["Implementation-Vendor"] = vendor
    return attrs


def publication_properties(identifier: VersionIdentifier, prefix: str = Constants.PROPERTY_PREFIX) -> Dict[str, str]:
    """Build provenance properties embedded in published metadata."""
    return {
        f"{prefix}.build.date": identifier.build_date_text,
        f"{prefix}.build.number": identifier.build_number_text,
    }


def select_repository(
    identifier: VersionIdentifier,
    snapshots_url: Optional[str],
    candidates_url: Optional[str],
) -> Optional[str]:
    """Pick the repository URL for ``identifier``.

    Snapshots go to the snapshots repository; candidates and releases go to
    the staging (candidates) repository. Returns None when the selected URL
    is not configured.
    """
    url = snapshots_url if identifier.is_snapshot_build else candidates_url
    if not url:
        logger.info("No repository configured for %s build", identifier.build_type.value)
        return None
    return url


def ensure_publishable(identifier: VersionIdentifier, channel: str) -> None:
    """Refuse to publish a snapshot build to a permanent channel.

    Raises:
        PublishRefused: ``identifier`` is a snapshot and ``channel`` is permanent.
    """
    if identifier.is_snapshot_build and channel.lower() in Constants.PERMANENT_CHANNELS:
        raise PublishRefused(
            f"Cannot publish developer build {identifier.display_version} to the {channel} channel"
        )
