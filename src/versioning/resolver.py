"""Resolve a declared base version and build type into a VersionIdentifier."""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from .errors import IncompatibleBuildType, MissingProvenance, VersioningError
from .models import BuildContext, BuildType, VersionIdentifier
from .parser import find_build_qualifier, parse_base_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionRequest:
    """Resolution input for one (sub-)project."""
    project: str
    base_version: str
    build_type: BuildType
    context: BuildContext


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one request; exactly one of identifier/error is set."""
    project: str
    identifier: Optional[VersionIdentifier]
    error: Optional[VersioningError]


class VersionResolver:
    """Stateless resolver; one instance may be shared across threads."""

    def resolve(
        self,
        base_version: str,
        build_type: Union[BuildType, str],
        context: Optional[BuildContext] = None,
    ) -> VersionIdentifier:
        """Resolve ``base_version`` for ``build_type``.

        Args:
            base_version: Semantic version without snapshot/candidate qualifier.
            build_type: Build classification; there is no default.
            context: Build provenance. ``None`` means no provenance at all.

        Returns:
            The immutable VersionIdentifier.

        Raises:
            InvalidVersionFormat: base_version is not a semantic version.
            InvalidBuildType: build_type names no known build type.
            IncompatibleBuildType: base_version already embeds a qualifier.
        """
        build_type = BuildType.from_value(build_type)
        ctx = context if context is not None else BuildContext()
        base = parse_base_version(base_version)

        qualifier = find_build_qualifier(base)
        if qualifier is not None:
            if is_debug_enabled(logger):
                logger.debug(
                    "Rejecting version %s for %s build",
                    base_version, build_type.value,
                    extra=extra_context(event="decision", component="resolver", action="resolve",
                                        outcome="incompatible_build_type", target=str(base)),
                )
            raise IncompatibleBuildType(str(base), build_type.value, qualifier)

        candidate_index = None
        if build_type is BuildType.CANDIDATE:
            candidate_index = ctx.candidate_index or Constants.DEFAULT_CANDIDATE_INDEX

        if build_type is not BuildType.RELEASE:
            self._report_provenance_gaps(build_type, ctx)

        identifier = VersionIdentifier(
            base_version=base,
            build_type=build_type,
            build_date=ctx.build_date,
            build_number=ctx.build_number,
            candidate_index=candidate_index,
        )
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved version %s",
                identifier.display_version,
                extra=extra_context(event="decision", component="resolver", action="resolve",
                                    outcome="resolved", target=identifier.display_version,
                                    build_type=build_type.value),
            )
        return identifier

    def resolve_all(
        self,
        requests: Iterable[VersionRequest],
        max_workers: Optional[int] = None,
    ) -> Dict[str, ResolutionResult]:
        """Resolve several independent requests, keyed by project name.

        A failing request is reported in its own result and does not affect
        the others.

        Raises:
            ValueError: Two requests name the same project.
        """
        reqs: List[VersionRequest] = list(requests)
        if not reqs:
            return {}
        counts = Counter(r.project for r in reqs)
        duplicates = sorted(name for name, count in counts.items() if count > 1)
        if duplicates:
            raise ValueError(f"Duplicate project names in resolution requests: {', '.join(duplicates)}")

        def _one(req: VersionRequest) -> ResolutionResult:
            try:
                ident = self.resolve(req.base_version, req.build_type, req.context)
                return ResolutionResult(project=req.project, identifier=ident, error=None)
            except VersioningError as e:
                return ResolutionResult(project=req.project, identifier=None, error=e)

        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(_one, reqs))
        return {r.project: r for r in results}

    @staticmethod
    def _report_provenance_gaps(build_type: BuildType, ctx: BuildContext) -> None:
        for field, value in (("build_date", ctx.build_date), ("build_number", ctx.build_number)):
            if value is None:
                gap = MissingProvenance(field, build_type.value)
                logger.warning(
                    "%s", gap,
                    extra=extra_context(event="missing_provenance", component="resolver",
                                        action="resolve", outcome="degraded", field=field),
                )


_DEFAULT_RESOLVER = VersionResolver()


def resolve(
    base_version: str,
    build_type: Union[BuildType, str],
    context: Optional[BuildContext] = None,
) -> VersionIdentifier:
    """Resolve with a shared default resolver."""
    return _DEFAULT_RESOLVER.resolve(base_version, build_type, context)
