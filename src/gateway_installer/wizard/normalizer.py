"""Cross-field consistency rules for ``ProjectMetadata``."""

from __future__ import annotations

import dataclasses
from typing import Final

from gateway_installer.domain.models import DeploymentType, FrontendHosting, ProjectMetadata

# Fields whose edits can break hosting/deployment consistency.
HOSTING_FIELDS: Final[frozenset[str]] = frozenset({"deployment_type", "frontend_hosting"})


def hosting_options(deployment_type: DeploymentType) -> tuple[FrontendHosting, ...]:
    """Return the frontend hosting choices valid for ``deployment_type``."""

    if deployment_type is DeploymentType.LOCAL_ONLY:
        return (FrontendHosting.EXTERNAL_PLATFORM, FrontendHosting.SKIP)
    return (FrontendHosting.SAME_HOST, FrontendHosting.EXTERNAL_PLATFORM, FrontendHosting.SKIP)


def default_hosting(deployment_type: DeploymentType) -> FrontendHosting:
    return hosting_options(deployment_type)[0]


def normalize(config: ProjectMetadata) -> ProjectMetadata:
    """Return ``config`` with dependent fields made consistent.

    Pure and idempotent. A local-only deployment has no shared host, so
    ``same-host`` is rewritten to ``external-platform``. Already-consistent
    input is returned as the same object.
    """

    if (
        config.deployment_type is DeploymentType.LOCAL_ONLY
        and config.frontend_hosting is FrontendHosting.SAME_HOST
    ):
        return dataclasses.replace(config, frontend_hosting=FrontendHosting.EXTERNAL_PLATFORM)
    return config


def is_consistent(config: ProjectMetadata) -> bool:
    return config.frontend_hosting in hosting_options(config.deployment_type)


__all__ = [
    "HOSTING_FIELDS",
    "default_hosting",
    "hosting_options",
    "is_consistent",
    "normalize",
]
