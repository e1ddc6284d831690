"""Domain models shared by the wizard, wallet walkthrough, and CLI."""

from gateway_installer.domain.models import (
    AccountRef,
    DeploymentType,
    FrontendHosting,
    Integration,
    Network,
    ProjectMetadata,
    WalletSetupResult,
    is_pokt_address,
    is_well_formed_domain,
)

__all__ = [
    "AccountRef",
    "DeploymentType",
    "FrontendHosting",
    "Integration",
    "Network",
    "ProjectMetadata",
    "WalletSetupResult",
    "is_pokt_address",
    "is_well_formed_domain",
]
