"""Human-readable summary of a collected configuration."""

from __future__ import annotations

from gateway_installer.domain.models import ProjectMetadata, ordered_integrations
from gateway_installer.wizard.prompts import (
    DEPLOYMENT_LABELS,
    HOSTING_LABELS,
    INTEGRATION_LABELS,
    ConfigField,
)

SUMMARY_TITLE = "Review your configuration"


def summary_rows(config: ProjectMetadata) -> list[tuple[str, str]]:
    """Return ``(label, value)`` pairs for all six editable fields, in order."""

    integrations = ordered_integrations(config.integrations)
    return [
        (ConfigField.PROJECT_NAME.label, config.project_name),
        (ConfigField.NETWORK.label, config.network.value),
        (ConfigField.DEPLOYMENT_TYPE.label, DEPLOYMENT_LABELS[config.deployment_type]),
        (ConfigField.FRONTEND_HOSTING.label, HOSTING_LABELS[config.frontend_hosting]),
        (ConfigField.DOMAIN.label, config.domain or "(none)"),
        (
            ConfigField.INTEGRATIONS.label,
            ", ".join(INTEGRATION_LABELS[item] for item in integrations) or "(none)",
        ),
    ]


def format_summary(config: ProjectMetadata) -> str:
    rows = summary_rows(config)
    width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label.ljust(width)}  {value}" for label, value in rows)


__all__ = ["SUMMARY_TITLE", "format_summary", "summary_rows"]
