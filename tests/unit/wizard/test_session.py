"""
gateway-installer — unit tests for the configuration state machine

File: tests/unit/wizard/test_session.py

Purpose
- Drive ``collect_configuration`` end to end through a scripted ``WizardIO``.
- Cover the walkthrough scenarios: happy path with domain normalization,
  hosting correction on edit, validation re-prompt, cancellation during the
  first pass, start-over, and edit isolation when an edit is dismissed.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from gateway_installer.domain.models import (
    DeploymentType,
    FrontendHosting,
    Integration,
    Network,
    ProjectMetadata,
)
from gateway_installer.wizard import Dismissed, collect_configuration
from gateway_installer.wizard.prompts import ConfigField
from gateway_installer.wizard.session import (
    CANCELLED_TEXT,
    CONFIRMED_TEXT,
    Cancel,
    Confirm,
    PromptSession,
    ReviewLoop,
    StartOver,
)
from gateway_installer.wizard.summary import SUMMARY_TITLE
from gateway_installer.wizard.validators import MSG_DOMAIN_INVALID, MSG_NAME_REQUIRED

SCENARIO_A = ("My Gw", "testnet", "hosted", "same-host", "HTTPS://API.Example.com/", [])


def _run(io: Any, clock: Callable[[], datetime]) -> ProjectMetadata | None:
    return collect_configuration(io, clock=clock)


@pytest.mark.unit
def test_happy_path_normalizes_domain(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io(*SCENARIO_A, "confirm")

    result = _run(io, fixed_clock)

    assert result is not None
    assert result.project_name == "My Gw"
    assert result.network is Network.TESTNET
    assert result.deployment_type is DeploymentType.HOSTED
    assert result.frontend_hosting is FrontendHosting.SAME_HOST
    assert result.domain == "api.example.com"
    assert result.integrations == frozenset()
    assert result.created_at == fixed_clock()
    assert io.remaining == 0
    assert ("outro", CONFIRMED_TEXT) in io.events


@pytest.mark.unit
def test_fields_are_asked_in_fixed_order(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io(*SCENARIO_A, "confirm")

    _run(io, fixed_clock)

    assert [spec.message for spec in io.asked[:6]] == [
        "Project name",
        "Network",
        "Deployment type",
        "Frontend hosting",
        "Domain name (optional, for HTTPS setup; blank to clear)",
        "Optional integrations (Use ↑/↓ to move, Space to toggle, Enter to confirm)",
    ]


@pytest.mark.unit
def test_hosting_options_follow_deployment_chosen_in_same_pass(
    scripted_io: Any, fixed_clock: Any
) -> None:
    io = scripted_io("gw", "mainnet", "local-only", "skip", "", ["stripe"], "confirm")

    result = _run(io, fixed_clock)

    hosting_spec = io.asked[3]
    assert [choice.value for choice in hosting_spec.choices] == ["external-platform", "skip"]
    assert result is not None
    assert result.frontend_hosting is FrontendHosting.SKIP
    assert result.integrations == frozenset({Integration.STRIPE})
    assert result.domain is None


@pytest.mark.unit
def test_deployment_edit_corrects_hosting_silently(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io(*SCENARIO_A, "edit", "deployment_type", "local-only", "confirm")

    result = _run(io, fixed_clock)

    assert result is not None
    assert result.deployment_type is DeploymentType.LOCAL_ONLY
    assert result.frontend_hosting is FrontendHosting.EXTERNAL_PLATFORM
    assert io.warnings == []


@pytest.mark.unit
def test_invalid_domain_is_reprompted(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io("gw", "testnet", "hosted", "same-host", "not a domain!", "", [], "confirm")

    result = _run(io, fixed_clock)

    domain_prompts = [spec for spec in io.asked if spec.message.startswith("Domain name")]
    assert len(domain_prompts) == 2
    assert io.warnings == [MSG_DOMAIN_INVALID]
    assert result is not None
    assert result.domain is None


@pytest.mark.unit
def test_empty_name_is_reprompted(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io("   ", *SCENARIO_A, "confirm")

    result = _run(io, fixed_clock)

    assert io.warnings == [MSG_NAME_REQUIRED]
    assert result is not None
    assert result.project_name == "My Gw"


@pytest.mark.unit
def test_cancel_during_first_pass_returns_none(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io("My Gw", Dismissed())

    result = _run(io, fixed_clock)

    assert result is None
    assert io.remaining == 0
    assert io.messages_of("cancel") == [CANCELLED_TEXT]
    assert not any(title == SUMMARY_TITLE for title, _ in io.notes)


@pytest.mark.unit
def test_start_over_discards_first_pass(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io(
        *SCENARIO_A,
        "start-over",
        "Second",
        "mainnet",
        "local-only",
        "external-platform",
        "localhost:8080",
        ["auth"],
        "confirm",
    )

    result = _run(io, fixed_clock)

    assert result is not None
    assert result.project_name == "Second"
    assert result.network is Network.MAINNET
    assert result.deployment_type is DeploymentType.LOCAL_ONLY
    assert result.domain == "localhost:8080"
    assert result.integrations == frozenset({Integration.AUTH})
    second_pass_name = io.asked[7]
    assert second_pass_name.message == "Project name"
    assert second_pass_name.default == ""


@pytest.mark.unit
@pytest.mark.parametrize("action", ["cancel", Dismissed()])
def test_review_cancel_returns_none(scripted_io: Any, fixed_clock: Any, action: object) -> None:
    io = scripted_io(*SCENARIO_A, action)

    assert _run(io, fixed_clock) is None
    assert io.messages_of("cancel") == [CANCELLED_TEXT]


@pytest.mark.unit
def test_summary_is_shown_before_every_review_prompt(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io(*SCENARIO_A, "edit", "project_name", "Renamed", "confirm")

    result = _run(io, fixed_clock)

    summaries = [body for title, body in io.notes if title == SUMMARY_TITLE]
    review_prompts = [spec for spec in io.asked if spec.message == "What would you like to do?"]
    assert len(summaries) == len(review_prompts) == 2
    assert "My Gw" in summaries[0]
    assert "Renamed" in summaries[1]
    assert result is not None
    assert result.project_name == "Renamed"


@pytest.mark.unit
def test_edit_prompt_is_seeded_with_current_value(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io(*SCENARIO_A, "edit", "domain", "", "confirm")

    result = _run(io, fixed_clock)

    edit_spec = io.asked[8]
    assert edit_spec.default == "api.example.com"
    assert result is not None
    assert result.domain is None


def _draft(fixed_clock: Callable[[], datetime]) -> ProjectMetadata:
    return ProjectMetadata(
        project_name="My Gw",
        network=Network.TESTNET,
        deployment_type=DeploymentType.HOSTED,
        frontend_hosting=FrontendHosting.SAME_HOST,
        created_at=fixed_clock(),
        domain="api.example.com",
    )


@pytest.mark.unit
@pytest.mark.parametrize("field", [f.value for f in ConfigField])
def test_dismissed_edit_leaves_config_untouched(
    scripted_io: Any, fixed_clock: Any, field: str
) -> None:
    draft = _draft(fixed_clock)
    io = scripted_io(field, Dismissed())

    assert ReviewLoop(io).edit(draft) is draft


@pytest.mark.unit
def test_dismissed_field_picker_leaves_config_untouched(
    scripted_io: Any, fixed_clock: Any
) -> None:
    draft = _draft(fixed_clock)
    io = scripted_io("edit", Dismissed(), "confirm")

    outcome = ReviewLoop(io).run(draft)

    assert outcome == Confirm(draft)
    assert isinstance(outcome, Confirm)
    assert outcome.config is draft


@pytest.mark.unit
def test_review_outcomes_are_tagged(scripted_io: Any, fixed_clock: Any) -> None:
    draft = _draft(fixed_clock)

    assert ReviewLoop(scripted_io("start-over")).run(draft) == StartOver()
    assert ReviewLoop(scripted_io("cancel")).run(draft) == Cancel()
    assert ReviewLoop(scripted_io(Dismissed())).run(draft) == Cancel()


@pytest.mark.unit
def test_hosting_edit_under_local_only_offers_reduced_options(
    scripted_io: Any, fixed_clock: Any
) -> None:
    draft = ProjectMetadata(
        project_name="gw",
        network=Network.TESTNET,
        deployment_type=DeploymentType.LOCAL_ONLY,
        frontend_hosting=FrontendHosting.EXTERNAL_PLATFORM,
        created_at=fixed_clock(),
    )
    io = scripted_io("frontend_hosting", "same-host", "skip")

    updated = ReviewLoop(io).edit(draft)

    assert updated.frontend_hosting is FrontendHosting.SKIP
    assert io.warnings == ["same-host is not available here."]


@pytest.mark.unit
def test_prompt_session_applies_normalizer_once(scripted_io: Any, fixed_clock: Any) -> None:
    io = scripted_io("gw", "testnet", "local-only", "external-platform", "", [])

    draft = PromptSession(io, clock=fixed_clock).collect_all()

    assert draft is not None
    assert draft.frontend_hosting is FrontendHosting.EXTERNAL_PLATFORM
    assert draft.created_at == fixed_clock()
