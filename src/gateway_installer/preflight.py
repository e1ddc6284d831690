"""Local tool preflight checks.

File: src/gateway_installer/preflight.py

Purpose
- Verify the operator's environment before the wizard: Python interpreter,
  Git, Docker (CLI and daemon) and the ``pocketd`` CLI.
- Return structured ``CheckResult`` values; presentation and the
  continue/abort decision live in ``gate_preflight``.

Detection is offline: only local ``<tool> --version`` style probes are run.
"""

from __future__ import annotations

import platform
import re
import subprocess
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

import structlog

from gateway_installer.constants import DEFAULT_MIN_PYTHON, DEFAULT_PROBE_TIMEOUT_SECONDS
from gateway_installer.wizard.io import WizardIO, ask_valid
from gateway_installer.wizard.prompts import Answered, confirm_prompt

Runner = Callable[[Sequence[str], float], "subprocess.CompletedProcess[str]"]

# 1-4 numeric segments; "2.46.2.windows.1" yields "2.46.2"
VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"\d+(?:\.\d+){0,3}")
FALLBACK_VERSION_ARGS: Final[tuple[tuple[str, ...], ...]] = (("-v",), ("version",))

PYTHON_HELP_URL: Final[str] = "https://www.python.org/downloads/"
GIT_HELP_URL: Final[str] = "https://git-scm.com/downloads"
DOCKER_INSTALL_URL: Final[str] = "https://docs.docker.com/get-docker/"
DOCKER_DESKTOP_URL: Final[str] = "https://docs.docker.com/desktop/"
POCKETD_HELP_URL: Final[str] = "https://dev.poktroll.com/explore/account_management/pocketd_cli"

PREFLIGHT_INTRO: Final[str] = (
    "We'll quickly verify your environment: Python, Git, Docker, and pocketd."
)
ALL_PASSED_TEXT: Final[str] = "All requirements satisfied. Onward!"
REQUIRED_FAILED_TEXT: Final[str] = "Please resolve the above and re-run the installer."
CONTINUE_PROMPT: Final[str] = "Only recommended checks failed. Continue anyway?"


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Outcome of one tool check. ``reason``/``hint``/``help_url`` describe failures."""

    ok: bool
    name: str
    required: bool
    version: str | None = None
    reason: str | None = None
    hint: str | None = None
    help_url: str | None = None

    @property
    def status_line(self) -> str:
        if self.ok:
            return f"{self.name} ✓ ({self.version})" if self.version else f"{self.name} ✓"
        return f"{self.name} ✗"

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "ok": self.ok,
            "required": self.required,
            "version": self.version,
            "reason": self.reason,
            "hint": self.hint,
            "help_url": self.help_url,
        }


@dataclass(frozen=True, slots=True)
class PreflightReport:
    results: tuple[CheckResult, ...]

    @property
    def failures(self) -> tuple[CheckResult, ...]:
        return tuple(result for result in self.results if not result.ok)

    @property
    def required_failures(self) -> tuple[CheckResult, ...]:
        return tuple(result for result in self.failures if result.required)

    @property
    def passed(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict[str, object]:
        return {
            "passed": self.passed,
            "required_failed": bool(self.required_failures),
            "checks": [result.to_dict() for result in self.results],
        }


def compare_versions(left: str, right: str) -> int:
    """Compare dotted numeric versions, zero-padding the shorter one.

    Returns -1, 0 or 1. Non-numeric segments compare as 0.
    """

    def _segments(value: str) -> list[int]:
        parts: list[int] = []
        for raw in value.strip().split("."):
            match = re.match(r"\d+", raw)
            parts.append(int(match.group(0)) if match else 0)
        return parts

    left_parts = _segments(left)
    right_parts = _segments(right)
    width = max(len(left_parts), len(right_parts))
    left_parts += [0] * (width - len(left_parts))
    right_parts += [0] * (width - len(right_parts))
    if left_parts > right_parts:
        return 1
    if left_parts < right_parts:
        return -1
    return 0


def default_runner(argv: Sequence[str], timeout: float) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        list(argv),
        capture_output=True,
        text=True,
        timeout=timeout,
        check=False,
    )


def _run_ok(runner: Runner, argv: Sequence[str], timeout: float) -> str | None:
    try:
        result = runner(argv, timeout)
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout or ""


def probe_version(
    command: str,
    args: Sequence[str] = ("--version",),
    *,
    runner: Runner = default_runner,
    timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
) -> str | None:
    """Return the first version found by ``command args``, ``-v`` or ``version``.

    ``None`` when the binary is missing or every probe fails.
    """

    for probe_args in (tuple(args), *FALLBACK_VERSION_ARGS):
        output = _run_ok(runner, [command, *probe_args], timeout)
        if output is None:
            continue
        text = output.strip()
        match = VERSION_PATTERN.search(text)
        if match is not None:
            return match.group(0)
        if text:
            return text
    return None


def check_python(
    min_version: str = DEFAULT_MIN_PYTHON, *, current: str | None = None
) -> CheckResult:
    detected = current if current is not None else platform.python_version()
    if compare_versions(detected, min_version) < 0:
        return CheckResult(
            ok=False,
            name="Python",
            required=True,
            version=detected,
            reason=f"Detected {detected}, requires >= {min_version}",
            hint=f"Install Python {min_version} or newer.",
            help_url=PYTHON_HELP_URL,
        )
    return CheckResult(ok=True, name="Python", required=True, version=detected)


def check_git(
    *, runner: Runner = default_runner, timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS
) -> CheckResult:
    version = probe_version("git", runner=runner, timeout=timeout)
    if version is None:
        return CheckResult(
            ok=False,
            name="Git",
            required=True,
            reason="Not found",
            hint="Install Git and re-run the installer in your terminal.",
            help_url=GIT_HELP_URL,
        )
    return CheckResult(ok=True, name="Git", required=True, version=version)


def check_docker(
    *,
    required: bool = False,
    runner: Runner = default_runner,
    timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS,
    platform_name: str | None = None,
) -> CheckResult:
    version = probe_version("docker", runner=runner, timeout=timeout)
    if version is None:
        return CheckResult(
            ok=False,
            name="Docker",
            required=required,
            reason="CLI not found",
            hint="Install Docker Desktop (or dockerd/colima) and ensure it's running.",
            help_url=DOCKER_INSTALL_URL,
        )

    if _run_ok(runner, ["docker", "info"], timeout) is None:
        current_platform = platform_name if platform_name is not None else sys.platform
        if current_platform.startswith("win"):
            hint = "Open Docker Desktop and wait until it shows 'Running'."
        else:
            hint = (
                "Start Docker (Docker Desktop, dockerd, or colima) "
                "and ensure the daemon is running."
            )
        return CheckResult(
            ok=False,
            name="Docker",
            required=required,
            version=version,
            reason="Docker CLI found but the daemon isn't reachable",
            hint=hint,
            help_url=DOCKER_DESKTOP_URL,
        )

    return CheckResult(ok=True, name="Docker", required=required, version=version)


def check_pocketd(
    *, runner: Runner = default_runner, timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS
) -> CheckResult:
    version = probe_version("pocketd", runner=runner, timeout=timeout)
    if version is None:
        return CheckResult(
            ok=False,
            name="pocketd",
            required=True,
            reason="Not found in PATH",
            hint="Install the pocketd CLI, then re-run the installer in your terminal.",
            help_url=POCKETD_HELP_URL,
        )
    return CheckResult(ok=True, name="pocketd", required=True, version=version)


def run_checks(
    preflight_settings: Mapping[str, object] | None = None,
    *,
    runner: Runner = default_runner,
    python_version: str | None = None,
    logger: Any | None = None,
) -> PreflightReport:
    """Run every check in order: Python, Git, Docker, pocketd."""

    cfg = dict(preflight_settings or {})
    raw_timeout = cfg.get("probe_timeout_seconds", DEFAULT_PROBE_TIMEOUT_SECONDS)
    timeout = (
        float(raw_timeout)
        if isinstance(raw_timeout, (int, float))
        else DEFAULT_PROBE_TIMEOUT_SECONDS
    )
    min_python = str(cfg.get("min_python", DEFAULT_MIN_PYTHON))
    docker_required = bool(cfg.get("docker_required", False))
    log = logger if logger is not None else structlog.get_logger(__name__)

    results = (
        check_python(min_python, current=python_version),
        check_git(runner=runner, timeout=timeout),
        check_docker(required=docker_required, runner=runner, timeout=timeout),
        check_pocketd(runner=runner, timeout=timeout),
    )
    for result in results:
        log.info(
            "preflight_check",
            tool=result.name,
            ok=result.ok,
            required=result.required,
            version=result.version,
            reason=result.reason,
        )
    return PreflightReport(results=results)


def format_failures(failures: Sequence[CheckResult]) -> str:
    """Collate failures into one block; hints and links appear once per tool."""

    lines: list[str] = ["Some required tools are missing or not ready:", ""]
    for failure in failures:
        lines.append(f"• {failure.name}: {failure.reason}")
        if failure.hint:
            lines.append(f"  - {failure.hint}")
        if failure.help_url:
            lines.append(f"  - {failure.help_url}")
        lines.append("")
    return "\n".join(lines).rstrip("\n")


def gate_preflight(io: WizardIO, report: PreflightReport) -> bool:
    """Present ``report`` and decide whether the installer may continue.

    Required failures always stop. When only recommended checks failed the
    operator is asked to continue; the default and any dismissal is no.
    """

    io.note(PREFLIGHT_INTRO, "Preflight checks")
    for result in report.results:
        if result.ok:
            io.success(result.status_line)
        else:
            io.warning(result.status_line)

    if report.passed:
        io.message(ALL_PASSED_TEXT)
        return True

    io.note(format_failures(report.failures), "Preflight")
    if report.required_failures:
        io.cancel(REQUIRED_FAILED_TEXT)
        return False

    outcome = ask_valid(io, confirm_prompt(CONTINUE_PROMPT, default=False))
    if isinstance(outcome, Answered) and outcome.value is True:
        return True
    io.cancel("Aborted.")
    return False


__all__ = [
    "CheckResult",
    "PreflightReport",
    "Runner",
    "VERSION_PATTERN",
    "check_docker",
    "check_git",
    "check_pocketd",
    "check_python",
    "compare_versions",
    "default_runner",
    "format_failures",
    "gate_preflight",
    "probe_version",
    "run_checks",
]
