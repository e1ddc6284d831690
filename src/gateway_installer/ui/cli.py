"""Command-line interface router for gateway-installer."""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Final

import structlog

from gateway_installer import __version__
from gateway_installer.config import (
    DEFAULT_CONFIG_FILE,
    ConfigLoadError,
    ConfigValidationError,
    dump_effective_config,
    load_config,
)
from gateway_installer.constants import WELCOME_BODY, WELCOME_TITLE
from gateway_installer.domain.models import Network, ProjectMetadata
from gateway_installer.main import ExitCode
from gateway_installer.observability import setup_logging, shutdown_logging
from gateway_installer.preflight import (
    PreflightReport,
    Runner,
    default_runner,
    format_failures,
    gate_preflight,
    run_checks,
)
from gateway_installer.ui.prompter import ConsoleIO, is_interactive_terminal
from gateway_installer.ui.render import CLIRenderer, create_renderer
from gateway_installer.utils.fs import write_secure_json
from gateway_installer.wallet import StakeSettings, run_wallet_setup
from gateway_installer.wizard import WizardIO, collect_configuration

NOT_INTERACTIVE_TEXT: Final[str] = (
    "This installer is interactive. Please run it in a terminal (TTY) to continue."
)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 1

    def __str__(self) -> str:
        return self.message


def _console_io(no_color: bool) -> WizardIO:
    return ConsoleIO(no_color=no_color)


@dataclass(frozen=True, slots=True)
class Capabilities:
    """Terminal and process capabilities injected into command handlers."""

    is_interactive: Callable[[], bool] = is_interactive_terminal
    make_io: Callable[[bool], WizardIO] = _console_io
    runner: Runner = default_runner


@dataclass(frozen=True, slots=True)
class CommandContext:
    args: argparse.Namespace
    settings: Mapping[str, Any]
    capabilities: Capabilities
    renderer: CLIRenderer
    session_id: str
    logger: Any

    @property
    def no_color(self) -> bool:
        return bool(self.settings["ui"]["no_color"])

    def section(self, name: str) -> dict[str, Any]:
        return dict(self.settings[name])


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router for all supported CLI workflows."""

    parser = argparse.ArgumentParser(
        prog="gateway-installer",
        description=(
            "gateway-installer: guided setup for a Pocket Network (Shannon) gateway.\n\n"
            "Common workflows:\n"
            "  gateway-installer run          Full guided setup\n"
            "  gateway-installer preflight    Check local tools only\n"
            "  gateway-installer configure    Collect project configuration only\n"
            "  gateway-installer config       Show effective installer settings\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help=f"Path to installer TOML settings (default: ./{DEFAULT_CONFIG_FILE} if present).",
    )
    common.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Disable colored output (also respects NO_COLOR env var).",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Log at DEBUG level and mirror log records to stderr.",
    )
    common.add_argument(
        "--log-dir",
        default=None,
        help="Base directory for session logs (overrides [logging] log_dir).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # run -----------------------------------------------------------------
    run_parser = subparsers.add_parser(
        "run",
        parents=[common],
        help="Preflight, configuration wizard and wallet walkthrough",
        description=(
            "Run the full guided setup.\n\n"
            "Examples:\n"
            "  gateway-installer run\n"
            "  gateway-installer run --skip-preflight --output .tmp/project.json\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_parser.add_argument(
        "--skip-preflight",
        action="store_true",
        default=False,
        help="Do not check local tools before the wizard.",
    )
    run_parser.add_argument(
        "--output",
        default=None,
        help="Write the confirmed project configuration to this JSON file (mode 0600).",
    )
    run_parser.set_defaults(handler=_cmd_run, interactive=True)

    # preflight -----------------------------------------------------------
    preflight_parser = subparsers.add_parser(
        "preflight",
        parents=[common],
        help="Check Python, Git, Docker and pocketd",
    )
    preflight_parser.add_argument("--json", action="store_true", default=False)
    preflight_parser.set_defaults(handler=_cmd_preflight, interactive=False)

    # configure -----------------------------------------------------------
    configure_parser = subparsers.add_parser(
        "configure",
        parents=[common],
        help="Run the configuration wizard only",
    )
    configure_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print the confirmed configuration as JSON.",
    )
    configure_parser.add_argument(
        "--output",
        default=None,
        help="Write the confirmed configuration to this JSON file (mode 0600).",
    )
    configure_parser.set_defaults(handler=_cmd_configure, interactive=True)

    # wallet --------------------------------------------------------------
    wallet_parser = subparsers.add_parser(
        "wallet",
        parents=[common],
        help="Walk through wallet creation, funding and staking",
    )
    wallet_parser.add_argument(
        "--network",
        choices=[member.value for member in Network],
        default=Network.TESTNET.value,
        help="Target network (default: testnet).",
    )
    wallet_parser.set_defaults(handler=_cmd_wallet, interactive=True)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Print effective installer settings",
    )
    config_parser.add_argument("--json", action="store_true", default=False)
    config_parser.set_defaults(handler=_cmd_config, interactive=False)

    return parser


# ---------------------------------------------------------------------------
# Entrypoints
# ---------------------------------------------------------------------------


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    capabilities: Capabilities | None = None,
) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return int(ExitCode.CONFIG_ERROR)

    caps = capabilities if capabilities is not None else Capabilities()
    try:
        settings = _load_settings(namespace)
        renderer = create_renderer(
            no_color=bool(settings["ui"]["no_color"]),
            verbose=_flag(namespace, "verbose"),
        )
        if _flag(namespace, "interactive") and not caps.is_interactive():
            renderer.welcome()
            print(NOT_INTERACTIVE_TEXT, file=sys.stderr)
            return int(ExitCode.NOT_INTERACTIVE)

        session_id = _new_session_id()
        handle = setup_logging(
            settings["logging"],
            session_id=session_id,
            verbose=_flag(namespace, "verbose"),
        )
        logger = structlog.get_logger(__name__)
        try:
            logger.info("command_started", command=namespace.command, version=__version__)
            context = CommandContext(
                args=namespace,
                settings=settings,
                capabilities=caps,
                renderer=renderer,
                session_id=session_id,
                logger=logger,
            )
            result = int(handler(context))
            logger.info("command_finished", command=namespace.command, exit_code=result)
            return result
        finally:
            shutdown_logging(handle)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    """Compatibility wrapper for main-module wiring."""

    return run_cli(argv)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_run(ctx: CommandContext) -> int:
    io = ctx.capabilities.make_io(ctx.no_color)
    io.note(WELCOME_BODY, WELCOME_TITLE)

    if _flag(ctx.args, "skip_preflight"):
        ctx.logger.info("preflight_skipped")
    else:
        report = _run_preflight(ctx)
        if not gate_preflight(io, report):
            return int(ExitCode.PREFLIGHT_FAILED)

    config = collect_configuration(io, logger=ctx.logger)
    if config is None:
        return int(ExitCode.CANCELLED)
    _write_output(ctx, io, config)

    result = run_wallet_setup(
        io,
        config.network,
        StakeSettings.from_settings(ctx.section("wallet")),
        logger=ctx.logger,
    )
    if result is None:
        return int(ExitCode.CANCELLED)
    return int(ExitCode.SUCCESS)


def _cmd_preflight(ctx: CommandContext) -> int:
    report = _run_preflight(ctx)
    exit_code = ExitCode.PREFLIGHT_FAILED if report.required_failures else ExitCode.SUCCESS

    if _flag(ctx.args, "json"):
        _emit_json({"command": "preflight", **report.to_dict()})
        return int(exit_code)

    renderer = ctx.renderer
    renderer.heading("Preflight checks")
    for result in report.results:
        if result.ok:
            renderer.ok(result.status_line)
        else:
            renderer.fail(result.status_line)
    if report.failures:
        renderer.blank()
        renderer.text(format_failures(report.failures))
    if report.passed:
        renderer.text("\nAll requirements satisfied.")
    elif not report.required_failures:
        renderer.text("\nOnly recommended checks failed.")
    return int(exit_code)


def _cmd_configure(ctx: CommandContext) -> int:
    io = ctx.capabilities.make_io(ctx.no_color)
    config = collect_configuration(io, logger=ctx.logger)
    if config is None:
        return int(ExitCode.CANCELLED)
    _write_output(ctx, io, config)
    if _flag(ctx.args, "json"):
        _emit_json(config.to_dict())
    return int(ExitCode.SUCCESS)


def _cmd_wallet(ctx: CommandContext) -> int:
    io = ctx.capabilities.make_io(ctx.no_color)
    network = Network(ctx.args.network)
    result = run_wallet_setup(
        io,
        network,
        StakeSettings.from_settings(ctx.section("wallet")),
        logger=ctx.logger,
    )
    return int(ExitCode.SUCCESS if result is not None else ExitCode.CANCELLED)


def _cmd_config(ctx: CommandContext) -> int:
    config_path = _optional_str(getattr(ctx.args, "config_path", None))
    if _flag(ctx.args, "json"):
        _emit_json({"command": "config", "config_path": config_path, "config": ctx.settings})
        return int(ExitCode.SUCCESS)

    ctx.renderer.kv("Config file", config_path or f"./{DEFAULT_CONFIG_FILE} (if present)")
    ctx.renderer.text(dump_effective_config(ctx.settings))
    return int(ExitCode.SUCCESS)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_preflight(ctx: CommandContext) -> PreflightReport:
    return run_checks(
        ctx.section("preflight"),
        runner=ctx.capabilities.runner,
        logger=ctx.logger,
    )


def _write_output(ctx: CommandContext, io: WizardIO, config: ProjectMetadata) -> None:
    output = _optional_str(getattr(ctx.args, "output", None))
    if output is None:
        return
    try:
        written = write_secure_json(Path(output), config.to_dict())
    except OSError as exc:
        raise CLIError(f"could not write {output}: {exc}", exit_code=1) from exc
    ctx.logger.info("configuration_written", path=str(written))
    io.message(f"Saved configuration to {written}")


def _load_settings(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, object] = {
        "ui.no_color": True if _flag(args, "no_color") else None,
        "logging.log_dir": _absolute_or_none(_optional_str(getattr(args, "log_dir", None))),
    }
    try:
        return load_config(
            _optional_str(getattr(args, "config_path", None)),
            cli_overrides=overrides,
        )
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=int(ExitCode.CONFIG_ERROR)) from exc


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _new_session_id() -> str:
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")
    return f"{stamp}-{uuid.uuid4().hex[:8]}"


def _absolute_or_none(raw: str | None) -> str | None:
    if raw is None:
        return None
    return Path(raw).expanduser().resolve().as_posix()


def _optional_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _flag(args: argparse.Namespace, name: str) -> bool:
    return bool(getattr(args, name, False))


__all__ = [
    "NOT_INTERACTIVE_TEXT",
    "CLIError",
    "Capabilities",
    "CommandContext",
    "build_parser",
    "main",
    "run_cli",
]
