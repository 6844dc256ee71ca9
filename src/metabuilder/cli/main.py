#!/usr/bin/env python3
"""Entry point for the metabuilder CLI."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Callable, List, Sequence

from metabuilder import __version__
from metabuilder.adapters.host import HostEnvironment, detect_host
from metabuilder.app import CommandDispatcher, FailureSupervisor, ProjectRegistry, RuntimeContext
from metabuilder.domain import CapabilityKind, CommandInvocation
from metabuilder.domain.errors import ConfigurationError, MultipleCommandsNotAllowed, UsageError
from metabuilder.ports.tool_runner import ToolRunner
from metabuilder.projects import BUILTIN_PROJECTS
from metabuilder.settings import RuntimeSettings, load_settings

PROG = "metabuilder"

HELP_OVERVIEW = """Enterprise Governance Meta-Builder

One execution skeleton shared by many organizations. Each project supplies its
own bootstrap, compile, audit, AI-assist, sync, generate and self-heal
behaviour; anything it leaves out falls back to the shared defaults.
"""

HELP_EPILOG = f"""Built-in projects: {', '.join(sorted(BUILTIN_PROJECTS))}
Declarative projects: <name>.yaml in the working directory or $METABUILDER_HOME/projects.

Exit codes: 0 success, the failing command's code on runtime failure,
1 for usage and configuration errors.
"""


class MetaBuilderArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


class _CommandAction(argparse.Action):
    """Collect every command flag with its trailing arguments, in order."""

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        commands = list(getattr(namespace, self.dest, None) or [])
        commands.append((CapabilityKind.from_flag(option_string or ""), list(values or [])))
        setattr(namespace, self.dest, commands)


_COMMAND_HELP = {
    CapabilityKind.BOOTSTRAP: "Bootstrap the development environment: detect OS, install packages, check keys.",
    CapabilityKind.GENERATE: "Generate an artifact (script, python, java) at [path] (default ./<name>).",
    CapabilityKind.COMPILE: "Compile a specific target or the entire project.",
    CapabilityKind.AI_ASSIST: "Run an AI-assisted task (validate, commit, remediate, ...).",
    CapabilityKind.SYNC: "Run privacy-aware rclone synchronization of the audit log.",
    CapabilityKind.AUDIT: "Generate a compliance or audit report (spdx, risk, ...).",
    CapabilityKind.SELF_HEAL: "Manually trigger the self-healing and rollback mechanism.",
}


def build_parser() -> MetaBuilderArgumentParser:
    parser = MetaBuilderArgumentParser(
        prog=PROG,
        description=HELP_OVERVIEW,
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawTextHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    project = parser.add_argument_group("project")
    project.add_argument(
        "--project",
        action="append",
        nargs="?",
        const="",
        metavar="NAME",
        help="Load a project configuration (e.g. 'chimera', 'sentry').",
    )
    commands = parser.add_argument_group("core commands")
    for kind in CapabilityKind:
        contract = kind.contract
        commands.add_argument(
            kind.flag,
            dest="commands",
            action=_CommandAction,
            nargs="*",
            metavar=(contract.required + contract.optional + ("arg",))[0].upper(),
            help=f"{_COMMAND_HELP[kind]}\nusage: {contract.usage(kind.flag)}",
        )
    other = parser.add_argument_group("other flags")
    other.add_argument("--help", action="store_true", help="Show this help message.")
    other.add_argument("--version", action="store_true", help="Show the version.")
    other.add_argument("--no-color", action="store_true", help="Disable color output.")
    other.add_argument("--verbose", action="store_true", help="Echo DEBUG lines to the console.")
    return parser


def _invocation_from(options: argparse.Namespace) -> CommandInvocation:
    commands = options.commands or []
    if len(commands) > 1:
        raise MultipleCommandsNotAllowed([kind.flag for kind, _ in commands])
    if not commands:
        return CommandInvocation(command=None)
    kind, arguments = commands[0]
    return CommandInvocation(command=kind, arguments=tuple(arguments))


def _settings_for(raw: Sequence[str], settings: RuntimeSettings | None) -> RuntimeSettings:
    base = settings or load_settings()
    return base.with_overrides(
        color=False if "--no-color" in raw else None,
        verbose=True if "--verbose" in raw else None,
    )


def _run(ctx: RuntimeContext, parser: MetaBuilderArgumentParser, raw: List[str]) -> int:
    if not raw:
        ctx.console.echo(parser.format_help())
        return 1
    options = parser.parse_args(raw)
    if options.help:
        ctx.console.echo(parser.format_help())
        return 0
    if options.version:
        ctx.console.echo(f"{PROG} {__version__}")
        return 0

    invocation = _invocation_from(options)
    ctx.log.debug(f"Operator: {ctx.actor}; base packages: {' '.join(ctx.config.base_packages)}")
    registry = ProjectRegistry(ctx)
    supervisor = FailureSupervisor(ctx)
    dispatcher = CommandDispatcher(ctx, supervisor)
    try:
        for name in options.project or []:
            registry.load_project(name)
        loaded = registry.loaded
        dispatcher.dispatch(invocation, loaded.capabilities if loaded else None)
    except ConfigurationError:
        raise
    except Exception as exc:  # noqa: BLE001
        loaded = registry.loaded
        return supervisor.handle(
            exc,
            loaded.capabilities if loaded else None,
            command=invocation.describe(),
        )
    return 0


def _report_configuration_error(ctx: RuntimeContext, parser: MetaBuilderArgumentParser, exc: ConfigurationError) -> int:
    ctx.log.error(str(exc))
    ctx.console.fail(f"error: {exc}")
    ctx.console.fail(parser.format_usage().rstrip())
    return 1


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: RuntimeSettings | None = None,
    tools: ToolRunner | None = None,
    host_detector: Callable[[], HostEnvironment] = detect_host,
) -> int:
    raw = list(sys.argv[1:] if argv is None else argv)
    ctx = RuntimeContext(_settings_for(raw, settings), tools=tools, host_detector=host_detector)
    parser = build_parser()
    try:
        return _run(ctx, parser, raw)
    except ConfigurationError as exc:
        return _report_configuration_error(ctx, parser, exc)
    finally:
        ctx.log.info("Meta-Builder session finished.")


if __name__ == "__main__":
    sys.exit(main())
