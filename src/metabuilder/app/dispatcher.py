"""Validates one invocation and routes it to the bound capability."""

from __future__ import annotations

from enum import Enum
from functools import partial
from typing import Any, Callable, Optional, Tuple

from metabuilder.domain import (
    AITaskKind,
    ArtifactKind,
    AuditReportKind,
    CapabilityKind,
    CommandInvocation,
    MetaCommand,
)
from metabuilder.domain.errors import MissingProject, NoCommandSpecified

from .capabilities import CapabilitySet
from .context import RuntimeContext
from .supervisor import FailureSupervisor


class DispatchState(str, Enum):
    IDLE = "idle"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


PreparedCall = Tuple[CapabilityKind, Callable[[], Optional[str]]]


class CommandDispatcher:
    """Dispatches exactly one capability command per instance."""

    def __init__(self, context: RuntimeContext, supervisor: FailureSupervisor) -> None:
        self._context = context
        self._supervisor = supervisor
        self._state = DispatchState.IDLE

    @property
    def state(self) -> DispatchState:
        return self._state

    def prepare(self, invocation: CommandInvocation, capabilities: CapabilitySet | None) -> PreparedCall:
        """Run every validation step and bind the call without executing it."""
        command = invocation.command
        if command is None:
            raise NoCommandSpecified()
        if isinstance(command, MetaCommand):
            raise ValueError(f"Meta command --{command.value} is not dispatchable")
        if capabilities is None:
            raise MissingProject()
        args = invocation.arguments
        command.contract.check(command.flag, args)

        ctx = self._context
        call: Callable[[], Optional[str]]
        if command is CapabilityKind.BOOTSTRAP:
            call = partial(capabilities.bootstrap, ctx)
        elif command is CapabilityKind.COMPILE:
            call = partial(capabilities.compile, ctx, args[0] if args else None)
        elif command is CapabilityKind.AUDIT:
            call = partial(capabilities.audit, ctx, AuditReportKind.parse(args[0]))
        elif command is CapabilityKind.AI_ASSIST:
            call = partial(capabilities.ai_assist, ctx, AITaskKind.parse(args[0]), tuple(args[1:]))
        elif command is CapabilityKind.SYNC:
            call = partial(capabilities.sync, ctx)
        elif command is CapabilityKind.GENERATE:
            kind = ArtifactKind.parse(args[0])
            name = args[1]
            path = ctx.resolve(args[2] if len(args) > 2 else f"./{name}")
            call = partial(capabilities.generate, ctx, kind, name, path)
        else:
            call = partial(self._supervisor.manual_heal, capabilities)
        return command, call

    def dispatch(self, invocation: CommandInvocation, capabilities: CapabilitySet | None) -> Any:
        if self._state is not DispatchState.IDLE:
            raise RuntimeError(f"Dispatcher already used (state: {self._state.value})")
        kind, call = self.prepare(invocation, capabilities)
        ctx = self._context
        self._state = DispatchState.DISPATCHED
        ctx.log.debug(f"Executing command: {kind.flag} with args: {' '.join(invocation.arguments)}")
        try:
            details = call()
        except BaseException:
            self._state = DispatchState.FAILED
            raise
        if kind is not CapabilityKind.SELF_HEAL:
            ctx.audit.record(kind.audit_action, details or f"Executed {invocation.describe()}")
        ctx.log.info(f"Command '{kind.flag}' executed successfully")
        self._state = DispatchState.SUCCEEDED
        return details


__all__ = ["CommandDispatcher", "DispatchState"]
