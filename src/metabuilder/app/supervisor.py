"""Failure supervisor: log, snapshot, audit and offer self-heal, then keep the exit code."""

from __future__ import annotations

import inspect
import traceback
from pathlib import Path
from typing import Iterable, List, Sequence

from metabuilder.adapters import process
from metabuilder.domain import AuditAction, FailureTrigger, ForensicSnapshot, StackFrame
from metabuilder.domain.errors import RuntimeCapabilityFailure, SelfHealFailure
from metabuilder.ports.capability_provider import CapabilityProvider

from .context import RuntimeContext

MANUAL_EXIT_CODE = "MANUAL"
MANUAL_COMMAND = "User trigger"


def capture_stack_trace(exc: BaseException) -> List[StackFrame]:
    """Return the frames of ``exc``'s traceback, innermost first."""
    summary = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else traceback.extract_stack()[:-1]
    frames = [StackFrame(function=item.name, file=item.filename, line=item.lineno or 0) for item in summary]
    frames.reverse()
    return frames


def normalise_exit_code(exc: BaseException) -> int:
    code = exc.exit_code if isinstance(exc, RuntimeCapabilityFailure) else 1
    # shells only see the low byte of a status
    return code if isinstance(code, int) and 0 < code < 256 else 1


class FailureSupervisor:
    """Handles every non-configuration failure raised during dispatch."""

    def __init__(self, context: RuntimeContext, *, skip_files: Iterable[str | Path] = ()) -> None:
        self._context = context
        self._skip = {Path(process.__file__).resolve()}
        self._skip.update(Path(item).resolve() for item in skip_files)

    def locate(self, frames: Sequence[StackFrame]) -> StackFrame:
        for frame in frames:
            if Path(frame.file).resolve() not in self._skip:
                return frame
        if frames:
            return frames[0]
        return StackFrame(function="<unknown>", file="<unknown>", line=0)

    def handle(
        self,
        exc: BaseException,
        capabilities: CapabilityProvider | None,
        *,
        command: str | None = None,
    ) -> int:
        ctx = self._context
        exit_code = normalise_exit_code(exc)
        frames = capture_stack_trace(exc)
        source = self.locate(frames)
        if isinstance(exc, RuntimeCapabilityFailure):
            failing_command = exc.command
        else:
            failing_command = command or type(exc).__name__
        trigger = FailureTrigger(exit_code=exit_code, line=source.line, command=failing_command, file=source.file)

        ctx.log.error(
            f"Error {exit_code} at line {source.line} ({source.function} in {source.file}): {failing_command}"
        )
        ctx.log.error(f"Cause: {exc}")
        snapshot = ForensicSnapshot(
            start_time=ctx.start_time,
            actor=ctx.actor,
            project=ctx.project_name,
            exit_code=exit_code,
            source_line=source.line,
            source_file=source.file,
            failing_command=failing_command,
            call_stack=tuple(frames),
        )
        try:
            incident = ctx.forensics.write(snapshot)
        except OSError as write_error:
            ctx.log.warn(f"Forensic log could not be written: {write_error}")
            forensic = f"Forensic log unavailable ({write_error.strerror or write_error})"
        else:
            ctx.log.info(f"Forensic log created at {incident}")
            forensic = f"Forensic log created at {incident}"
        ctx.audit.record(AuditAction.SELF_HEAL_TRIGGER, f"Error {exit_code} at line {source.line}. {forensic}")
        self.heal(capabilities, trigger)
        return exit_code

    def manual_trigger(self) -> FailureTrigger:
        frame = inspect.currentframe()
        caller = frame.f_back if frame is not None else None
        line = caller.f_lineno if caller is not None else 0
        file = caller.f_code.co_filename if caller is not None else ""
        return FailureTrigger(exit_code=MANUAL_EXIT_CODE, line=line, command=MANUAL_COMMAND, file=file)

    def manual_heal(self, capabilities: CapabilityProvider) -> str | None:
        ctx = self._context
        ctx.log.warn("Manual self-heal triggered by user.")
        ctx.audit.record(AuditAction.SELF_HEAL_TRIGGER, f"Manual trigger by user {ctx.actor}.")
        return self.heal(capabilities, self.manual_trigger())

    def heal(self, capabilities: CapabilityProvider | None, trigger: FailureTrigger) -> str | None:
        ctx = self._context
        if capabilities is None:
            ctx.log.warn("No project loaded; self-heal skipped.")
            return None
        try:
            details = self._invoke_heal(capabilities, trigger)
        except SelfHealFailure as failure:
            ctx.log.warn(f"{failure} [{type(failure.__cause__).__name__}]")
            return None
        if details:
            ctx.audit.record(AuditAction.SELF_HEAL, details)
        return details

    def _invoke_heal(self, capabilities: CapabilityProvider, trigger: FailureTrigger) -> str | None:
        # heal bodies never end the run or change its exit status
        try:
            return capabilities.self_heal(self._context, trigger)
        except BaseException as exc:  # noqa: BLE001
            raise SelfHealFailure(f"Self-heal failed: {exc}") from exc


__all__ = [
    "FailureSupervisor",
    "MANUAL_COMMAND",
    "MANUAL_EXIT_CODE",
    "capture_stack_trace",
    "normalise_exit_code",
]
