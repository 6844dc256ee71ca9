"""Application services for the meta-builder."""

from .capabilities import BindingOrigin, CapabilityBinding, CapabilitySet, build_capability_set
from .context import RuntimeContext, determine_operator
from .defaults import DefaultCapabilityProvider
from .dispatcher import CommandDispatcher, DispatchState
from .registry import ENTRY_POINT_GROUP, LoadedProject, ProjectRegistry
from .supervisor import FailureSupervisor, capture_stack_trace

__all__ = [
    "BindingOrigin",
    "CapabilityBinding",
    "CapabilitySet",
    "CommandDispatcher",
    "DefaultCapabilityProvider",
    "DispatchState",
    "ENTRY_POINT_GROUP",
    "FailureSupervisor",
    "LoadedProject",
    "ProjectRegistry",
    "RuntimeContext",
    "build_capability_set",
    "capture_stack_trace",
    "determine_operator",
]
