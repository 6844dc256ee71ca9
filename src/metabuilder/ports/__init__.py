"""Port definitions for the meta-builder."""

from .capability_provider import CapabilityProvider
from .tool_runner import ToolRunner

__all__ = ["CapabilityProvider", "ToolRunner"]
