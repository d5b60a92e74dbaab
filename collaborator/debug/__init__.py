"""Local debug commands."""

from .commands import DebugCommandHandler, DebugResponse

__all__ = ["DebugCommandHandler", "DebugResponse"]
