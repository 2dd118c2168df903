"""Streaming package: stream reassembly shared by every vendor loop."""

from .reassembler import StreamAccumulator, ToolCallBuffer

__all__ = ["StreamAccumulator", "ToolCallBuffer"]
