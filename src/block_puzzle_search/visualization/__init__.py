"""Text output for boards and shape batches."""

from .console import ConsoleRenderer, NullRenderer, ObservationSink, format_batch, format_board

__all__ = ["ConsoleRenderer", "NullRenderer", "ObservationSink", "format_batch", "format_board"]
