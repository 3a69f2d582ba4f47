"""Core domain module for transfertrack.

This module contains the status line model, messages and port definitions.
It performs no terminal or storage I/O and can be tested in isolation.
"""

from transfertrack.core.messages import Delivery, MessageKind, StatusMessage
from transfertrack.core.models import Descriptor, Prompts, TerminalSize
from transfertrack.core.ports import ReadableStream, TargetPort, TerminalPort
from transfertrack.core.status import StatusLine


__all__ = [
    "Delivery",
    "Descriptor",
    "MessageKind",
    "Prompts",
    "ReadableStream",
    "StatusLine",
    "StatusMessage",
    "TargetPort",
    "TerminalPort",
    "TerminalSize",
]
