"""Diagnostic message formatting."""

from simgraph.messaging.formatters import (
    ClangStyleMessageFormatter,
    DefaultMessageFormatter,
    Message,
    MessageFormatter,
    MessageFormatterAdapter,
    MessageType,
    get_formatter,
)

__all__ = [
    "ClangStyleMessageFormatter",
    "DefaultMessageFormatter",
    "Message",
    "MessageFormatter",
    "MessageFormatterAdapter",
    "MessageType",
    "get_formatter",
]
