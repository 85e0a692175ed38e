"""Message formatters for simulation diagnostics.

A ``Message`` is one diagnostic (warning about an unresolved component,
registration conflict, ...) tied to a source location. Formatters turn it
into text; ``MessageFormatterAdapter`` lets either formatter render
standard ``logging`` records, so IDEs that understand compiler output can
jump straight to the emitting line when the clang style is selected.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class MessageType(Enum):
    """Severity of a diagnostic message."""

    INFO = "info"
    ADVICE = "advice"
    DEPRECATED = "deprecated"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"

    @classmethod
    def from_level(cls, levelno: int) -> "MessageType":
        """Map a ``logging`` level number onto a message type."""
        if levelno >= logging.CRITICAL:
            return cls.FATAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        return cls.INFO


_message_ids = itertools.count(1)


@dataclass(frozen=True)
class Message:
    """A diagnostic message.

    Attributes:
        message: Human-readable text
        type: Severity
        sender: Logical emitter (logger name, component name)
        source: Source file the message was emitted from
        lineno: Line number in ``source``
        id: Process-unique message number
    """

    message: str
    type: MessageType = MessageType.INFO
    sender: str = ""
    source: str = "<unknown>"
    lineno: int = 0
    id: int = 0

    @classmethod
    def create(cls, message: str, **kwargs) -> "Message":
        """Build a message with the next process-wide id."""
        return cls(message=message, id=next(_message_ids), **kwargs)


class MessageFormatter(Protocol):
    """Anything that can render a Message to text."""

    def format_message(self, message: Message) -> str: ...


class DefaultMessageFormatter:
    """``[WARNING] sender: text``"""

    def format_message(self, message: Message) -> str:
        prefix = f"[{message.type.name}]"
        if message.sender:
            return f"{prefix} {message.sender}: {message.message}"
        return f"{prefix} {message.message}"


class ClangStyleMessageFormatter:
    """Compiler-style output: ``file:line:1: warning: text`` followed by the message id."""

    def format_message(self, message: Message) -> str:
        return (
            f"{message.source}:{message.lineno}:1: {message.type.value}: {message.message}\n"
            f" message id: {message.id}"
        )


FORMATTERS = {
    "default": DefaultMessageFormatter(),
    "clang": ClangStyleMessageFormatter(),
}


def get_formatter(style: str) -> MessageFormatter:
    """Look up a shared formatter by style name ("default" or "clang")."""
    try:
        return FORMATTERS[style]
    except KeyError:
        raise ValueError(f"Unknown message style {style!r}. Available: {sorted(FORMATTERS)}") from None


class MessageFormatterAdapter(logging.Formatter):
    """``logging.Formatter`` that renders records through a MessageFormatter."""

    def __init__(self, formatter: MessageFormatter) -> None:
        super().__init__()
        self.formatter = formatter

    def format(self, record: logging.LogRecord) -> str:
        message = Message.create(
            record.getMessage(),
            type=MessageType.from_level(record.levelno),
            sender=record.name,
            source=record.pathname,
            lineno=record.lineno,
        )
        text = self.formatter.format_message(message)
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text
