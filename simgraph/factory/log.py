"""Process-wide registration log for factories.

Every successful ``Factory.register`` call appends one entry here. The log
is observability only: nothing in the traversal engine reads it back.

Usage:
    from simgraph.factory.log import get_factory_log, print_factory_log

    print_factory_log()  # "BaseComponent class EulerSolver registered as EulerSolver"
"""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from typing import Any, List, Optional, TextIO

logger = logging.getLogger(__name__)

_LOG: List["FactoryLogEntry"] = []
_LOG_LOCK = threading.Lock()


@dataclass(frozen=True)
class FactoryLogEntry:
    """One registration recorded in the factory log.

    Attributes:
        base_type: Readable name of the factory's produced (base) type
        class_name: Readable name of the concrete type the creator produces
        key: Key the creator was registered under
        multi: Whether multi-valued registration was requested
    """

    base_type: str
    class_name: str
    key: Any
    multi: bool

    def format(self) -> str:
        kind = "template class" if self.multi else "class"
        return f"{self.base_type} {kind} {self.class_name} registered as {self.key}"


def type_name(obj: Any) -> str:
    """Decode a type (or an instance's type) to a readable dotted name.

    Builtins are reported without their module prefix.
    """
    t = obj if isinstance(obj, type) else type(obj)
    module = getattr(t, "__module__", None)
    qualname = getattr(t, "__qualname__", repr(t))
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


def log_factory_register(base_type: str, class_name: str, key: Any, multi: bool) -> FactoryLogEntry:
    """Append a registration to the process-wide log.

    Args:
        base_type: Name of the factory's base type
        class_name: Name of the registered concrete type
        key: Registration key
        multi: Whether the registration was multi-valued

    Returns:
        The recorded entry
    """
    entry = FactoryLogEntry(base_type=base_type, class_name=class_name, key=key, multi=multi)
    with _LOG_LOCK:
        _LOG.append(entry)
    logger.debug(entry.format())
    return entry


def get_factory_log() -> List[FactoryLogEntry]:
    """Get a copy of all registrations recorded so far, in order."""
    with _LOG_LOCK:
        return list(_LOG)


def print_factory_log(out: Optional[TextIO] = None) -> None:
    """Print the factory log, one registration per line.

    Args:
        out: Stream to write to (defaults to stdout)
    """
    stream = out if out is not None else sys.stdout
    for entry in get_factory_log():
        stream.write(entry.format() + "\n")


def clear_factory_log() -> None:
    """Forget all recorded registrations. Intended for tests."""
    with _LOG_LOCK:
        _LOG.clear()
