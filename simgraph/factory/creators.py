"""Creator adapters.

Two ways of building a component, both behind ``BaseCreator``:

- ``Creator`` is bound to one concrete type and delegates to that type's
  own ``create(argument)`` hook (falling back to calling the type).
- ``CreatorFn`` wraps a plain construction function.

Both register themselves into the factory they are given when constructed.
A refused registration (duplicate key without ``multi``) leaves the creator
alive but unreachable through the factory; ``registered`` records the
outcome and the factory logs a warning.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, Type, TypeVar

from simgraph.factory.log import type_name

if TYPE_CHECKING:
    from simgraph.factory.registry import Factory

O = TypeVar("O")
A = TypeVar("A")

__all__ = [
    "BaseCreator",
    "Creator",
    "CreatorFn",
]


class BaseCreator(ABC, Generic[O, A]):
    """Type-erased factory for exactly one concrete type."""

    @abstractmethod
    def create_instance(self, argument: A) -> Optional[O]:
        """Build an object from ``argument``, or return None to decline."""

    @property
    @abstractmethod
    def produced_type(self) -> Optional[type]:
        """The concrete type this creator produces, if known."""

    @property
    def produced_type_name(self) -> str:
        """Readable name of the produced type, for diagnostics."""
        produced = self.produced_type
        return type_name(produced) if produced is not None else type_name(self)


class Creator(BaseCreator[O, A]):
    """Creator bound to a concrete type.

    Example:
        Creator(factory, "EulerSolver", EulerSolver)
        Creator(factory, "MechanicalObject", MechanicalObject1d, multi=True)
    """

    def __init__(
        self,
        factory: "Factory[Any, O, A]",
        key: Any,
        real_type: Type[O],
        multi: bool = False,
    ) -> None:
        """Bind to ``real_type`` and register under ``key``.

        Args:
            factory: Factory to register into
            key: Registration key
            real_type: Concrete type to build
            multi: Allow sharing the key with other creators
        """
        self.key = key
        self.real_type = real_type
        self.registered = factory.register(key, self, multi)

    def create_instance(self, argument: A) -> Optional[O]:
        hook = getattr(self.real_type, "create", None)
        if hook is None:
            return self.real_type(argument)  # type: ignore[call-arg]
        return hook(argument)

    @property
    def produced_type(self) -> type:
        return self.real_type

    def __repr__(self) -> str:
        return f"Creator(key={self.key!r}, type={self.real_type.__name__})"


class CreatorFn(BaseCreator[O, A]):
    """Creator that delegates to a construction function.

    Example:
        CreatorFn(factory, "Gravity", lambda desc: ConstantForceField(force=(0, -9.81, 0)))
    """

    def __init__(
        self,
        factory: "Factory[Any, O, A]",
        key: Any,
        fn: Callable[[A], Optional[O]],
        produced_type: Optional[type] = None,
        multi: bool = False,
    ) -> None:
        """Wrap ``fn`` and register under ``key``.

        Args:
            factory: Factory to register into
            key: Registration key
            fn: Construction function; may return None to decline
            produced_type: Concrete type ``fn`` builds, for diagnostics
            multi: Allow sharing the key with other creators
        """
        self.key = key
        self.fn = fn
        self._produced_type = produced_type
        self.registered = factory.register(key, self, multi)

    def create_instance(self, argument: A) -> Optional[O]:
        return self.fn(argument)

    @property
    def produced_type(self) -> Optional[type]:
        return self._produced_type

    @property
    def produced_type_name(self) -> str:
        if self._produced_type is not None:
            return type_name(self._produced_type)
        return getattr(self.fn, "__qualname__", repr(self.fn))

    def __repr__(self) -> str:
        return f"CreatorFn(key={self.key!r}, fn={self.produced_type_name})"
