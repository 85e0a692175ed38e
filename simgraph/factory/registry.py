"""Key-indexed factory of creators.

A ``Factory`` maps keys to one or more creators, like an ordered multimap.
The scene graph and the visitors never import concrete component classes:
they ask a factory to build "EulerSolver" or "MechanicalObject" and get
back whatever implementation was registered under that key.

Design Decisions:
-----------------
1. A key holds a single creator unless the registration explicitly asks
   for multi-valued storage. Conflicts are reported by returning ``False``;
   nothing is mutated and nothing is raised.

2. Lookups never raise for unknown keys. ``create`` and ``create_any``
   return ``None`` so callers can degrade gracefully.

3. One shared factory exists per (key type, object type, argument type)
   combination. It is built lazily on first use under a lock; registration
   is expected to finish before the first traversal, after which the
   contents are treated as read-only.

Example:
    factory = get_factory(str, BaseComponent, ObjectDescription)
    Creator(factory, "EulerSolver", EulerSolver)

    solver = factory.create("EulerSolver", ObjectDescription("EulerSolver"))
    missing = factory.create("NoSuchThing", ObjectDescription("NoSuchThing"))  # None
"""

from __future__ import annotations

import logging
import threading
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from simgraph.factory.log import log_factory_register, type_name

if TYPE_CHECKING:
    from simgraph.factory.creators import BaseCreator

logger = logging.getLogger(__name__)

K = TypeVar("K")
O = TypeVar("O")
A = TypeVar("A")


class Factory(Generic[K, O, A]):
    """Ordered multimap from keys to creators.

    Attributes:
        key_type: Type every key must be an instance of
        object_type: Base type of the objects produced (used for logging)
        argument_type: Type of the construction argument (documentation only)
    """

    def __init__(
        self,
        key_type: Type[K] = str,  # type: ignore[assignment]
        object_type: Type[O] = object,  # type: ignore[assignment]
        argument_type: Type[A] = object,  # type: ignore[assignment]
    ) -> None:
        self.key_type = key_type
        self.object_type = object_type
        self.argument_type = argument_type
        self._registry: Dict[K, List["BaseCreator[O, A]"]] = {}

    def register(self, key: K, creator: "BaseCreator[O, A]", multi: bool = False) -> bool:
        """Register a creator under a key.

        Args:
            key: Key used to select the creator at creation time
            creator: The creator to store
            multi: Allow several creators to share this key

        Returns:
            True if the creator was stored, False if a non-multi
            registration hit a key that is already bound
        """
        if not isinstance(key, self.key_type):
            raise TypeError(
                f"Factory key must be {self.key_type.__name__}, got {type(key).__name__}"
            )

        if not multi and key in self._registry:
            logger.warning(
                f"{type_name(self.object_type)}: key {key!r} already registered, "
                f"ignoring {creator.produced_type_name}"
            )
            return False

        log_factory_register(type_name(self.object_type), creator.produced_type_name, key, multi)
        self._registry.setdefault(key, []).append(creator)
        return True

    def create(self, key: K, argument: A) -> Optional[O]:
        """Create an object from the creator(s) registered under ``key``.

        Multi-valued keys try their creators in registration order and return
        the first non-None result.

        Args:
            key: Key to resolve
            argument: Construction argument passed to the creator unchanged

        Returns:
            The created object, or None if the key is unknown or every
            candidate declined
        """
        candidates = self._registry.get(key)
        if not candidates:
            logger.debug(f"{type_name(self.object_type)}: no creator registered for {key!r}")
            return None

        for creator in candidates:
            instance = creator.create_instance(argument)
            if instance is not None:
                return instance
        return None

    def create_any(self, argument: A) -> Optional[O]:
        """Create an object from the first creator (any key) that accepts ``argument``.

        Args:
            argument: Construction argument passed to each creator in turn

        Returns:
            The first non-None object produced, or None
        """
        for _, creator in self:
            instance = creator.create_instance(argument)
            if instance is not None:
                return instance
        return None

    def creators(self, key: K) -> List["BaseCreator[O, A]"]:
        """Get the creators registered under ``key`` in registration order."""
        return list(self._registry.get(key, ()))

    def keys(self) -> List[K]:
        """Get all registered keys in sorted order."""
        return sorted(self._registry)  # type: ignore[type-var]

    def __contains__(self, key: object) -> bool:
        return key in self._registry

    def __iter__(self) -> Iterator[Tuple[K, "BaseCreator[O, A]"]]:
        """Iterate (key, creator) pairs: keys sorted, creators in registration order."""
        for key in self.keys():
            for creator in self._registry[key]:
                yield key, creator

    def __len__(self) -> int:
        """Number of registered creators (not keys)."""
        return sum(len(creators) for creators in self._registry.values())

    def __repr__(self) -> str:
        return (
            f"Factory(object_type={type_name(self.object_type)}, "
            f"keys={len(self._registry)}, creators={len(self)})"
        )

    @classmethod
    def instance(
        cls,
        key_type: Type[Any],
        object_type: Type[Any],
        argument_type: Type[Any],
    ) -> "Factory[Any, Any, Any]":
        """Shared factory for this combination (see ``get_factory``)."""
        return get_factory(key_type, object_type, argument_type)


# =============================================================================
# Shared instances
# =============================================================================

_FACTORIES: Dict[Tuple[type, type, type], Factory[Any, Any, Any]] = {}
_FACTORIES_LOCK = threading.Lock()


def get_factory(
    key_type: Type[Any],
    object_type: Type[Any],
    argument_type: Type[Any],
) -> Factory[Any, Any, Any]:
    """Get the process-wide factory for a (key, object, argument) combination.

    The first call constructs the factory; later calls return the same object.

    Args:
        key_type: Type of the keys
        object_type: Base type of the produced objects
        argument_type: Type of the construction argument

    Returns:
        The shared Factory instance
    """
    combination = (key_type, object_type, argument_type)
    factory = _FACTORIES.get(combination)
    if factory is not None:
        return factory

    with _FACTORIES_LOCK:
        factory = _FACTORIES.get(combination)
        if factory is None:
            factory = Factory(key_type, object_type, argument_type)
            _FACTORIES[combination] = factory
            logger.debug(f"Created shared factory for {type_name(object_type)}")
    return factory


def create_object(
    key: Any,
    argument: Any,
    object_type: Type[Any],
    argument_type: Type[Any],
    key_type: Type[Any] = str,
) -> Optional[Any]:
    """Resolve ``key`` through the shared factory for this combination."""
    return get_factory(key_type, object_type, argument_type).create(key, argument)


def create_any_object(
    argument: Any,
    object_type: Type[Any],
    argument_type: Type[Any],
    key_type: Type[Any] = str,
) -> Optional[Any]:
    """Create from any creator of the shared factory for this combination."""
    return get_factory(key_type, object_type, argument_type).create_any(argument)


def reset_shared_factories() -> None:
    """Drop every shared factory. Intended for tests."""
    with _FACTORIES_LOCK:
        _FACTORIES.clear()
