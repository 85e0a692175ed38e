"""Factory package - runtime-pluggable component creation.

- registry.py: Factory (ordered key -> creators multimap) and shared instances
- creators.py: Creator / CreatorFn adapters
- log.py: process-wide registration log
"""

from simgraph.factory.creators import BaseCreator, Creator, CreatorFn
from simgraph.factory.log import (
    FactoryLogEntry,
    clear_factory_log,
    get_factory_log,
    print_factory_log,
    type_name,
)
from simgraph.factory.registry import (
    Factory,
    create_any_object,
    create_object,
    get_factory,
    reset_shared_factories,
)

__all__ = [
    "BaseCreator",
    "Creator",
    "CreatorFn",
    "Factory",
    "FactoryLogEntry",
    "clear_factory_log",
    "create_any_object",
    "create_object",
    "get_factory",
    "get_factory_log",
    "print_factory_log",
    "reset_shared_factories",
    "type_name",
]
