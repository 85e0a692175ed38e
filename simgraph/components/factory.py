"""Access to the shared component factory."""

from __future__ import annotations

import logging
from typing import Any, Optional

from simgraph.components.base import BaseComponent, ObjectDescription
from simgraph.factory import Factory, get_factory

logger = logging.getLogger(__name__)

ComponentFactory = Factory[str, BaseComponent, ObjectDescription]


def component_factory() -> ComponentFactory:
    """The process-wide factory of scene-graph components."""
    return get_factory(str, BaseComponent, ObjectDescription)


def create_component(
    type_name: str,
    name: str = "",
    template: Optional[str] = None,
    factory: Optional[ComponentFactory] = None,
    **attributes: Any,
) -> Optional[BaseComponent]:
    """Build a component from its factory key.

    Args:
        type_name: Factory key (e.g. "EulerSolver")
        name: Instance name
        template: Data template for templated components
        factory: Factory to resolve through (the shared one by default)
        **attributes: Constructor keyword arguments

    Returns:
        The new component, or None if no registered creator accepted it
    """
    factory = factory if factory is not None else component_factory()
    description = ObjectDescription(type_name, name=name, template=template, attributes=attributes)
    component = factory.create(type_name, description)
    if component is None:
        logger.warning(f"Component {type_name!r} is not available (template={template!r})")
    return component
