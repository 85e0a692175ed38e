"""Pytest configuration and fixtures for simgraph tests."""

import pytest

from simgraph.components import BaseComponent, ObjectDescription, register_builtin_components
from simgraph.factory import Factory, clear_factory_log
from tests.fakes.recording_components import CallLog


@pytest.fixture(autouse=True)
def clean_factory_log():
    """Each test starts with an empty registration log."""
    clear_factory_log()
    yield
    clear_factory_log()


@pytest.fixture
def call_log():
    return CallLog()


@pytest.fixture
def component_factory():
    """A private component factory, isolated from the shared one."""
    return Factory(str, BaseComponent, ObjectDescription)


@pytest.fixture
def builtin_factory(component_factory):
    """A private component factory with the reference components registered."""
    register_builtin_components(component_factory)
    return component_factory
