"""Tests for the keyed Factory: registration, lookup and shared instances."""

import logging
import threading

import pytest

from simgraph.factory import (
    BaseCreator,
    Creator,
    CreatorFn,
    Factory,
    create_any_object,
    create_object,
    get_factory,
    reset_shared_factories,
)


class Shape:
    def __init__(self, arg):
        self.arg = arg


class Circle(Shape):
    pass


class Square(Shape):
    pass


class Picky(Shape):
    """Declines every argument except "picky"."""

    @classmethod
    def create(cls, arg):
        return cls(arg) if arg == "picky" else None


class TestRegistration:
    """Key uniqueness and multi-valued registration."""

    def test_first_registration_succeeds(self) -> None:
        factory = Factory(str, Shape, str)
        assert Creator(factory, "circle", Circle).registered is True
        assert "circle" in factory
        assert len(factory) == 1

    def test_duplicate_key_is_refused(self, caplog) -> None:
        factory = Factory(str, Shape, str)
        Creator(factory, "shape", Circle)

        with caplog.at_level(logging.WARNING, logger="simgraph.factory.registry"):
            second = Creator(factory, "shape", Square)

        assert second.registered is False
        assert len(factory.creators("shape")) == 1
        assert isinstance(factory.create("shape", "x"), Circle)
        assert "already registered" in caplog.text

    def test_register_returns_bool(self) -> None:
        factory = Factory(str, Shape, str)
        creator = CreatorFn(factory, "a", Circle)
        assert factory.register("b", creator) is True
        assert factory.register("b", creator) is False

    def test_multi_key_keeps_registration_order(self) -> None:
        factory = Factory(str, Shape, str)
        Creator(factory, "shape", Circle, multi=True)
        Creator(factory, "shape", Square, multi=True)

        creators = factory.creators("shape")
        assert [c.produced_type for c in creators] == [Circle, Square]
        assert len(factory) == 2
        assert factory.keys() == ["shape"]

    def test_multi_after_single_is_accepted(self) -> None:
        factory = Factory(str, Shape, str)
        Creator(factory, "shape", Circle)
        assert Creator(factory, "shape", Square, multi=True).registered is True
        assert len(factory.creators("shape")) == 2

    def test_wrong_key_type_raises(self) -> None:
        factory = Factory(str, Shape, str)
        with pytest.raises(TypeError):
            Creator(factory, 42, Circle)

    def test_iteration_is_sorted_by_key(self) -> None:
        factory = Factory(str, Shape, str)
        Creator(factory, "b", Square)
        Creator(factory, "a", Circle)
        assert [key for key, _ in factory] == ["a", "b"]
        assert factory.keys() == ["a", "b"]


class TestCreation:
    """Lookup semantics of create and create_any."""

    def test_create_passes_argument_unchanged(self) -> None:
        factory = Factory(str, Shape, str)
        Creator(factory, "circle", Circle)
        shape = factory.create("circle", "payload")
        assert isinstance(shape, Circle)
        assert shape.arg == "payload"

    def test_unknown_key_returns_none(self) -> None:
        factory = Factory(str, Shape, str)
        assert factory.create("missing", "x") is None

    def test_empty_factory_create_any_returns_none(self) -> None:
        assert Factory(str, Shape, str).create_any("x") is None

    def test_multi_key_falls_through_declining_creators(self) -> None:
        factory = Factory(str, Shape, str)
        Creator(factory, "shape", Picky, multi=True)
        Creator(factory, "shape", Square, multi=True)

        assert isinstance(factory.create("shape", "picky"), Picky)
        assert isinstance(factory.create("shape", "other"), Square)

    def test_all_candidates_declining_returns_none(self) -> None:
        factory = Factory(str, Shape, str)
        Creator(factory, "shape", Picky, multi=True)
        CreatorFn(factory, "shape", lambda arg: None, multi=True)
        assert factory.create("shape", "other") is None

    def test_create_any_returns_first_non_none(self) -> None:
        factory = Factory(str, Shape, str)
        Creator(factory, "a", Picky)
        Creator(factory, "b", Square)
        assert isinstance(factory.create_any("other"), Square)
        assert isinstance(factory.create_any("picky"), Picky)

    def test_creator_without_create_hook_calls_the_type(self) -> None:
        factory = Factory(str, object, int)
        Creator(factory, "int", int)
        assert factory.create("int", 7) == 7


class TestCreatorFn:
    def test_function_result_is_returned(self) -> None:
        factory = Factory(str, Shape, str)
        CreatorFn(factory, "circle", lambda arg: Circle(arg.upper()), produced_type=Circle)
        shape = factory.create("circle", "abc")
        assert shape.arg == "ABC"
        assert factory.creators("circle")[0].produced_type is Circle

    def test_produced_type_name_falls_back_to_function_name(self) -> None:
        def make_square(arg):
            return Square(arg)

        factory = Factory(str, Shape, str)
        creator = CreatorFn(factory, "square", make_square)
        assert creator.produced_type is None
        assert "make_square" in creator.produced_type_name

    def test_creators_are_base_creators(self) -> None:
        factory = Factory(str, Shape, str)
        assert isinstance(Creator(factory, "a", Circle), BaseCreator)
        assert isinstance(CreatorFn(factory, "b", Circle), BaseCreator)


class TestSharedFactories:
    """Process-wide factory per type combination."""

    def setup_method(self) -> None:
        reset_shared_factories()

    def teardown_method(self) -> None:
        reset_shared_factories()

    def test_same_combination_returns_same_instance(self) -> None:
        assert get_factory(str, Shape, str) is get_factory(str, Shape, str)
        assert Factory.instance(str, Shape, str) is get_factory(str, Shape, str)

    def test_different_combinations_are_independent(self) -> None:
        shapes = get_factory(str, Shape, str)
        Creator(shapes, "circle", Circle)
        assert "circle" not in get_factory(str, Shape, int)

    def test_module_helpers_use_shared_factory(self) -> None:
        Creator(get_factory(str, Shape, str), "circle", Circle)
        assert isinstance(create_object("circle", "x", Shape, str), Circle)
        assert isinstance(create_any_object("x", Shape, str), Circle)
        assert create_object("missing", "x", Shape, str) is None

    def test_concurrent_first_use_builds_one_factory(self) -> None:
        results = []
        barrier = threading.Barrier(8)

        def grab():
            barrier.wait()
            results.append(get_factory(str, Square, str))

        threads = [threading.Thread(target=grab) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(f is results[0] for f in results)
