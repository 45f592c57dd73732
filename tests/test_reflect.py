"""Tests for tinyroute.routing.reflect — handler descriptors and controller lookup."""

import inspect
import threading

import pytest

from tinyroute.errors import ConfigurationError, TargetResolutionError
from tinyroute.routing.convention import resolve_convention
from tinyroute.routing.reflect import (
    ControllerRegistry,
    describe_callable,
    parameters_of,
    reflect_convention,
    reflect_handler,
    reflect_target,
)
from tinyroute.routing.route import MethodTarget


class Posts:
    instances = 0

    def __init__(self) -> None:
        type(self).instances += 1
        self.prefix = "post"

    def show(self, id: str, post_id: str = "") -> str:
        return f"{self.prefix}:{id}:{post_id}"

    def index(self) -> str:
        return "all posts"

    @staticmethod
    def ping() -> str:
        return "pong"

    @classmethod
    def kind(cls, name: str) -> str:
        return f"{cls.__name__}:{name}"

    def _secret(self) -> str:
        return "hidden"

    title = "not callable"


class Broken:
    def __init__(self) -> None:
        msg = "database unavailable"
        raise RuntimeError(msg)

    def show(self) -> str:
        return "never"


def _plain(a: str, b: int, *rest: str, **extra: str) -> None: ...


class TestParametersOf:
    def test_function(self) -> None:
        params = parameters_of(_plain)
        assert [p.name for p in params] == ["a", "b", "rest", "extra"]
        assert params[1].declared_type is int
        assert params[2].bindable is False
        assert params[3].bindable is False

    def test_bound_method_drops_self(self) -> None:
        params = parameters_of(Posts().show)
        assert [p.name for p in params] == ["id", "post_id"]
        assert params[0].has_default is False
        assert params[1].has_default is True

    def test_classmethod_drops_cls(self) -> None:
        assert [p.name for p in parameters_of(Posts.kind)] == ["name"]

    def test_staticmethod(self) -> None:
        assert parameters_of(Posts.ping) == ()

    def test_lambda(self) -> None:
        params = parameters_of(lambda x, y: None)
        assert [p.name for p in params] == ["x", "y"]
        assert params[0].declared_type is None

    def test_callable_instance(self) -> None:
        class Handler:
            def __call__(self, slug: str) -> str:
                return slug

        assert [p.name for p in parameters_of(Handler())] == ["slug"]

    def test_parameter_kind(self) -> None:
        def f(a: str, /, b: str, *, c: str) -> None: ...

        kinds = [p.kind for p in parameters_of(f)]
        assert kinds == [
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.KEYWORD_ONLY,
        ]


class TestDescribeCallable:
    def test_descriptor_invokes(self) -> None:
        descriptor = describe_callable(lambda name: f"hi {name}")
        assert descriptor("bob") == "hi bob"

    def test_name_defaults_to_qualname(self) -> None:
        assert describe_callable(_plain).name == "_plain"

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(ConfigurationError):
            describe_callable("not a function")  # type: ignore[arg-type]

    def test_unresolvable_annotation(self) -> None:
        def show(ref: "NotDefinedAnywhere") -> None: ...  # noqa: F821

        with pytest.raises(ConfigurationError, match="NotDefinedAnywhere"):
            describe_callable(show)


class TestReflectTarget:
    def test_class_is_instantiated_per_call(self) -> None:
        before = Posts.instances
        first = reflect_target(MethodTarget(Posts, "show"))
        second = reflect_target(MethodTarget(Posts, "show"))
        assert Posts.instances == before + 2
        assert first.func.__self__ is not second.func.__self__

    def test_instance_is_reused(self) -> None:
        posts = Posts()
        descriptor = reflect_target(MethodTarget(posts, "show"))
        assert descriptor.func.__self__ is posts

    def test_descriptor_describes_member(self) -> None:
        descriptor = reflect_target(MethodTarget(Posts, "show"))
        assert [p.name for p in descriptor.parameters] == ["id", "post_id"]
        assert descriptor.name == "Posts.show"
        assert descriptor("1", "2") == "post:1:2"

    def test_missing_method(self) -> None:
        with pytest.raises(TargetResolutionError, match="no such method"):
            reflect_target(MethodTarget(Posts, "destroy"))

    def test_private_method(self) -> None:
        with pytest.raises(TargetResolutionError, match="not public"):
            reflect_target(MethodTarget(Posts, "_secret"))

    def test_private_method_allowed(self) -> None:
        descriptor = reflect_target(MethodTarget(Posts, "_secret"), allow_private=True)
        assert descriptor() == "hidden"

    def test_non_callable_attribute(self) -> None:
        with pytest.raises(TargetResolutionError, match="not callable"):
            reflect_target(MethodTarget(Posts, "title"))

    def test_constructor_failure(self) -> None:
        with pytest.raises(TargetResolutionError, match="construction failed") as exc_info:
            reflect_target(MethodTarget(Broken, "show"))
        assert isinstance(exc_info.value.__cause__, RuntimeError)


class TestReflectNamedTarget:
    def _registry(self) -> ControllerRegistry:
        registry = ControllerRegistry()
        registry.register("app.Posts", Posts)
        return registry

    def test_qualified_with_namespace(self) -> None:
        ref = MethodTarget("Posts", "index")
        descriptor = reflect_target(ref, registry=self._registry(), namespace="app")
        assert descriptor() == "all posts"
        assert descriptor.name == "app.Posts.index"

    def test_fully_qualified_name(self) -> None:
        ref = MethodTarget("app.Posts", "index")
        assert reflect_target(ref, registry=self._registry())() == "all posts"

    def test_unregistered_name(self) -> None:
        with pytest.raises(TargetResolutionError, match="no controller registered"):
            reflect_target(MethodTarget("Posts", "upper"), registry=self._registry())

    def test_without_registry(self) -> None:
        with pytest.raises(TargetResolutionError):
            reflect_target(MethodTarget("Posts", "index"))

    def test_private_method(self) -> None:
        ref = MethodTarget("Posts", "_secret")
        with pytest.raises(TargetResolutionError, match="not public"):
            reflect_target(ref, registry=self._registry(), namespace="app")


class TestReflectHandler:
    def test_callable(self) -> None:
        assert reflect_handler(_plain).func is _plain

    def test_method_target(self) -> None:
        assert reflect_handler(MethodTarget(Posts, "index"))() == "all posts"


class TestControllerRegistry:
    def test_register_and_get(self) -> None:
        registry = ControllerRegistry()
        registry.register("app.Posts", Posts)
        assert registry.get("app.Posts") is Posts
        assert "app.Posts" in registry
        assert len(registry) == 1
        assert registry.names == ["app.Posts"]

    def test_missing(self) -> None:
        assert ControllerRegistry().get("Nope") is None

    def test_rejects_empty_name(self) -> None:
        with pytest.raises(ConfigurationError):
            ControllerRegistry().register("", Posts)

    def test_rejects_non_callable_factory(self) -> None:
        with pytest.raises(ConfigurationError):
            ControllerRegistry().register("x", object())  # type: ignore[arg-type]


class TestReflectConvention:
    def _registry(self) -> ControllerRegistry:
        registry = ControllerRegistry()
        registry.register("app.Posts", Posts)
        registry.register("app.Broken", Broken)
        return registry

    def test_resolves(self) -> None:
        target = resolve_convention("posts/index", "app")
        assert reflect_convention(target, self._registry())() == "all posts"

    def test_unregistered_controller(self) -> None:
        target = resolve_convention("comments/index", "app")
        with pytest.raises(TargetResolutionError, match="no controller registered"):
            reflect_convention(target, self._registry())

    def test_empty_method(self) -> None:
        target = resolve_convention("", "app")
        with pytest.raises(TargetResolutionError, match="no method name"):
            reflect_convention(target, self._registry())

    def test_construction_failure(self) -> None:
        target = resolve_convention("broken/show", "app")
        with pytest.raises(TargetResolutionError):
            reflect_convention(target, self._registry())

    def test_factory_function(self) -> None:
        registry = ControllerRegistry()
        registry.register("Posts", lambda: Posts())
        descriptor = reflect_convention(resolve_convention("posts/show"), registry)
        assert descriptor("9") == "post:9:"

    def test_dot_in_segment(self) -> None:
        target = resolve_convention("app.posts/index")
        with pytest.raises(TargetResolutionError, match="contains"):
            reflect_convention(target, self._registry())


class TestConcurrentControllerRegistry:
    def test_register_while_reading(self) -> None:
        registry = ControllerRegistry()
        registry.register("app.Posts", Posts)
        count = 200
        done = threading.Event()
        errors: list[Exception] = []

        def read() -> None:
            try:
                while not done.is_set():
                    assert registry.get("app.Posts") is Posts
                    target = resolve_convention("posts/index", "app")
                    assert reflect_convention(target, registry)() == "all posts"
            except Exception as exc:
                errors.append(exc)

        readers = [threading.Thread(target=read) for _ in range(4)]
        for t in readers:
            t.start()
        try:
            for i in range(count):
                registry.register(f"app.Gen{i}", Posts)
        finally:
            done.set()
        for t in readers:
            t.join()

        assert errors == []
        assert len(registry) == count + 1
        assert registry.names == sorted(["app.Posts", *(f"app.Gen{i}" for i in range(count))])
