from unittest.mock import Mock

from assertive import assert_that, is_exact_type, is_same_instance_as, raises_exception, was_called

from tiny_ioc import Container, Lifetime, NotFoundError
from tiny_ioc.factories import create_tag_mapping, use_registered, use_value


def test_simple_use_registered():
    class A:
        pass

    class B:
        pass

    class C(A, B):
        pass

    class D(C):
        pass

    d = D()

    container = Container()
    container.register(C, instance=d)
    container.register(A, factory=use_registered(C))
    container.register(B, factory=use_registered(C))

    a = container.resolve(A)
    b = container.resolve(B)

    assert_that(a).matches(is_exact_type(D))
    assert_that(b).matches(is_exact_type(D))

    assert_that(a).matches(is_same_instance_as(d))
    assert_that(b).matches(is_same_instance_as(d))


def test_use_registered_with_tags():
    class A:
        pass

    class B:
        pass

    class C(A, B):
        pass

    c1 = C()
    c2 = C()

    container = Container()
    container.register(C, instance=c1, tag="C1")
    container.register(C, instance=c2, tag="C2")
    container.register(A, factory=use_registered(C, "C1"))
    container.register(B, factory=use_registered(C, "C2"))

    assert_that(container.resolve(A)).matches(is_same_instance_as(c1))
    assert_that(container.resolve(B)).matches(is_same_instance_as(c2))


def test_use_registered_resolves_from_the_calling_scope():
    container = Container()
    container.register("current_user", factory=use_registered("user"))
    child = container.create_scope(lambda scope: scope.register("user", instance="alice"))

    assert_that(child.resolve("current_user")).matches("alice")

    with raises_exception(NotFoundError):
        container.resolve("current_user")


def test_use_value():
    container = Container()
    container.register("retries", factory=use_value(3))

    assert_that(container.resolve("retries")).matches(3)


def test_use_value_keeps_the_same_instance():
    value = object()
    container = Container()
    container.register("shared", factory=use_value(value), lifetime=Lifetime.transient)

    assert_that(container.resolve("shared")).matches(is_same_instance_as(value))
    assert_that(container.create_scope().resolve("shared")).matches(is_same_instance_as(value))


def test_create_tag_mapping():
    class Handler:
        pass

    class CreateHandler(Handler):
        pass

    class DeleteHandler(Handler):
        pass

    container = Container()
    container.register(Handler, CreateHandler, tag="create")
    container.register(Handler, DeleteHandler, tag="delete")
    container.register(Handler)
    container.register("handlers", factory=create_tag_mapping(Handler))

    mapping = container.resolve("handlers")

    assert set(mapping) == {"create", "delete"}
    assert_that(mapping["create"]).matches(is_exact_type(CreateHandler))
    assert_that(mapping["delete"]).matches(is_exact_type(DeleteHandler))


def test_create_tag_mapping_uses_registered_lifetimes():
    spy = Mock(return_value="connection")
    container = Container()
    container.register("db", factory=spy, tag="primary", lifetime=Lifetime.single)
    container.register("dbs", factory=create_tag_mapping("db"))

    container.resolve("dbs")
    container.create_scope().resolve("dbs")

    assert_that(spy).matches(was_called().once)


def test_create_tag_mapping_for_unknown_key_is_empty():
    container = Container()
    container.register("handlers", factory=create_tag_mapping("missing"))

    assert container.resolve("handlers") == {}
