from assertive import assert_that, has_length, is_none, is_same_instance_as

from tiny_ioc import Lifetime, Registration, Registry, ValueProvider, string_key


def create_registration(value, tag=None, key="foo"):
    return Registration(key=string_key(key), provider=ValueProvider(value), lifetime=Lifetime.transient, tag=tag)


def test_can_set_and_get_registration():
    registry = Registry()
    registration = create_registration(42)

    registry.set(registration.key, registration)

    assert_that(registry.get(string_key("foo"))).matches(is_same_instance_as(registration))


def test_get_returns_none_for_missing_key():
    registry = Registry()

    assert_that(registry.get(string_key("foo"))).matches(is_none())
    assert_that(registry.get(string_key("foo"), "bar")).matches(is_none())


def test_get_returns_none_if_tag_not_found():
    registry = Registry()
    registration = create_registration(42)
    registry.set(registration.key, registration)

    assert_that(registry.get(registration.key, "bar")).matches(is_none())


def test_untagged_get_returns_last_registration():
    registry = Registry()
    first = create_registration(1)
    second = create_registration(2)
    tagged = create_registration(3, tag="bar")

    registry.set(first.key, first)
    registry.set(second.key, second)

    assert_that(registry.get(first.key)).matches(is_same_instance_as(second))

    registry.set(tagged.key, tagged)

    assert_that(registry.get(first.key)).matches(is_same_instance_as(tagged))


def test_tagged_get_returns_most_recent_registration_with_that_tag():
    registry = Registry()
    old = create_registration(1, tag="bar")
    other = create_registration(2, tag="baz")
    new = create_registration(3, tag="bar")
    untagged = create_registration(4)

    for registration in (old, other, new, untagged):
        registry.set(registration.key, registration)

    assert_that(registry.get(old.key, "bar")).matches(is_same_instance_as(new))
    assert_that(registry.get(old.key, "baz")).matches(is_same_instance_as(other))


def test_set_never_removes_earlier_registrations():
    registry = Registry()
    first = create_registration(1)
    second = create_registration(2)

    registry.set(first.key, first)
    registry.set(second.key, second)

    assert registry.get_all(first.key) == [first, second]


def test_has_can_check_if_key_exists():
    registry = Registry()
    registration = create_registration(42)
    tagged = create_registration(42, tag="bar")
    registry.set(registration.key, registration)
    registry.set(tagged.key, tagged)

    assert registry.has(string_key("foo"))
    assert registry.has(string_key("foo"), "bar")
    assert not registry.has(string_key("xxx"))
    assert not registry.has(string_key("xxx"), "bar")
    assert not registry.has(string_key("foo"), "baz")
    assert string_key("foo") in registry


def test_registry_counts_keys_not_registrations():
    registry = Registry()

    assert_that(registry).matches(has_length(0))
    assert string_key("foo") not in registry

    for registration in (create_registration(1), create_registration(2), create_registration(3, key="bar")):
        registry.set(registration.key, registration)

    assert_that(registry).matches(has_length(2))
    assert string_key("bar") in registry
