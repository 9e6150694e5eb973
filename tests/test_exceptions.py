"""Tests for the exception hierarchy and rendered messages."""

import pytest

from autolocator import (
    AutoLocatorAlreadyRegisteredError,
    AutoLocatorCircularDependencyError,
    AutoLocatorError,
    AutoLocatorInvalidRegistrationError,
    AutoLocatorKeyAlreadyRegisteredError,
    AutoLocatorNotFoundError,
    AutoLocatorNotRegisteredError,
    AutoLocatorRegistrationOverriddenError,
    Identity,
)


class Orange:
    pass


class Water:
    pass


@pytest.mark.parametrize(
    "error_type",
    [
        AutoLocatorAlreadyRegisteredError,
        AutoLocatorCircularDependencyError,
        AutoLocatorInvalidRegistrationError,
        AutoLocatorKeyAlreadyRegisteredError,
        AutoLocatorNotFoundError,
        AutoLocatorNotRegisteredError,
        AutoLocatorRegistrationOverriddenError,
    ],
)
def test_every_error_derives_from_base(error_type: type[Exception]) -> None:
    assert issubclass(error_type, AutoLocatorError)


class TestMessages:
    def test_already_registered(self) -> None:
        error = AutoLocatorAlreadyRegisteredError(Identity(Orange))

        assert str(error) == (
            "Type Orange is already registered. "
            "Unregister it before trying to register this type again."
        )

    def test_already_registered_with_key(self) -> None:
        error = AutoLocatorAlreadyRegisteredError(Identity(Orange, "blood"))

        assert str(error).startswith("The Key blood with Type Orange is already registered.")

    def test_key_already_registered(self) -> None:
        error = AutoLocatorKeyAlreadyRegisteredError("k", Identity(Water, "k"))

        assert str(error).startswith("The Key k is already registered for Water(key: k).")

    def test_not_found(self) -> None:
        error = AutoLocatorNotFoundError(Identity(Orange))

        assert str(error).startswith("The type Orange was not registered.")

    def test_circular_dependency(self) -> None:
        chain = [Identity(Orange), Identity(Water, "tap"), Identity(Orange)]
        error = AutoLocatorCircularDependencyError(chain)

        assert error.chain == tuple(chain)
        assert error.identity == Identity(Orange)
        assert str(error) == (
            "Circular dependency detected. "
            "Dependency resolution chain: Orange -> Water(key: tap) -> Orange"
        )

    def test_registration_overridden(self) -> None:
        error = AutoLocatorRegistrationOverriddenError(Identity(Water, "tap"))

        assert str(error).startswith("The Key tap with the type Water was registered again")


class TestEmptyKeyMessages:
    """An empty key reads like no key at all."""

    def test_identity_str(self) -> None:
        assert str(Identity(Orange, "")) == "Orange"

    def test_already_registered(self) -> None:
        error = AutoLocatorAlreadyRegisteredError(Identity(Orange, ""))

        assert str(error).startswith("Type Orange is already registered.")

    def test_not_registered(self) -> None:
        error = AutoLocatorNotRegisteredError(Identity(Orange, ""))

        assert str(error).startswith("Type Orange was not registered.")

    def test_not_found(self) -> None:
        error = AutoLocatorNotFoundError(Identity(Orange, ""))

        assert str(error).startswith("The type Orange was not registered.")
        assert "Key" not in str(error)

    def test_circular_dependency(self) -> None:
        error = AutoLocatorCircularDependencyError([Identity(Orange, ""), Identity(Orange, "")])

        assert str(error).startswith("Circular dependency detected. ")
        assert str(error).endswith("Orange -> Orange")

    def test_registration_overridden(self) -> None:
        error = AutoLocatorRegistrationOverriddenError(Identity(Water, ""))

        assert str(error).startswith("The type Water was registered again")
