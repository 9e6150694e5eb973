from __future__ import annotations

from typing import TYPE_CHECKING, Any

from autolocator.exceptions import AutoLocatorInvalidRegistrationError

try:
    from pydantic_settings import BaseSettings
except ModuleNotFoundError as exc:  # pragma: no cover - exercised in optional import scenarios
    message = "Settings integration requires pydantic-settings. Install with 'pydantic-settings'."
    raise ModuleNotFoundError(message) from exc

if TYPE_CHECKING:
    from autolocator.locator import ServiceLocator


def register_settings(
    locator: ServiceLocator,
    settings_type: type[Any],
    *,
    key: str | None = None,
) -> None:
    """Register a Pydantic settings class as a lazily built singleton.

    The settings object is constructed with no arguments on first ``get``, so
    values come from the environment and dotenv sources the class declares.
    Validation errors raised by Pydantic propagate from ``get``.

    Args:
        locator: Locator receiving the registration.
        settings_type: ``BaseSettings`` subclass to register under its own type.
        key: Optional registration key.

    Raises:
        AutoLocatorInvalidRegistrationError: If ``settings_type`` is not a
            ``BaseSettings`` subclass.

    Examples:
        .. code-block:: python

            class AppSettings(BaseSettings):
                api_url: str = "https://api.example.com"


            register_settings(locator, AppSettings)
            settings = await locator.get(AppSettings)

    """
    if not (isinstance(settings_type, type) and issubclass(settings_type, BaseSettings)):
        msg = f"register_settings() expects a BaseSettings subclass, got {settings_type!r}."
        raise AutoLocatorInvalidRegistrationError(msg)

    locator.register_singleton(settings_type, lambda _get: settings_type(), key=key)


__all__ = ["register_settings"]
