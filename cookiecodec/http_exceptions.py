"""Cookie related exceptions."""

from typing import Any

__all__ = ("CookieError", "InvalidCookieName", "InvalidCookieAttribute")


class CookieError(ValueError):
    """Base class for cookie errors.

    Raised only when a Cookie is constructed with invalid data,
    decoding never raises.
    """


class InvalidCookieName(CookieError):
    def __init__(self, name: Any) -> None:
        self.name = name
        super().__init__(f"Illegal cookie name {name!r}")


class InvalidCookieAttribute(CookieError):
    def __init__(self, attr: str, value: Any) -> None:
        self.attr = attr
        self.value = value
        super().__init__(f"Illegal value {value!r} for cookie attribute {attr!r}")
