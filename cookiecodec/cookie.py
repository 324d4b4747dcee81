import datetime
import functools
from typing import Any, Iterable, Optional, Tuple

import attr

from .helpers import is_valid_cookie_name
from .http_exceptions import InvalidCookieAttribute, InvalidCookieName

__all__ = ("Cookie",)


SortKey = Tuple[int, str, str, bool, str, bool, str]


def _to_ports(ports: Iterable[int]) -> Tuple[int, ...]:
    try:
        return tuple(sorted(set(ports)))
    except TypeError:
        # rejected by _check_ports
        return ports  # type: ignore[return-value]


def _check_name(instance: "Cookie", attribute: "attr.Attribute[str]", name: str) -> None:
    if not isinstance(name, str) or not is_valid_cookie_name(name):
        raise InvalidCookieName(name)


def _check_version(instance: "Cookie", attribute: "attr.Attribute[int]", version: int) -> None:
    if not isinstance(version, int) or version < 0:
        raise InvalidCookieAttribute(attribute.name, version)


def _check_ports(
    instance: "Cookie", attribute: "attr.Attribute[Tuple[int, ...]]", ports: Tuple[int, ...]
) -> None:
    if not isinstance(ports, tuple):
        raise InvalidCookieAttribute(attribute.name, ports)
    for port in ports:
        if not isinstance(port, int) or not 0 <= port <= 65535:
            raise InvalidCookieAttribute(attribute.name, port)


@attr.s(frozen=True, slots=True, eq=False, order=False)
@functools.total_ordering
class Cookie:
    """A single HTTP cookie and its attributes.

    Identity and ordering only look at name, value, domain and path:
    longer paths sort first, then name, then value.  Two cookies with the
    same identity are the same element of a decoded cookie list or of an
    encoder's buffer, whatever their flags.

    Instances are immutable, use :meth:`replace` to derive a changed copy.
    """

    name = attr.ib(type=str, validator=_check_name)
    value = attr.ib(type=Optional[str], default="")
    domain = attr.ib(type=Optional[str], default=None, kw_only=True)
    path = attr.ib(type=Optional[str], default=None, kw_only=True)
    comment = attr.ib(type=Optional[str], default=None, kw_only=True)
    comment_url = attr.ib(type=Optional[str], default=None, kw_only=True)
    discard = attr.ib(type=bool, default=False, kw_only=True)
    max_age = attr.ib(type=Optional[int], default=None, kw_only=True)
    expires = attr.ib(type=Optional[datetime.datetime], default=None, kw_only=True)
    secure = attr.ib(type=bool, default=False, kw_only=True)
    http_only = attr.ib(type=bool, default=False, kw_only=True)
    version = attr.ib(type=int, default=0, kw_only=True, validator=_check_version)
    ports = attr.ib(
        type=Tuple[int, ...],
        default=(),
        converter=_to_ports,
        validator=_check_ports,
        kw_only=True,
    )

    def replace(self, **changes: Any) -> "Cookie":
        return attr.evolve(self, **changes)

    def sort_key(self) -> SortKey:
        path = self.path or ""
        return (
            -len(path),
            self.name,
            self.value or "",
            self.domain is not None,
            self.domain or "",
            self.path is not None,
            path,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cookie):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Cookie):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self) -> int:
        return hash(self.sort_key())
