"""
Cookie and Set-Cookie header decoding.

The header is tokenised into ``name[=value]`` pairs and fed to a two
state parser.  The first pair always opens a cookie definition, one named
like an attribute is rejected and dropped.  Later on, while no cookie is
open, every plain pair starts one; once a cookie is open, known
attributes and ``$`` qualifiers attach to it and any other name closes it
and starts the next one.  This is how several cookies packed into one
header value get split apart.

A ``$Version`` qualifier applies to the next cookie only.
"""

import enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from multidict import CIMultiDict, CIMultiDictProxy

from . import hdrs
from .cookie import Cookie, SortKey
from .helpers import WHITESPACE, is_valid_cookie_name, parse_cookie_date
from .http_exceptions import CookieError
from .log import decoder_logger

__all__ = ("decode",)


class _State(enum.Enum):
    NEW_COOKIE = enum.auto()
    QUALIFIER = enum.auto()


# attribute name -> Cookie field, matched case-insensitively
_KNOWN_ATTRS: "CIMultiDictProxy[str]" = CIMultiDictProxy(
    CIMultiDict(
        [
            (hdrs.PATH, "path"),
            (hdrs.DOMAIN, "domain"),
            (hdrs.SECURE, "secure"),
            (hdrs.HTTPONLY, "http_only"),
            (hdrs.MAX_AGE, "max_age"),
            (hdrs.EXPIRES, "expires"),
            (hdrs.VERSION, "version"),
            (hdrs.COMMENT, "comment"),
            (hdrs.COMMENTURL, "comment_url"),
            (hdrs.DISCARD, "discard"),
            (hdrs.PORT, "ports"),
        ]
    )
)
_QUALIFIERS: "CIMultiDictProxy[str]" = CIMultiDictProxy(
    CIMultiDict(
        [
            (hdrs.VERSION, "version"),
            (hdrs.PATH, "path"),
            (hdrs.DOMAIN, "domain"),
            (hdrs.PORT, "ports"),
        ]
    )
)
_FLAGS = frozenset(("secure", "http_only", "discard"))
_STRINGS = frozenset(("path", "domain", "comment", "comment_url"))


def _read_quoted(header: str, start: int) -> Tuple[Optional[str], int]:
    """Read a quoted string whose opening quote is at ``start``.

    Returns the unescaped text and the index past the closing quote, or
    ``(None, start)`` if the quote is never closed.
    """
    chars: List[str] = []
    i = start + 1
    n = len(header)
    while i < n:
        ch = header[i]
        if ch == "\\" and i + 1 < n:
            nxt = header[i + 1]
            if nxt in '"\\':
                chars.append(nxt)
            else:
                chars.append(ch)
                chars.append(nxt)
            i += 2
        elif ch == '"':
            return "".join(chars), i + 1
        else:
            chars.append(ch)
            i += 1
    return None, start


def _iter_pairs(header: str) -> Iterator[Tuple[str, Optional[str]]]:
    """Split a header value into ``(name, value)`` pairs.

    ``value`` is None for a bare ``name``.
    """
    i = 0
    n = len(header)
    while i < n:
        end = i
        while end < n and header[end] not in "=;":
            end += 1
        name = header[i:end].strip(WHITESPACE)

        if end == n or header[end] == ";":
            # an empty name here is a stray separator
            yield name, None
            i = end + 1
            continue

        # header[end] == "="
        i = end + 1
        while i < n and header[i] in WHITESPACE:
            i += 1

        value: Optional[str] = None
        if i < n and header[i] == '"':
            value, after = _read_quoted(header, i)
            if value is None:
                decoder_logger.debug("Unterminated quoted value for %r", name)
                # drop the dangling quote, stop at the next separator
                i += 1
            else:
                i = after

        semi = header.find(";", i)
        if semi == -1:
            semi = n
        if value is None:
            value = header[i:semi].strip(WHITESPACE)
        elif header[i:semi].strip(WHITESPACE):
            decoder_logger.debug(
                "Ignoring garbage after quoted value for %r: %r",
                name,
                header[i:semi],
            )
        i = semi + 1
        yield name, value


def _parse_int(attr: str, value: Optional[str]) -> Optional[int]:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        decoder_logger.debug("Ignoring invalid %s value %r", attr, value)
        return None


def _parse_ports(value: str) -> List[int]:
    ports = []
    for token in value.split(","):
        port = _parse_int("port", token.strip(WHITESPACE))
        if port is None:
            continue
        if not 0 <= port <= 65535:
            decoder_logger.debug("Ignoring out of range port %d", port)
            continue
        ports.append(port)
    return ports


class _Parser:
    """Two state cookie parser, see the module docstring."""

    def __init__(self) -> None:
        self.state = _State.NEW_COOKIE
        self.version = 0
        self.cookies: Dict[SortKey, Cookie] = {}
        self._fields: Dict[str, Any] = {}
        self._raw_ports: Optional[str] = None
        self._first = True

    def feed(self, name: str, value: Optional[str]) -> None:
        first, self._first = self._first, False
        if not name and value is None:
            return
        if name.startswith(hdrs.QUALIFIER_PREFIX):
            self._qualifier(name[1:], value)
        elif name not in _KNOWN_ATTRS or first:
            # the first pair is a cookie definition, even when rejected
            self._start(name, value)
        elif self.state is _State.QUALIFIER:
            self._attribute(_KNOWN_ATTRS[name], value)
        else:
            decoder_logger.debug("Ignoring %s outside of a cookie", name)

    def close(self) -> List[Cookie]:
        self._finish()
        return sorted(self.cookies.values())

    def _start(self, name: str, value: Optional[str]) -> None:
        self._finish()
        if not is_valid_cookie_name(name):
            decoder_logger.warning("Can not load cookie: Illegal cookie name %r", name)
            self.state = _State.NEW_COOKIE
            return
        self._fields = {
            "name": name,
            "value": "" if value is None else value,
            "version": self.version,
        }
        self.version = 0
        self._raw_ports = None
        self.state = _State.QUALIFIER

    def _qualifier(self, name: str, value: Optional[str]) -> None:
        field = _QUALIFIERS.get(name)
        if field is None:
            decoder_logger.debug("Ignoring unknown qualifier $%s", name)
        elif field == "version":
            version = _parse_int("$Version", value)
            if version is not None and version >= 0:
                self.version = version
        elif self.state is _State.QUALIFIER:
            self._attribute(field, value)
        else:
            decoder_logger.debug("Ignoring $%s outside of a cookie", name)

    def _attribute(self, field: str, value: Optional[str]) -> None:
        if field in _FLAGS:
            self._fields[field] = True
        elif field in _STRINGS:
            self._fields[field] = "" if value is None else value
        elif field == "max_age":
            max_age = _parse_int("Max-Age", value)
            if max_age is not None:
                self._fields[field] = max_age
        elif field == "expires":
            expires = parse_cookie_date(value)
            if expires is None:
                decoder_logger.debug("Ignoring invalid Expires value %r", value)
            else:
                self._fields[field] = expires
        elif field == "version":
            version = _parse_int("Version", value)
            if version is not None and version >= 0:
                self._fields[field] = version
        elif field == "ports":
            self._raw_ports = value or ""

    def _finish(self) -> None:
        if self.state is not _State.QUALIFIER:
            return
        fields = self._fields
        if self._raw_ports is not None and fields["version"] >= 1:
            fields["ports"] = _parse_ports(self._raw_ports)
        self._fields = {}
        self._raw_ports = None
        self.state = _State.NEW_COOKIE

        try:
            cookie = Cookie(**fields)
        except CookieError as exc:
            decoder_logger.warning("Can not load cookie: %s", exc)
            return
        self.cookies.setdefault(cookie.sort_key(), cookie)


def decode(header: Optional[str]) -> List[Cookie]:
    """Decode a ``Set-Cookie`` or ``Cookie`` header value.

    Returns the cookies found, without duplicates and sorted by
    :meth:`Cookie.sort_key`.  Malformed parts of the header are skipped,
    this function never raises for bad input.
    """
    if not header:
        return []
    parser = _Parser()
    for name, value in _iter_pairs(header):
        parser.feed(name, value)
    return parser.close()
