"""
Cookie header encoding.

Two quoting rules are used on purpose.  The cookie's own ``name=value``
pair is quoted only for the "simple" character set, which leaves ``/`` and
``=`` alone so that base64 values stay unquoted.  All other attributes use
the "strict" set which also quotes on ``/`` and ``=``.
"""

import datetime
from typing import AbstractSet, Dict, Iterable, Iterator, List, Optional, Union

from . import hdrs
from .cookie import Cookie, SortKey
from .helpers import DEBUG, SIMPLE_QUOTE_CHARS, STRICT_QUOTE_CHARS, format_cookie_date
from .log import encoder_logger

__all__ = ("CookieEncoder", "encode_cookies", "encode_set_cookie")

_SEPARATOR = "; "


def _quote(value: Optional[str]) -> str:
    if value is None:
        return '""'
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _maybe_quote(value: Optional[str], triggers: AbstractSet[str]) -> str:
    if value is None or not triggers.isdisjoint(value):
        return _quote(value)
    return value


def _pair(name: str, value: Optional[str], triggers: AbstractSet[str]) -> str:
    return f"{name}={_maybe_quote(value, triggers)}"


def _ports(ports: Iterable[int]) -> str:
    return '"' + ",".join(str(port) for port in ports) + '"'


def _client_pairs(cookie: Cookie) -> Iterator[str]:
    if cookie.version >= 1:
        yield f"{hdrs.QUALIFIER_PREFIX}{hdrs.VERSION}=1"

    yield _pair(cookie.name, cookie.value, SIMPLE_QUOTE_CHARS)

    if cookie.path is not None:
        if DEBUG and cookie.path == "/":
            encoder_logger.debug(
                "Cookie %r is sent with the default path '/', "
                "drop the path to elide it",
                cookie.name,
            )
        yield _pair(
            hdrs.QUALIFIER_PREFIX + hdrs.PATH.lower(), cookie.path, STRICT_QUOTE_CHARS
        )

    if cookie.domain is not None:
        yield _pair(
            hdrs.QUALIFIER_PREFIX + hdrs.DOMAIN, cookie.domain, STRICT_QUOTE_CHARS
        )

    if cookie.version >= 1 and cookie.ports:
        yield f"{hdrs.QUALIFIER_PREFIX}{hdrs.PORT}={_ports(cookie.ports)}"


def encode_cookies(cookies: Iterable[Cookie]) -> str:
    """Encode cookies into a ``Cookie`` request header value.

    Output order only depends on :meth:`Cookie.sort_key`, never on the
    order of ``cookies``.  Duplicates (by identity) are emitted once, the
    last one given wins.
    """
    unique: Dict[SortKey, Cookie] = {}
    for cookie in cookies:
        unique[cookie.sort_key()] = cookie
    parts: List[str] = []
    for key in sorted(unique):
        parts.extend(_client_pairs(unique[key]))
    return _SEPARATOR.join(parts)


class CookieEncoder:
    """Collects cookies and encodes them into a ``Cookie`` header value.

    :meth:`encode` consumes the collected cookies: the encoder is empty
    afterwards and cookies must be added again to be encoded again::

        encoder = CookieEncoder()
        encoder.add_cookie("JSESSIONID", "1234")
        headers[hdrs.COOKIE] = encoder.encode()

    An encoder is not thread safe, use one instance per caller.  The
    default path ``/`` is never elided, drop it from the cookie before
    adding it if the header should not carry it.
    """

    def __init__(self) -> None:
        self._cookies: Dict[SortKey, Cookie] = {}

    def __len__(self) -> int:
        return len(self._cookies)

    def __bool__(self) -> bool:
        return bool(self._cookies)

    def __iter__(self) -> Iterator[Cookie]:
        for key in sorted(self._cookies):
            yield self._cookies[key]

    def __contains__(self, cookie: object) -> bool:
        if not isinstance(cookie, Cookie):
            return False
        return cookie.sort_key() in self._cookies

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {len(self._cookies)} cookies>"

    def add_cookie(self, cookie: Union[Cookie, str], value: Optional[str] = "") -> None:
        """Add a cookie, or a new cookie built from a name and a value.

        A cookie with the same identity as one already added replaces it.
        """
        if not isinstance(cookie, Cookie):
            cookie = Cookie(cookie, value)
        self._cookies[cookie.sort_key()] = cookie

    def encode(self) -> str:
        """Encode the added cookies and empty the encoder.

        Returns an empty string if no cookie was added.
        """
        cookies, self._cookies = self._cookies, {}
        return encode_cookies(cookies.values())


def encode_set_cookie(cookie: Cookie) -> str:
    """Encode one cookie into a ``Set-Cookie`` response header value."""
    parts = [_pair(cookie.name, cookie.value, SIMPLE_QUOTE_CHARS)]
    rfc2965 = cookie.version >= 1

    if cookie.max_age is not None and rfc2965:
        parts.append(f"{hdrs.MAX_AGE}={cookie.max_age}")

    expires = cookie.expires
    if expires is None and cookie.max_age is not None and not rfc2965:
        expires = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
            seconds=cookie.max_age
        )
    if expires is not None:
        parts.append(f"{hdrs.EXPIRES}={format_cookie_date(expires)}")

    for attr, value in ((hdrs.PATH, cookie.path), (hdrs.DOMAIN, cookie.domain)):
        if value is None:
            continue
        if rfc2965:
            parts.append(_pair(attr, value, STRICT_QUOTE_CHARS))
        else:
            parts.append(f"{attr}={value}")

    if cookie.secure:
        parts.append(hdrs.SECURE)
    if cookie.http_only:
        parts.append(hdrs.HTTPONLY)

    if rfc2965:
        if cookie.comment is not None:
            parts.append(f"{hdrs.COMMENT}={_quote(cookie.comment)}")
        parts.append(f"{hdrs.VERSION}=1")
        if cookie.comment_url is not None:
            parts.append(f"{hdrs.COMMENTURL}={_quote(cookie.comment_url)}")
        if cookie.ports:
            parts.append(f"{hdrs.PORT}={_ports(cookie.ports)}")
        if cookie.discard:
            parts.append(hdrs.DISCARD)

    return _SEPARATOR.join(parts)
