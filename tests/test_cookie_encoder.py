import datetime
import itertools
import logging
from typing import List

import pytest

from cookiecodec import (
    Cookie,
    CookieEncoder,
    CookieError,
    decode,
    encode_cookies,
    encode_set_cookie,
)
from cookiecodec import cookie_encoder
from cookiecodec.helpers import SIMPLE_QUOTE_CHARS, STRICT_QUOTE_CHARS


def test_encode_empty() -> None:
    encoder = CookieEncoder()
    assert encoder.encode() == ""
    assert encode_cookies([]) == ""


def test_encode_single() -> None:
    encoder = CookieEncoder()
    encoder.add_cookie(Cookie("a", "1"))
    assert encoder.encode() == "a=1"


def test_add_cookie_by_name() -> None:
    encoder = CookieEncoder()
    encoder.add_cookie("JSESSIONID", "1234")
    encoder.add_cookie("empty")
    assert encoder.encode() == "JSESSIONID=1234; empty="


def test_encode_clears_encoder() -> None:
    encoder = CookieEncoder()
    encoder.add_cookie(Cookie("a", "1"))
    assert encoder
    assert len(encoder) == 1

    assert encoder.encode() == "a=1"
    assert not encoder
    assert len(encoder) == 0
    assert encoder.encode() == ""

    encoder.add_cookie(Cookie("a", "1"))
    assert encoder.encode() == "a=1"


def test_encoder_container() -> None:
    encoder = CookieEncoder()
    first = Cookie("b", "2")
    second = Cookie("a", "1", path="/x")
    encoder.add_cookie(first)
    encoder.add_cookie(second)

    assert list(encoder) == [second, first]
    assert Cookie("b", "2", secure=True) in encoder
    assert Cookie("c") not in encoder
    assert "b" not in encoder
    assert repr(encoder) == "<CookieEncoder 2 cookies>"


def test_add_same_cookie_replaces() -> None:
    encoder = CookieEncoder()
    encoder.add_cookie(Cookie("a", "1"))
    encoder.add_cookie(Cookie("a", "1", version=1))
    assert len(encoder) == 1
    assert encoder.encode() == "$Version=1; a=1"


def test_encode_jsessionid_without_default_path() -> None:
    (cookie,) = decode("JSESSIONID=9C827DD791A2E7E8875A0881A05A7DDB; Path=/; HttpOnly")
    encoder = CookieEncoder()
    encoder.add_cookie(cookie.replace(path=None))
    assert encoder.encode() == "JSESSIONID=9C827DD791A2E7E8875A0881A05A7DDB"


def test_encode_keeps_default_path() -> None:
    (cookie,) = decode("name=value; path=/")
    assert cookie.path == "/"

    encoder = CookieEncoder()
    encoder.add_cookie(cookie)
    assert encoder.encode() == 'name=value; $path="/"'


def test_encode_base64_value_simple_vs_strict() -> None:
    value = "WRNWIV2HzJ+EfcQcooRUavrGE5YMwetfBEN3wjvFdFr5Fz0w/aUe0Qoi9jf7EQ=="
    assert encode_cookies([Cookie("lb", value)]) == "lb=" + value
    assert encode_cookies([Cookie("lb", "v", path=value)]) == f'lb=v; $path="{value}"'


def test_encode_path_and_domain() -> None:
    cookie = Cookie("a", "1", path="/acme", domain="example.com")
    assert encode_cookies([cookie]) == 'a=1; $path="/acme"; $Domain=example.com'


def test_encode_domain_strict_quoting() -> None:
    cookie = Cookie("a", "1", domain="x=y")
    assert encode_cookies([cookie]) == 'a=1; $Domain="x=y"'


def test_encode_version_1() -> None:
    cookie = Cookie(
        "a", "1", path="/acme", domain=".example.com", version=1, ports=[8080, 80]
    )
    assert encode_cookies([cookie]) == (
        '$Version=1; a=1; $path="/acme"; $Domain=.example.com; $Port="80,8080"'
    )


def test_encode_version_1_single_port() -> None:
    cookie = Cookie("a", "1", version=2, ports=[443])
    assert encode_cookies([cookie]) == '$Version=1; a=1; $Port="443"'


def test_encode_version_0_ignores_ports() -> None:
    cookie = Cookie("a", "1", ports=[80])
    assert encode_cookies([cookie]) == "a=1"


def test_encode_skips_response_only_attributes() -> None:
    cookie = Cookie(
        "a",
        "1",
        secure=True,
        http_only=True,
        max_age=10,
        comment="c",
        comment_url="u",
        discard=True,
    )
    assert encode_cookies([cookie]) == "a=1"


@pytest.mark.parametrize("char", sorted(SIMPLE_QUOTE_CHARS - {'"', "\\"}))
def test_simple_quoting(char: str) -> None:
    value = f"a{char}b"
    assert encode_cookies([Cookie("n", value)]) == f'n="{value}"'


@pytest.mark.parametrize("char", sorted(STRICT_QUOTE_CHARS - {'"', "\\"}))
def test_strict_quoting(char: str) -> None:
    value = f"a{char}b"
    assert encode_cookies([Cookie("n", "v", path=value)]) == f'n=v; $path="{value}"'


@pytest.mark.parametrize("value", ["plain", "a/b", "a=b", "a+b", "a.b-c_d", "", "%20"])
def test_no_quoting_needed(value: str) -> None:
    assert encode_cookies([Cookie("n", value)]) == f"n={value}"


def test_quoting_escapes() -> None:
    cookie = Cookie("n", 'a"b\\c')
    assert encode_cookies([cookie]) == 'n="a\\"b\\\\c"'


def test_none_value() -> None:
    assert encode_cookies([Cookie("n", None)]) == 'n=""'


def test_escape_round_trip() -> None:
    cookie = Cookie("n", 'say "hi" \\o/')
    (decoded,) = decode(encode_cookies([cookie]))
    assert decoded.value == 'say "hi" \\o/'


def _cookies() -> List[Cookie]:
    return [
        Cookie("b", "2"),
        Cookie("a", "1", path="/x"),
        Cookie("a", "1"),
        Cookie("c", "x/y==", domain="example.com"),
        Cookie("a", "0"),
    ]


def test_encode_order() -> None:
    assert encode_cookies(_cookies()) == (
        'a=1; $path="/x"; a=0; a=1; b=2; c=x/y==; $Domain=example.com'
    )


def test_encode_is_deterministic() -> None:
    results = set()
    for permutation in itertools.permutations(_cookies()):
        encoder = CookieEncoder()
        for cookie in permutation:
            encoder.add_cookie(cookie)
        results.add(encoder.encode())
    assert len(results) == 1


def test_round_trip() -> None:
    cookies = [
        Cookie("a", "1", path="/p"),
        Cookie("b", "x/y==", domain="example.com"),
        Cookie("c", "3", path="/deep/er", domain="example.com"),
        Cookie("d", ""),
    ]
    assert decode(encode_cookies(cookies)) == sorted(cookies)


def test_round_trip_version_1() -> None:
    cookie = Cookie("a", "1", path="/p", version=1, ports=[80, 8080])
    (decoded,) = decode(encode_cookies([cookie]))
    assert decoded == cookie
    assert decoded.version == 1
    assert decoded.ports == (80, 8080)


def test_round_trip_mixed_versions() -> None:
    cookies = [Cookie("a", "1", version=1), Cookie("b", "2")]
    versions = {c.name: c.version for c in decode(encode_cookies(cookies))}
    assert versions == {"a": 1, "b": 0}


@pytest.mark.parametrize("name", ["$x", "path", "Secure", "max-age"])
def test_names_that_would_not_round_trip_are_rejected(name: str) -> None:
    with pytest.raises(CookieError):
        Cookie(name, "x")


def test_round_trip_after_qualifier_like_value() -> None:
    cookies = [Cookie("a", "$Path"), Cookie("b", "path")]
    assert decode(encode_cookies(cookies)) == cookies


def test_debug_hint_for_default_path(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(cookie_encoder, "DEBUG", True)
    caplog.set_level(logging.DEBUG, logger="cookiecodec.encoder")
    assert encode_cookies([Cookie("a", "1", path="/")]) == 'a=1; $path="/"'
    assert "default path" in caplog.text


def test_no_debug_hint(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(cookie_encoder, "DEBUG", False)
    caplog.set_level(logging.DEBUG, logger="cookiecodec.encoder")
    encode_cookies([Cookie("a", "1", path="/")])
    assert caplog.text == ""


# ------------------- Set-Cookie ----------------------------------


def test_encode_set_cookie() -> None:
    cookie = Cookie(
        "a", "1", path="/", domain="example.com", secure=True, http_only=True
    )
    assert encode_set_cookie(cookie) == (
        "a=1; Path=/; Domain=example.com; Secure; HttpOnly"
    )


def test_encode_set_cookie_expires() -> None:
    expires = datetime.datetime(2021, 1, 13, 22, 23, 1, tzinfo=datetime.timezone.utc)
    cookie = Cookie("a", "1", expires=expires)
    assert encode_set_cookie(cookie) == "a=1; Expires=Wed, 13 Jan 2021 22:23:01 GMT"


def test_encode_set_cookie_max_age_version_0() -> None:
    cookie = Cookie("a", "1", max_age=3600)
    header = encode_set_cookie(cookie)
    assert header.startswith("a=1; Expires=")
    assert header.endswith(" GMT")
    assert "Max-Age" not in header

    (decoded,) = decode(header)
    assert decoded.expires is not None
    now = datetime.datetime.now(datetime.timezone.utc)
    assert decoded.expires > now


def test_encode_set_cookie_version_1() -> None:
    cookie = Cookie(
        "a",
        "1",
        path="/",
        max_age=10,
        comment="hi there",
        comment_url="http://example.com/",
        version=1,
        ports=[80],
        discard=True,
    )
    assert encode_set_cookie(cookie) == (
        'a=1; Max-Age=10; Path="/"; Comment="hi there"; Version=1; '
        'CommentURL="http://example.com/"; Port="80"; Discard'
    )


def test_encode_set_cookie_decodes_back() -> None:
    cookie = Cookie(
        "sid",
        'quo"ted',
        path="/app",
        domain="example.com",
        secure=True,
        http_only=True,
        max_age=10,
        comment="c",
        version=1,
        ports=[80, 443],
        discard=True,
    )
    (decoded,) = decode(encode_set_cookie(cookie))
    assert decoded == cookie
    assert decoded.secure
    assert decoded.http_only
    assert decoded.max_age == 10
    assert decoded.comment == "c"
    assert decoded.version == 1
    assert decoded.ports == (80, 443)
    assert decoded.discard
