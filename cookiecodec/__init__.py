__version__ = "1.0.0.dev0"

from typing import Tuple

from . import hdrs
from .cookie import Cookie
from .cookie_decoder import decode
from .cookie_encoder import CookieEncoder, encode_cookies, encode_set_cookie
from .http_exceptions import CookieError, InvalidCookieAttribute, InvalidCookieName

__all__: Tuple[str, ...] = (
    "hdrs",
    # cookie
    "Cookie",
    # cookie_decoder
    "decode",
    # cookie_encoder
    "CookieEncoder",
    "encode_cookies",
    "encode_set_cookie",
    # http_exceptions
    "CookieError",
    "InvalidCookieAttribute",
    "InvalidCookieName",
)
