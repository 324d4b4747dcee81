"""HTTP cookie header and attribute name constants."""

from typing import Final

from multidict import istr

COOKIE: Final[istr] = istr("Cookie")
SET_COOKIE: Final[istr] = istr("Set-Cookie")

# Set-Cookie attributes (RFC 6265, RFC 2965)
PATH: Final[istr] = istr("Path")
DOMAIN: Final[istr] = istr("Domain")
SECURE: Final[istr] = istr("Secure")
HTTPONLY: Final[istr] = istr("HttpOnly")
MAX_AGE: Final[istr] = istr("Max-Age")
EXPIRES: Final[istr] = istr("Expires")
VERSION: Final[istr] = istr("Version")
COMMENT: Final[istr] = istr("Comment")
COMMENTURL: Final[istr] = istr("CommentURL")
DISCARD: Final[istr] = istr("Discard")
PORT: Final[istr] = istr("Port")

# RFC 2965 qualifiers are sent back by the client with this prefix
QUALIFIER_PREFIX: Final[str] = "$"
