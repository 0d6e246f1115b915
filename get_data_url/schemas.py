import base64
import binascii
import enum
import string
from dataclasses import dataclass
from urllib.parse import unquote_to_bytes

from .errors import InvalidDataUrl

__all__ = [
    "DataUrl",
    "EncodingPolicy",
    "percent_encode",
    "urlsafe_b64encode_unpadded",
]

_ALPHANUMERIC = frozenset((string.ascii_letters + string.digits).encode("ascii"))

# Every byte that is not an ASCII letter or digit gets escaped, including
# the RFC 3986 unreserved marks "-", ".", "_" and "~".
_PERCENT_TABLE = [
    chr(byte) if byte in _ALPHANUMERIC else f"%{byte:02X}" for byte in range(256)
]

RFC2397_DEFAULT_MEDIA_TYPE = "text/plain;charset=US-ASCII"


class EncodingPolicy(str, enum.Enum):
    """How a fetched body is encoded into the data URL"""

    ALWAYS_BASE64 = "always_base64"
    PRESERVE_TEXT_WHEN_SAFE = "preserve_text_when_safe"


def percent_encode(data: bytes) -> str:
    return "".join(_PERCENT_TABLE[byte] for byte in data)


def urlsafe_b64encode_unpadded(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode_any(payload: str) -> bytes:
    payload = payload.strip().rstrip("=")
    payload = payload.replace("+", "-").replace("/", "_")
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidDataUrl(f"Invalid base64 payload: {e}") from e


@dataclass(frozen=True)
class DataUrl:
    """An RFC 2397 ``data:`` URL.

    ``str()`` renders ``data:<media_type>[;base64],<payload>``. The base64
    payload uses the URL-safe alphabet without padding; otherwise every byte
    that is not an ASCII letter or digit is percent-encoded.

    The media type is trusted as given: a comma in it produces a URL that
    cannot be parsed back.
    """

    media_type: str
    data: bytes
    base64_encoded: bool

    def __str__(self) -> str:
        encoding = ";base64" if self.base64_encoded else ""
        if self.base64_encoded:
            payload = urlsafe_b64encode_unpadded(self.data)
        else:
            payload = percent_encode(self.data)
        return f"data:{self.media_type}{encoding},{payload}"

    def to_string(self) -> str:
        return str(self)

    @classmethod
    def parse(cls, text: str) -> "DataUrl":
        """Parse a ``data:`` URL back into its parts.

        Base64 payloads are accepted in either alphabet, with or without
        padding. An empty media type becomes the RFC 2397 default,
        ``text/plain;charset=US-ASCII``.
        """
        if text[:5].lower() != "data:":
            raise InvalidDataUrl(f"Not a data URL: {text[:32]!r}")
        header, sep, payload = text[5:].partition(",")
        if not sep:
            raise InvalidDataUrl("Data URL has no ',' separating header and payload")

        segments = header.split(";")
        base64_encoded = len(segments) > 1 and segments[-1].strip().lower() == "base64"
        if base64_encoded:
            segments = segments[:-1]

        media_type = ";".join(segments).strip()
        if not media_type:
            media_type = RFC2397_DEFAULT_MEDIA_TYPE
        elif media_type.startswith(";"):
            media_type = "text/plain" + media_type

        if base64_encoded:
            data = _b64decode_any(payload)
        else:
            data = unquote_to_bytes(payload)

        return cls(media_type=media_type, data=data, base64_encoded=base64_encoded)
