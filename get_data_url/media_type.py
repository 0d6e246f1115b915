import re
from typing import Optional

DEFAULT_MEDIA_TYPE = "application/octet-stream"

# RFC 7230 tchar
_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'

_ESSENCE_RE = re.compile(rf"\s*({_TOKEN})/({_TOKEN})\s*")
_PARAM_RE = re.compile(rf"(;\s*)({_TOKEN})=({_TOKEN}|{_QUOTED})\s*")

_TEXTUAL_APPLICATION_TYPES = {
    "application/javascript",
    "application/ecmascript",
}


def parse_media_type(value: Optional[str | bytes]) -> Optional[str]:
    """Parse a Content-Type header value into a normalised media type.

    Returns None when the value is missing, is not valid UTF-8, or does not
    look like ``type/subtype`` followed by ``;name=value`` parameters.
    The type, subtype and parameter names are lower-cased. Parameter values
    and the separator before each parameter are kept as sent, so
    ``text/plain;charset=utf-8`` comes back unchanged. Whitespace around
    the whole value and before each ``;`` is dropped.
    """
    if value is None:
        return None
    if isinstance(value, bytes):
        try:
            value = value.decode("utf-8")
        except UnicodeDecodeError:
            return None

    match = _ESSENCE_RE.match(value)
    if match is None:
        return None
    media_type = f"{match.group(1)}/{match.group(2)}".lower()

    pos = match.end()
    while pos < len(value):
        param = _PARAM_RE.match(value, pos)
        if param is None:
            return None
        separator, name, param_value = param.groups()
        media_type += f"{separator}{name.lower()}={param_value}"
        pos = param.end()

    return media_type


def essence(media_type: str) -> str:
    return media_type.split(";", 1)[0].strip().lower()


def is_textual(media_type: str) -> bool:
    """True for media types whose body is meant to be read as text"""
    main = essence(media_type)
    if main.startswith("text/"):
        return True
    if main in _TEXTUAL_APPLICATION_TYPES:
        return True
    subtype = main.partition("/")[2]
    return subtype in ("json", "xml") or subtype.endswith(("+json", "+xml"))
