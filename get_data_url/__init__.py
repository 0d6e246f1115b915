"""
get_data_url - Fetch resources over HTTP and encode them as RFC 2397 data URLs
"""

from .schemas import *

from .converter import *

from .errors import DataUrlError, InvalidDataUrl, TransportError
from .media_type import DEFAULT_MEDIA_TYPE, parse_media_type

try:
    from ._version import version as __version__
except ImportError:
    __version__ = "unknown"
