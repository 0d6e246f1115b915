import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, field_validator

from .errors import TransportError
from .media_type import DEFAULT_MEDIA_TYPE, is_textual, parse_media_type
from .schemas import DataUrl, EncodingPolicy

__all__ = ["ConverterParams", "GetDataUrl", "url_to_data_url"]

logger = logging.getLogger(__name__)

# httpx.InvalidURL and httpx.StreamError do not derive from httpx.HTTPError
_CLIENT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError)

# IDNA encoding of a malformed host while httpx builds the request URL
# raises a UnicodeError (idna.IDNAError) rather than httpx.InvalidURL
_REQUEST_ERRORS = _CLIENT_ERRORS + (UnicodeError,)


class ConverterParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    policy: EncodingPolicy = EncodingPolicy.ALWAYS_BASE64
    default_media_type: str = DEFAULT_MEDIA_TYPE

    @field_validator("default_media_type")
    @classmethod
    def _check_default_media_type(cls, value: str) -> str:
        if not value or "," in value:
            raise ValueError("default_media_type must be non-empty and contain no ','")
        return value


def _content_type_header(response: httpx.Response) -> Optional[bytes]:
    for name, value in response.headers.raw:
        if name.lower() == b"content-type":
            return value
    return None


def _wants_base64(policy: EncodingPolicy, media_type: str, data: bytes) -> bool:
    if policy == EncodingPolicy.ALWAYS_BASE64:
        return True
    if not is_textual(media_type):
        return True
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return False


class GetDataUrl:
    """Fetch URLs over HTTP and turn the responses into data URLs.

    The converter keeps no state between requests, so one instance can be
    shared by concurrent tasks. Pass a configured ``httpx.AsyncClient`` to
    control timeouts, proxies, TLS or headers; a client passed in is never
    closed by the converter.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        params: Optional[ConverterParams] = None,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()
        self.params = params or ConverterParams()

    @classmethod
    def with_client(
        cls, client: httpx.AsyncClient, params: Optional[ConverterParams] = None
    ) -> "GetDataUrl":
        return cls(client=client, params=params)

    async def fetch(self, url: str) -> DataUrl:
        """GET ``url`` and convert the response.

        Every failure raised by httpx surfaces as TransportError. Error
        status codes are not failures; their bodies are converted as-is.
        """
        logger.debug("GET %s", url)
        try:
            response = await self.client.get(url)
        except _REQUEST_ERRORS as e:
            logger.debug("GET %s failed: %s", url, e)
            raise TransportError(e) from e
        logger.debug("GET %s -> %s", url, response.status_code)
        return await self.response_to_data_url(response)

    async def response_to_data_url(
        self, response: httpx.Response, policy: Optional[EncodingPolicy] = None
    ) -> DataUrl:
        """Convert an already received response into a DataUrl.

        ``response`` must support async reading: one returned by an
        ``httpx.AsyncClient``, or one built with in-memory content. A
        response from a synchronous ``httpx.Client`` with an unread stream
        makes httpx raise RuntimeError, which is not a transport failure
        and is not wrapped.
        """
        policy = policy or self.params.policy

        media_type = parse_media_type(_content_type_header(response))
        if media_type is None:
            logger.debug(
                "No usable Content-Type, falling back to %s",
                self.params.default_media_type,
            )
            media_type = self.params.default_media_type

        try:
            data = await response.aread()
        except _CLIENT_ERRORS as e:
            logger.debug("Reading response body failed: %s", e)
            raise TransportError(e) from e

        return DataUrl(
            media_type=media_type,
            data=data,
            base64_encoded=_wants_base64(policy, media_type, data),
        )

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "GetDataUrl":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


async def url_to_data_url(url: str) -> str:
    async with GetDataUrl() as converter:
        data_url = await converter.fetch(url)
    return str(data_url)
