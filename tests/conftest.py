import asyncio

import httpx
import pytest

from get_data_url.converter import ConverterParams, GetDataUrl


@pytest.fixture
def serve():
    """Fetch a URL through a converter whose client is backed by a handler"""

    def _serve(handler, url="http://testserver/", params=None):
        async def _fetch():
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport) as client:
                converter = GetDataUrl.with_client(client, params=params)
                return await converter.fetch(url)

        return asyncio.run(_fetch())

    return _serve


@pytest.fixture
def hello_handler():
    """Responds to every GET with a plain text greeting"""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        return httpx.Response(200, text="Hello, World!")

    return handler


@pytest.fixture(
    params=[
        "always_base64",
        "preserve_text_when_safe",
    ]
)
def converter_params(request):
    return ConverterParams(policy=request.param)
