import base64
from unittest import mock

import pytest
import requests

from moralbook.ai_generation import ImageDownloader
from moralbook.common import NullCache, TTLCache


def _response(content: bytes, content_type: str | None = "image/jpeg", status: int = 200):
    response = mock.MagicMock()
    response.content = content
    response.headers = {"content-type": content_type} if content_type else {}
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return response


@pytest.mark.asyncio
async def test_data_uri_is_returned_unchanged():
    session = mock.MagicMock()
    downloader = ImageDownloader(session=session)
    embedded = "data:image/png;base64,AAAA"

    assert await downloader.download_image_as_base64(embedded) == embedded
    session.get.assert_not_called()


@pytest.mark.asyncio
async def test_remote_image_is_encoded_as_data_uri():
    session = mock.MagicMock()
    session.get.return_value = _response(b"\xff\xd8jpeg-bytes", "image/jpeg; charset=binary")
    downloader = ImageDownloader(session=session, request_timeout=5)

    result = await downloader.download_image_as_base64("https://cdn.example.com/a.jpg")

    expected = base64.b64encode(b"\xff\xd8jpeg-bytes").decode("ascii")
    assert result == f"data:image/jpeg;base64,{expected}"
    session.get.assert_called_once_with("https://cdn.example.com/a.jpg", timeout=5)


@pytest.mark.asyncio
async def test_missing_content_type_defaults_to_png():
    session = mock.MagicMock()
    session.get.return_value = _response(b"png", content_type=None)

    result = await ImageDownloader(session=session).download_image_as_base64(
        "https://cdn.example.com/a"
    )

    assert result.startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_repeat_downloads_are_served_from_cache():
    session = mock.MagicMock()
    session.get.return_value = _response(b"img")
    downloader = ImageDownloader(session=session, cache=TTLCache(max_size=4, ttl_seconds=60))

    first = await downloader.download_image_as_base64("https://cdn.example.com/a.jpg")
    second = await downloader.download_image_as_base64("https://cdn.example.com/a.jpg")

    assert first == second
    session.get.assert_called_once()


@pytest.mark.asyncio
async def test_null_cache_fetches_every_time():
    session = mock.MagicMock()
    session.get.return_value = _response(b"img")
    downloader = ImageDownloader(session=session, cache=NullCache())

    await downloader.download_image_as_base64("https://cdn.example.com/a.jpg")
    await downloader.download_image_as_base64("https://cdn.example.com/a.jpg")

    assert session.get.call_count == 2


@pytest.mark.asyncio
async def test_http_errors_propagate():
    session = mock.MagicMock()
    session.get.return_value = _response(b"", status=404)

    with pytest.raises(requests.HTTPError):
        await ImageDownloader(session=session).download_image_as_base64(
            "https://cdn.example.com/missing.png"
        )


@pytest.mark.asyncio
async def test_unsupported_scheme_is_rejected():
    with pytest.raises(ValueError):
        await ImageDownloader(session=mock.MagicMock()).download_image_as_base64(
            "/placeholder-illustration.svg"
        )


@pytest.mark.asyncio
async def test_scheme_check_ignores_case():
    session = mock.MagicMock()
    session.get.return_value = _response(b"img", content_type="image/png")
    downloader = ImageDownloader(session=session, cache=NullCache())

    result = await downloader.download_image_as_base64("HTTPS://cdn.example.com/a.png")

    assert result == "data:image/png;base64," + base64.b64encode(b"img").decode()
    session.get.assert_called_once()
