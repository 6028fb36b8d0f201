"""Tests for input selection, link fetching and input resolution."""

import httpx
import pytest

from conftest import JPEG_BYTES, PNG_BYTES, FakeGemini
from ficha_tecnica.models.recipe import ImageSource, LinkSource, TextSource
from ficha_tecnica.services.extraction_client import ExtractionClient
from ficha_tecnica.services.fetcher_service import USER_AGENT, LinkFetcher
from ficha_tecnica.services.image_service import ImageService
from ficha_tecnica.services.input_resolver import InputResolver, build_source
from ficha_tecnica.utils.exceptions import (
    AmbiguousInputError,
    ExtractionError,
    FetchError,
    ImageProcessingError,
    NoInputError,
)

RECIPE_HTML = "<html><body><h1>Pão de Queijo</h1><ul><li>500 g polvilho</li></ul></body></html>"


def _mock_transport(handler):
    return httpx.MockTransport(handler)


def _resolver(test_settings, gemini=None, transport=None):
    gemini = gemini or FakeGemini()
    return InputResolver(
        fetcher=LinkFetcher(test_settings, transport=transport),
        extraction_client=ExtractionClient(gemini, test_settings),
        image_service=ImageService(test_settings),
    )


# -- build_source --


def test_build_source_text():
    source = build_source(text="  3 ovos\n")
    assert source == TextSource(text="  3 ovos\n")


def test_build_source_link():
    source = build_source(link=" https://example.com/bolo ")
    assert source == LinkSource(url="https://example.com/bolo")


def test_build_source_image():
    source = build_source(image=PNG_BYTES, content_type="image/png", filename="bolo.png")
    assert isinstance(source, ImageSource)
    assert source.data == PNG_BYTES
    assert source.filename == "bolo.png"


def test_build_source_nothing_raises():
    with pytest.raises(NoInputError):
        build_source()


def test_build_source_blank_fields_count_as_absent():
    with pytest.raises(NoInputError):
        build_source(text="   ", link="", image=b"")


def test_build_source_more_than_one_raises():
    with pytest.raises(AmbiguousInputError, match="text, link"):
        build_source(text="3 ovos", link="https://example.com/bolo")


def test_ambiguous_input_is_a_no_input_error():
    with pytest.raises(NoInputError):
        build_source(link="https://example.com/bolo", image=JPEG_BYTES)


# -- InputResolver --


@pytest.mark.anyio
async def test_resolve_text_verbatim(test_settings):
    resolver = _resolver(test_settings)
    text = "Bolo\n\n2 ovos  \n"
    assert await resolver.resolve(TextSource(text=text)) == text


@pytest.mark.anyio
async def test_resolve_link_returns_raw_body(test_settings):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["user_agent"] = request.headers["user-agent"]
        return httpx.Response(200, text=RECIPE_HTML)

    resolver = _resolver(test_settings, transport=_mock_transport(handler))

    body = await resolver.resolve(LinkSource(url="https://example.com/pao-de-queijo"))

    assert body == RECIPE_HTML
    assert seen["user_agent"] == USER_AGENT


@pytest.mark.anyio
async def test_resolve_image_uses_extraction_client(test_settings):
    gemini = FakeGemini(["Receita extraída da foto"])
    resolver = _resolver(test_settings, gemini=gemini)

    text = await resolver.resolve(ImageSource(data=PNG_BYTES, content_type="image/png"))

    assert text == "Receita extraída da foto"
    assert gemini.calls[0]["contents"][0].inline_data.mime_type == "image/png"


@pytest.mark.anyio
async def test_resolve_image_rejects_unsupported_format(test_settings):
    gemini = FakeGemini()
    resolver = _resolver(test_settings, gemini=gemini)

    with pytest.raises(ImageProcessingError):
        await resolver.resolve(ImageSource(data=b"GIF89a" + b"\x00" * 10))
    assert gemini.calls == []


@pytest.mark.anyio
async def test_resolve_image_propagates_extraction_error(test_settings):
    resolver = _resolver(test_settings, gemini=FakeGemini([RuntimeError("boom")]))

    with pytest.raises(ExtractionError):
        await resolver.resolve(ImageSource(data=JPEG_BYTES))


# -- LinkFetcher --


@pytest.mark.anyio
async def test_fetch_http_error_raises_fetch_error(test_settings):
    transport = _mock_transport(lambda request: httpx.Response(404, text="not found"))
    fetcher = LinkFetcher(test_settings, transport=transport)

    with pytest.raises(FetchError, match="copie e cole"):
        await fetcher.fetch("https://example.com/missing")


@pytest.mark.anyio
async def test_fetch_timeout_raises_fetch_error(test_settings):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    fetcher = LinkFetcher(test_settings, transport=_mock_transport(handler))

    with pytest.raises(FetchError) as exc_info:
        await fetcher.fetch("https://example.com/slow")
    assert exc_info.value.url == "https://example.com/slow"
    assert "https://example.com/slow" in str(exc_info.value)


@pytest.mark.anyio
async def test_fetch_connection_error_raises_fetch_error(test_settings):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    fetcher = LinkFetcher(test_settings, transport=_mock_transport(handler))

    with pytest.raises(FetchError):
        await fetcher.fetch("https://example.com/down")


@pytest.mark.anyio
async def test_fetch_follows_redirects(test_settings):
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.com/new"})
        return httpx.Response(200, text="nova receita")

    fetcher = LinkFetcher(test_settings, transport=_mock_transport(handler))

    assert await fetcher.fetch("https://example.com/old") == "nova receita"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "url",
    ["ftp://example.com/receita", "http://localhost/receita", "http://192.168.0.10/receita", "nada"],
)
async def test_fetch_rejects_unsafe_urls(test_settings, url):
    def handler(request):
        raise AssertionError("should not be called")

    fetcher = LinkFetcher(test_settings, transport=_mock_transport(handler))

    with pytest.raises(FetchError):
        await fetcher.fetch(url)


@pytest.mark.anyio
async def test_fetch_rejects_redirect_to_private_address(test_settings):
    requested = []

    def handler(request):
        requested.append(str(request.url))
        if request.url.host == "example.com":
            return httpx.Response(
                302, headers={"Location": "http://169.254.169.254/latest/meta-data"}
            )
        return httpx.Response(200, text="SECRET")

    fetcher = LinkFetcher(test_settings, transport=_mock_transport(handler))

    with pytest.raises(FetchError):
        await fetcher.fetch("https://example.com/r")
    assert requested == ["https://example.com/r"]


@pytest.mark.anyio
async def test_fetch_rejects_redirect_to_host_resolving_privately(test_settings, fake_dns):
    fake_dns["interno.example.net"] = "10.0.0.8"

    def handler(request):
        if request.url.host == "example.com":
            return httpx.Response(302, headers={"Location": "https://interno.example.net/admin"})
        return httpx.Response(200, text="SECRET")

    fetcher = LinkFetcher(test_settings, transport=_mock_transport(handler))

    with pytest.raises(FetchError, match="copie e cole"):
        await fetcher.fetch("https://example.com/receita")


@pytest.mark.anyio
async def test_fetch_rejects_host_resolving_privately(test_settings, fake_dns):
    fake_dns["receitas.example.org"] = "192.168.1.20"

    def handler(request):
        raise AssertionError("should not be called")

    fetcher = LinkFetcher(test_settings, transport=_mock_transport(handler))

    with pytest.raises(FetchError):
        await fetcher.fetch("https://receitas.example.org/bolo")
