"""Pytest configuration and fixtures."""

import socket
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from ficha_tecnica.api.dependencies import get_pipeline
from ficha_tecnica.config import Settings
from ficha_tecnica.main import app
from ficha_tecnica.middleware.rate_limit import rate_limit_dependency
from ficha_tecnica.services.extraction_client import ExtractionClient
from ficha_tecnica.services.fetcher_service import LinkFetcher
from ficha_tecnica.services.image_service import ImageService
from ficha_tecnica.services.input_resolver import InputResolver
from ficha_tecnica.services.pipeline import TechnicalSheetPipeline
from ficha_tecnica.services.sheet_filler import SheetFiller
from ficha_tecnica.services.structuring_client import StructuringClient

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64
PUBLIC_IP = "93.184.216.34"

BOLO_JSON = """{
  "nomeReceita": "Bolo de Cenoura",
  "ingredientes": [
    {"nome": "Cenoura", "qtdBruta": 300, "qtdLiquida": 250, "preco": null},
    {"nome": "Farinha de trigo", "qtdBruta": 240, "qtdLiquida": 240, "preco": 1.8}
  ],
  "modoPreparo": "1. Bata tudo. 2. Asse por 40 minutos.",
  "avisos": ["Preço da cenoura não informado"]
}"""


class FakeGemini:
    """Stands in for GeminiClient: replays scripted replies and records calls."""

    def __init__(self, replies: Optional[List[Any]] = None):
        self.replies = list(replies or [])
        self.calls: List[dict] = []

    async def generate_text(self, contents, *, max_output_tokens, system_instruction=None):
        self.calls.append(
            {
                "contents": contents,
                "max_output_tokens": max_output_tokens,
                "system_instruction": system_instruction,
            }
        )
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def fake_dns(monkeypatch) -> Dict[str, str]:
    """
    Resolve hostnames without the network. Unknown names map to a public
    address, names under .invalid fail; tests may add entries.
    """
    hosts: Dict[str, str] = {}

    def getaddrinfo(host, port, *args, **kwargs):
        if host.endswith(".invalid"):
            raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
        address = hosts.get(host, PUBLIC_IP)
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (address, 0))]

    monkeypatch.setattr(socket, "getaddrinfo", getaddrinfo)
    return hosts


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def template_path(tmp_path):
    """Blank template with the Planilha1 sheet the filler expects."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Planilha1"
    worksheet["B4"] = "INGREDIENTES"
    path = tmp_path / "Modelo_FT_2026.xlsx"
    workbook.save(path)
    return path


@pytest.fixture
def test_settings(tmp_path, template_path):
    return Settings(
        gemini_api_key="test-gemini-key",
        template_path=template_path,
        output_dir=tmp_path / "output",
    )


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def pipeline(test_settings, fake_gemini):
    resolver = InputResolver(
        fetcher=LinkFetcher(test_settings),
        extraction_client=ExtractionClient(fake_gemini, test_settings),
        image_service=ImageService(test_settings),
    )
    return TechnicalSheetPipeline(
        resolver=resolver,
        structuring_client=StructuringClient(fake_gemini, test_settings, system_prompt="prompt"),
        sheet_filler=SheetFiller(test_settings),
    )


@pytest.fixture
def client(pipeline):
    """Test client wired to the fake pipeline, without rate limiting."""
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[rate_limit_dependency] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()
