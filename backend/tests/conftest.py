"""Shared fixtures. Everything runs FULLY OFFLINE: no Supabase and no LLM calls."""

import io
import os
import sys

# ── Ensure backend/ is importable when pytest runs from project root ──────────
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# ── Fake env vars BEFORE importing any settings-dependent app modules ─────────
os.environ.setdefault("SUPABASE_URL", "https://fake.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "fake-service-key")
os.environ.setdefault("OPENAI_API_KEY", "sk-fake-key-for-tests")
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("API_ACCESS_TOKEN", "")

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from app.core.config import get_settings
from app.main import app
from app.services.ai import AIService, get_ai_service
from app.services.kv_store import KVEntry, get_kv_store

PREFIX = get_settings().route_prefix
AUTH = {"Authorization": "Bearer test-anon-key"}


class InMemoryKVStore:
    """Dict-backed stand-in for KVStore with the same method surface."""

    def __init__(self):
        self.data: dict = {}
        self.writes: list[str] = []

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.writes.append(key)
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)

    def get_by_prefix(self, prefix):
        return [KVEntry(key=k, value=v) for k, v in sorted(self.data.items()) if k.startswith(prefix)]


def completion_response(content: str):
    """Mimic the shape of an OpenAI chat-completions response."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def make_llm_client(content: str = "{}"):
    client = MagicMock()
    client.chat.completions.create.return_value = completion_response(content)
    return client


def make_pdf(text: str) -> bytes:
    """Render ``text`` into a real PDF, one line per 80 characters."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    y = A4[1] - 72
    for start in range(0, len(text), 80):
        if y < 72:
            pdf.showPage()
            y = A4[1] - 72
        pdf.drawString(72, y, text[start:start + 80])
        y -= 14
    pdf.save()
    return buffer.getvalue()


@pytest.fixture
def store():
    return InMemoryKVStore()


@pytest.fixture
def llm_client():
    return make_llm_client()


@pytest.fixture
def client(store, llm_client):
    service = AIService(client=llm_client, settings=get_settings())
    app.dependency_overrides[get_kv_store] = lambda: store
    app.dependency_overrides[get_ai_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
