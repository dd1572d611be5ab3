"""
Shared fixtures: in-memory database, temporary blob store, mocked Gemini API
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from medisync.database import get_db, init_db
from medisync.main import app
from medisync.services.gemini_service import GeminiService, get_gemini_service
from medisync.services.storage_service import BlobStorageService, get_storage_service


def candidate_payload(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeGeminiAPI:
    """Stands in for the generateContent endpoint via httpx.MockTransport"""

    def __init__(self):
        self.requests = []
        self.reply("")

    def reply(self, text):
        self._respond = lambda request: httpx.Response(200, json=candidate_payload(text))

    def respond_with(self, status_code, body):
        if isinstance(body, (dict, list)):
            self._respond = lambda request: httpx.Response(status_code, json=body)
        else:
            self._respond = lambda request: httpx.Response(status_code, content=body)

    def fail(self):
        def _raise(request):
            raise httpx.ConnectError("connection refused", request=request)
        self._respond = _raise

    def handle(self, request):
        self.requests.append(request)
        return self._respond(request)

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_gemini():
    return FakeGeminiAPI()


@pytest.fixture
def gemini_service(fake_gemini):
    return GeminiService(
        api_key="test-key",
        model="gemini-pro",
        transport=httpx.MockTransport(fake_gemini.handle)
    )


@pytest.fixture
def storage(tmp_path):
    return BlobStorageService(str(tmp_path / "blobs"))


@pytest.fixture
def client(session_factory, gemini_service, storage):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gemini_service] = lambda: gemini_service
    app.dependency_overrides[get_storage_service] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
