import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app.dependencies import get_storage
from app.main import app
from app.services.storage import LocalImageStorage


def make_png(color=(200, 120, 80), size=(100, 100)) -> bytes:
    img = Image.new("RGB", size, color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def storage(tmp_path):
    return LocalImageStorage(str(tmp_path / "uploads"))


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()
