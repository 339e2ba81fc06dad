import pytest
from fastapi.testclient import TestClient

from kidpreneur.config import Settings, get_settings
from kidpreneur.main import app


@pytest.fixture
def test_settings(tmp_path):
    submissions_dir = tmp_path / "Submissions"
    submissions_dir.mkdir()
    return Settings(
        submissions_dir=submissions_dir,
        upload_tmp_dir=tmp_path / "tmp",
        public_dir=tmp_path / "public",
    )


@pytest.fixture
def client(test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()
