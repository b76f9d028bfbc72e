import pytest
from fastapi.testclient import TestClient

from docstore.config import Settings, settings
from docstore.database import get_engine, get_session_factory, init_db
from docstore.main import create_app
from docstore.services.blob_store import BlobStore
from docstore.services.metadata_store import MetadataStore

from pdf_factory import make_pdf


@pytest.fixture
def pdf_bytes():
    return make_pdf()

@pytest.fixture
def test_settings(tmp_path):
    return Settings(data_path=tmp_path / "data")

@pytest.fixture
def patched_settings(test_settings, monkeypatch):
    """Point the module-level settings (used by the CLI) at the temporary data dir."""
    monkeypatch.setattr(settings, "data_path", test_settings.data_path)
    return settings

@pytest.fixture
def app(test_settings):
    return create_app(test_settings)

@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c

@pytest.fixture
def blob_store(test_settings):
    store = BlobStore(test_settings.uploads_dir, max_size=test_settings.max_upload_bytes)
    store.ensure_root()
    return store

@pytest.fixture
def db_session(test_settings):
    init_db(test_settings.db_path)
    engine = get_engine(test_settings.db_path)
    session = get_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()

@pytest.fixture
def metadata_store(db_session):
    return MetadataStore(db_session)
