import pytest

from daymark import database


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the SQLite layer at a throwaway folder."""
    monkeypatch.setattr(database, "DATA_DIR", str(tmp_path))
    return tmp_path
