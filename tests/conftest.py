import pytest


@pytest.fixture
def write(tmp_path):
    """Writes bytes to a file under tmp_path and returns its path."""
    def _write(name: str, content: bytes):
        path = tmp_path / name
        path.write_bytes(content)
        return path
    return _write
