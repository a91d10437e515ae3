import pytest
from pathlib import Path


@pytest.fixture
def write_trace(tmp_path: Path):
    """Returns a helper that writes trace lines to a file and returns its path."""
    def _write(lines, name="trace.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write
