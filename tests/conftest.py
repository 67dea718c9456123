import io
import zipfile

import pytest

from workspace_snippets import config
from workspace_snippets.models.context import UpdateContext


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the real user config and environment."""
    monkeypatch.setattr(config, "CONFIG_FILE", str(tmp_path / "config" / "config.json"))
    for var in config.ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def context() -> UpdateContext:
    return UpdateContext(
        commit_hash="abc123",
        archive_checksum="deadbeef",
        date="2021-04-24",
        archive_integrity="sha384-AAAA",
    )


def make_archive(root: str = "repo-abc123/", date_time=(2021, 4, 24, 13, 5, 0), extra_roots=()) -> bytes:
    """Build a zip archive shaped like the ones GitHub serves."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name in (root,) + tuple(extra_roots):
            archive.writestr(zipfile.ZipInfo(name, date_time=date_time), "")
            archive.writestr(zipfile.ZipInfo(name + "README", date_time=date_time), "archive contents\n")
    return buffer.getvalue()


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code


class FakeSession:
    """Stands in for requests.Session and records requested URLs."""

    def __init__(self, content: bytes = b"", status_code: int = 200, error: Exception = None):
        self.response = FakeResponse(content, status_code)
        self.error = error
        self.requests = []

    def get(self, url, timeout=None):
        self.requests.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response
