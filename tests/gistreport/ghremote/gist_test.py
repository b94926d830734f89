"""Tests for the gistreport.ghremote.gist module."""

import json
from unittest.mock import MagicMock

import pytest
import requests

from gistreport.ghremote import gist as gist_module
from gistreport.ghremote.gist import (
    DownloadStatus,
    Gist,
    GistFile,
    GistRemoteStore,
    download_current,
    upload,
)

_EXPECTED_HEADERS = {
    "Authorization": "Bearer token123",
    "Accept": "application/vnd.github.v3+json",
}


def _fake_response(*, json_data=None, content: bytes = b"", status: int = 200) -> MagicMock:
    """Create a mock requests.Response."""
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = json_data
    resp.content = content
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Client Error")
    return resp


def _store(session: MagicMock) -> GistRemoteStore:
    return GistRemoteStore(gist_id="gist123", token="token123", session=session)


class FakeGistSession:
    """Minimal in-memory stand-in for the gist API."""

    def __init__(self):
        self.files: dict[str, dict] = {}
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        return _fake_response(json_data={"id": "gist123", "files": self.files})

    def patch(self, url, json=None, headers=None, timeout=None):
        for name, entry in json["files"].items():
            self.files[name] = {"filename": name, "content": entry["content"], "truncated": False}
        return _fake_response(json_data={"id": "gist123", "files": self.files})

    def close(self):
        self.closed = True


class TestGistParsing:
    """Tests for parsing gist responses with dacite."""

    def test_extra_fields_are_ignored(self):
        data = {
            "id": "gist123",
            "public": False,
            "files": {
                "results.jsonl": {
                    "filename": "results.jsonl",
                    "type": "application/octet-stream",
                    "language": None,
                    "size": 4,
                    "content": "old\n",
                    "truncated": False,
                    "raw_url": "https://gist.githubusercontent.com/raw/results.jsonl",
                }
            },
        }

        gist = gist_module._parse_gist(data)

        entry = gist.get_file("results.jsonl")
        assert entry == GistFile(
            filename="results.jsonl",
            content="old\n",
            truncated=False,
            raw_url="https://gist.githubusercontent.com/raw/results.jsonl",
        )

    def test_missing_files(self):
        assert gist_module._parse_gist({"id": "gist123"}) == Gist(files={})

    def test_rejects_non_object(self):
        with pytest.raises(ValueError, match="unexpected gist response type"):
            gist_module._parse_gist(["not", "a", "gist"])


class TestGistRemoteStoreDownload:
    """Tests for GistRemoteStore.download."""

    @pytest.mark.asyncio
    async def test_found(self):
        session = MagicMock()
        session.get.return_value = _fake_response(
            json_data={"files": {"results.jsonl": {"content": "existing gist content"}}}
        )

        result = await _store(session).download()

        assert result.status == DownloadStatus.FOUND
        assert result.found is True
        assert result.content == "existing gist content"
        session.get.assert_called_once_with(
            "https://api.github.com/gists/gist123",
            headers=_EXPECTED_HEADERS,
            timeout=30.0,
        )

    @pytest.mark.asyncio
    async def test_entry_not_found(self):
        session = MagicMock()
        session.get.return_value = _fake_response(json_data={"files": {}})

        result = await _store(session).download()

        assert result.status == DownloadStatus.EMPTY
        assert result.found is False
        assert result.content == ""

    @pytest.mark.asyncio
    async def test_other_entries_only(self):
        session = MagicMock()
        session.get.return_value = _fake_response(
            json_data={"files": {"README.md": {"content": "hello"}}}
        )

        result = await _store(session).download()

        assert result.status == DownloadStatus.EMPTY

    @pytest.mark.asyncio
    async def test_empty_content_is_not_found(self):
        session = MagicMock()
        session.get.return_value = _fake_response(
            json_data={"files": {"results.jsonl": {"content": ""}}}
        )

        result = await _store(session).download()

        assert result.status == DownloadStatus.EMPTY

    @pytest.mark.asyncio
    async def test_network_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("Network error")

        result = await _store(session).download()

        assert result.status == DownloadStatus.FAILED
        assert result.found is False
        assert "Network error" in result.error

    @pytest.mark.asyncio
    async def test_http_error(self):
        session = MagicMock()
        session.get.return_value = _fake_response(status=401)

        result = await _store(session).download()

        assert result.status == DownloadStatus.FAILED
        assert "401" in result.error

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        session = MagicMock()
        resp = _fake_response()
        resp.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
        session.get.return_value = resp

        result = await _store(session).download()

        assert result.status == DownloadStatus.FAILED

    @pytest.mark.asyncio
    async def test_truncated_fetches_raw_url(self):
        raw_url = "https://gist.githubusercontent.com/u/gist123/raw/abc/results.jsonl"
        session = MagicMock()
        session.get.side_effect = [
            _fake_response(
                json_data={
                    "files": {
                        "results.jsonl": {
                            "content": "partial",
                            "truncated": True,
                            "raw_url": raw_url,
                        }
                    }
                }
            ),
            _fake_response(content="partial and the rest\n".encode()),
        ]

        result = await _store(session).download()

        assert result.status == DownloadStatus.FOUND
        assert result.content == "partial and the rest\n"
        assert session.get.call_count == 2
        assert session.get.call_args_list[1].args == (raw_url,)

    @pytest.mark.asyncio
    async def test_truncated_without_raw_url_fails(self):
        session = MagicMock()
        session.get.return_value = _fake_response(
            json_data={"files": {"results.jsonl": {"content": "partial", "truncated": True}}}
        )

        result = await _store(session).download()

        assert result.status == DownloadStatus.FAILED
        assert "raw_url" in result.error


class TestGistRemoteStoreUpload:
    """Tests for GistRemoteStore.upload."""

    @pytest.mark.asyncio
    async def test_success(self):
        session = MagicMock()
        session.patch.return_value = _fake_response(json_data={})

        ok = await _store(session).upload("file content")

        assert ok is True
        session.patch.assert_called_once_with(
            "https://api.github.com/gists/gist123",
            json={"files": {"results.jsonl": {"content": "file content"}}},
            headers=_EXPECTED_HEADERS,
            timeout=30.0,
        )

    @pytest.mark.asyncio
    async def test_network_error_returns_false(self, caplog):
        session = MagicMock()
        session.patch.side_effect = requests.ConnectionError("Upload error")

        with caplog.at_level("ERROR", logger="ghremote/gist"):
            ok = await _store(session).upload("file content")

        assert ok is False
        assert "Upload error" in caplog.text

    @pytest.mark.asyncio
    async def test_server_error_returns_false(self):
        session = MagicMock()
        session.patch.return_value = _fake_response(status=500)

        assert await _store(session).upload("file content") is False

    @pytest.mark.asyncio
    async def test_custom_filename_and_base_url(self):
        session = MagicMock()
        session.patch.return_value = _fake_response(json_data={})
        store = GistRemoteStore(
            gist_id="g",
            token="t",
            filename="other.jsonl",
            base_url="https://ghe.example.com/api/v3/",
            session=session,
        )

        assert await store.upload("x") is True
        args, kwargs = session.patch.call_args
        assert args == ("https://ghe.example.com/api/v3/gists/g",)
        assert kwargs["json"] == {"files": {"other.jsonl": {"content": "x"}}}


class TestRoundTrip:
    """Uploading then downloading yields the same content."""

    @pytest.mark.asyncio
    async def test_upload_then_download(self):
        content = '{"id": 1}\n\n{"id": 2, "message": "caf\\u00e9"}\n'
        store = _store(FakeGistSession())

        assert await store.upload(content) is True
        result = await store.download()

        assert result.found is True
        assert result.content == content


class TestModuleHelpers:
    """Tests for download_current and upload."""

    @pytest.mark.asyncio
    async def test_download_current(self):
        session = FakeGistSession()
        session.files["results.jsonl"] = {"content": "old\n"}

        assert await download_current("gist123", "token123", session=session) == ("old\n", True)

    @pytest.mark.asyncio
    async def test_download_current_not_found(self):
        session = FakeGistSession()

        assert await download_current("gist123", "token123", session=session) == ("", False)

    @pytest.mark.asyncio
    async def test_upload(self):
        session = FakeGistSession()

        assert await upload("gist123", "token123", "x\n", session=session) is True
        assert session.files["results.jsonl"]["content"] == "x\n"

    @pytest.mark.asyncio
    async def test_caller_session_is_not_closed(self):
        session = FakeGistSession()

        await upload("gist123", "token123", "x\n", session=session)

        assert session.closed is False
