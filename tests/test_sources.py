# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for ByteSource implementations."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest
import requests

from deferio import (
    ByteSource,
    BytesSource,
    CallableSource,
    PathSource,
    StreamSource,
    TextSource,
    UrlSource,
)
from deferio import _sources


class _FakeResponse:
    def __init__(self, body: bytes, status: int = 200) -> None:
        self.raw = io.BytesIO(body)
        self.status_code = status
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=None)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_get(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Patch ``requests.get`` and record the calls made."""
    calls: list[dict[str, Any]] = []
    responses: dict[str, _FakeResponse] = {
        "https://example.test/ok": _FakeResponse(b"remote text"),
        "https://example.test/missing": _FakeResponse(b"", status=404),
    }

    def get(url: str, **kwargs: Any) -> _FakeResponse:
        calls.append({"url": url, **kwargs})
        if url not in responses:
            raise requests.ConnectionError(f"cannot reach {url}")
        return responses[url]

    monkeypatch.setattr(_sources.requests, "get", get)
    return calls


class TestProtocol:
    """All built-in sources satisfy ByteSource."""

    @pytest.mark.parametrize(
        "source",
        [
            BytesSource(b"x"),
            TextSource("x"),
            PathSource(Path("x")),
            UrlSource("https://example.test/"),
            StreamSource(io.BytesIO()),
            CallableSource(io.BytesIO),
        ],
    )
    def test_is_byte_source(self, source: object) -> None:
        assert isinstance(source, ByteSource)


class TestInMemorySources:
    def test_bytes_source_opens_fresh_streams(self) -> None:
        source = BytesSource(b"abc")
        first, second = source.open(), source.open()
        assert first is not second
        assert first.read() == second.read() == b"abc"
        assert source.description == "<3 bytes>"

    def test_text_source_encodes_on_open(self) -> None:
        source = TextSource("añ", "utf-16-le")
        assert source.open().read() == "añ".encode("utf-16-le")
        assert source.description == "<2 chars as utf-16-le>"

    def test_text_source_unencodable_fails_on_open(self) -> None:
        source = TextSource("€", "ascii", "strict")
        with pytest.raises(UnicodeEncodeError):
            source.open()

    def test_text_source_substitutes_by_default(self) -> None:
        assert TextSource("€uro", "ascii").open().read() == b"?uro"

    def test_stream_source_returns_same_stream(self) -> None:
        stream = io.BytesIO(b"data")
        source = StreamSource(stream)
        assert source.open() is stream
        assert source.description == "<BytesIO>"

    def test_stream_source_uses_file_name(self, tmp_path: Path) -> None:
        path = tmp_path / "f.bin"
        path.write_bytes(b"")
        with path.open("rb") as handle:
            assert StreamSource(handle).description == str(path)

    def test_callable_source(self) -> None:
        calls: list[int] = []

        def opener() -> io.BytesIO:
            calls.append(1)
            return io.BytesIO(b"made")

        source = CallableSource(opener, name="factory")
        assert calls == []
        assert source.open().read() == b"made"
        assert source.description == "factory"
        assert "opener" in CallableSource(opener).description


class TestPathSource:
    def test_opens_file(self, text_file: Path) -> None:
        with PathSource(text_file).open() as stream:
            assert stream.read() == text_file.read_bytes()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            PathSource(tmp_path / "nope").open()

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(IsADirectoryError):
            PathSource(tmp_path).open()


class TestUrlSource:
    def test_file_url(self, text_file: Path) -> None:
        with UrlSource(text_file.as_uri()).open() as stream:
            assert stream.read() == text_file.read_bytes()

    def test_http_url_streams_body(self, fake_get: list[dict[str, Any]]) -> None:
        stream = UrlSource("https://example.test/ok", timeout=5).open()
        assert stream.read() == b"remote text"
        assert fake_get == [
            {"url": "https://example.test/ok", "stream": True, "timeout": 5}
        ]

    def test_http_error_status(self, fake_get: list[dict[str, Any]]) -> None:
        with pytest.raises(requests.HTTPError, match="404"):
            UrlSource("https://example.test/missing").open()

    def test_connection_failure(self, fake_get: list[dict[str, Any]]) -> None:
        with pytest.raises(requests.ConnectionError):
            UrlSource("https://unreachable.test/").open()

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(ValueError, match="ftp"):
            UrlSource("ftp://example.test/file").open()

    def test_construction_does_not_connect(
        self, fake_get: list[dict[str, Any]]
    ) -> None:
        UrlSource("https://example.test/ok")
        assert fake_get == []
