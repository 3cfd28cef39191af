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

"""Byte sources: things that can open a fresh binary stream on demand.

A source only records where bytes come from. Nothing is opened, read or
connected until :meth:`ByteSource.open` is called, which readers do lazily on
their first ``read`` or ``close``.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Final, Protocol, cast, runtime_checkable
from urllib.parse import urlsplit
from urllib.request import url2pathname

import requests

__all__ = [
    "DEFAULT_URL_TIMEOUT",
    "ByteSource",
    "BytesSource",
    "CallableSource",
    "PathSource",
    "StreamSource",
    "TextSource",
    "UrlSource",
]

#: Connect/read timeout in seconds for HTTP sources.
DEFAULT_URL_TIMEOUT: Final[float] = 30.0


@runtime_checkable
class ByteSource(Protocol):
    """Capability to open a fresh byte-input stream.

    Implementations must not perform I/O when constructed. ``open`` may fail
    with any exception (``FileNotFoundError``, ``PermissionError``,
    ``requests.ConnectionError``, ...); readers translate the failure.

    Example::

        class Fixture:
            description = "fixture"

            def open(self) -> BinaryIO:
                return io.BytesIO(b"payload")
    """

    @property
    def description(self) -> str:
        """Short label identifying the source in errors and logs."""
        ...

    def open(self) -> BinaryIO:
        """Open and return a new binary stream positioned at the start."""
        ...


@dataclass(frozen=True, slots=True)
class BytesSource:
    """Source over an in-memory byte buffer."""

    data: bytes

    @property
    def description(self) -> str:
        return f"<{len(self.data)} bytes>"

    def open(self) -> BinaryIO:
        return io.BytesIO(self.data)


@dataclass(frozen=True, slots=True)
class TextSource:
    """Source over text, encoded with ``charset`` when opened.

    Characters the charset cannot encode are handled by ``errors``; the
    default substitutes them instead of failing.
    """

    text: str
    charset: str = "utf-8"
    errors: str = "replace"

    @property
    def description(self) -> str:
        return f"<{len(self.text)} chars as {self.charset}>"

    def open(self) -> BinaryIO:
        return io.BytesIO(self.text.encode(self.charset, self.errors))


@dataclass(frozen=True, slots=True)
class PathSource:
    """Source over a file on the local filesystem."""

    path: Path

    @property
    def description(self) -> str:
        return str(self.path)

    def open(self) -> BinaryIO:
        """Open the file in binary mode.

        Raises:
            FileNotFoundError: If the file does not exist.
            IsADirectoryError: If the path is a directory.
            PermissionError: If the file cannot be read.
        """
        return self.path.open("rb")


@dataclass(frozen=True, slots=True)
class UrlSource:
    """Source over a ``file:``, ``http:`` or ``https:`` URL.

    HTTP bodies are streamed; ``Content-Encoding`` (gzip, deflate) is undone
    before the bytes reach the decoder.
    """

    url: str
    timeout: float = DEFAULT_URL_TIMEOUT

    @property
    def description(self) -> str:
        return self.url

    def open(self) -> BinaryIO:
        """Open the URL.

        Raises:
            ValueError: If the scheme is not supported.
            FileNotFoundError: If a ``file:`` URL points nowhere.
            requests.RequestException: On connection failure or HTTP error status.
        """
        parts = urlsplit(self.url)
        scheme = parts.scheme.lower()
        if scheme == "file":
            return PathSource(Path(url2pathname(parts.path))).open()
        if scheme not in {"http", "https"}:
            msg = f"Unsupported URL scheme: {parts.scheme or '<none>'}"
            raise ValueError(msg)
        response = requests.get(self.url, stream=True, timeout=self.timeout)
        try:
            response.raise_for_status()
        except requests.HTTPError:
            response.close()
            raise
        response.raw.decode_content = True
        return cast(BinaryIO, response.raw)


@dataclass(frozen=True, slots=True, eq=False)
class StreamSource:
    """Source over a binary stream the caller already opened.

    ``open`` hands back the same stream, so ownership passes to the reader,
    which closes it.
    """

    stream: BinaryIO

    @property
    def description(self) -> str:
        name = getattr(self.stream, "name", None)
        return str(name) if name is not None else f"<{type(self.stream).__name__}>"

    def open(self) -> BinaryIO:
        return self.stream


@dataclass(frozen=True, slots=True, eq=False)
class CallableSource:
    """Source delegating to a zero-argument opener function."""

    opener: Callable[[], BinaryIO]
    name: str | None = None

    @property
    def description(self) -> str:
        if self.name is not None:
            return self.name
        return getattr(self.opener, "__qualname__", repr(self.opener))

    def open(self) -> BinaryIO:
        return self.opener()
