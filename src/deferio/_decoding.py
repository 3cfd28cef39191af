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

"""Decoding strategies and the character pipelines they produce.

A strategy says how bytes become characters. ``Charset`` names a codec and an
error handler; ``Decoder`` carries a ready-made ``codecs.IncrementalDecoder``
whose configuration (``errors`` policy, internal state) is used as-is.

Binding a strategy to an open byte stream yields a :class:`CharacterPipeline`,
the live object a reader pulls characters from.
"""

from __future__ import annotations

import codecs
import io
from collections.abc import Buffer
from dataclasses import dataclass, field
from typing import BinaryIO, Final, Protocol, override, runtime_checkable

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "UTF_8",
    "CharacterPipeline",
    "Charset",
    "Decoder",
    "DecoderPipeline",
    "DecodingStrategy",
]

#: Bytes pulled from the source per decode step (8KB).
DEFAULT_CHUNK_SIZE: Final[int] = 8_192


@runtime_checkable
class CharacterPipeline(Protocol):
    """Live decoding reader bound to one open byte stream."""

    @property
    def closed(self) -> bool:
        """True once the pipeline has been closed."""
        ...

    def read(self, size: int = -1, /) -> str:
        """Read up to ``size`` characters; ``-1`` reads to end of input.

        Returns an empty string at end of input.

        Raises:
            ValueError: If the pipeline is closed.
            UnicodeDecodeError: If the bytes are malformed for the strategy.
        """
        ...

    def close(self) -> None:
        """Close the pipeline and the byte stream beneath it."""
        ...


@dataclass(frozen=True, slots=True)
class Charset:
    """Named codec plus the Python error handler used while decoding.

    The name is only resolved when the strategy is bound, so constructing a
    ``Charset("no-such-codec")`` succeeds and the ``LookupError`` surfaces on
    first read.
    """

    name: str
    errors: str = "strict"

    @property
    def description(self) -> str:
        """Human-readable form used in log context."""
        return self.name if self.errors == "strict" else f"{self.name}/{self.errors}"

    def bind(self, stream: BinaryIO) -> CharacterPipeline:
        """Attach a text decoder to ``stream``.

        Raises:
            LookupError: If no codec is registered under ``name``.
        """
        codec = codecs.lookup(self.name)
        # newline="" keeps "\r\n" and "\r" exactly as encoded.
        return io.TextIOWrapper(
            _buffered(stream), encoding=codec.name, errors=self.errors, newline=""
        )


@dataclass(frozen=True, slots=True, eq=False)
class Decoder:
    """Strategy wrapping a pre-built incremental decoder instance.

    Example::

        lenient = codecs.getincrementaldecoder("utf-8")(errors="replace")
        reader = reader_of(data, decoder=lenient)
    """

    decoder: codecs.IncrementalDecoder
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @property
    def description(self) -> str:
        """Human-readable form used in log context."""
        return f"{type(self.decoder).__module__}.{type(self.decoder).__qualname__}"

    def bind(self, stream: BinaryIO) -> CharacterPipeline:
        """Feed ``stream`` through the wrapped decoder instance."""
        return DecoderPipeline(
            _stream=stream, _decoder=self.decoder, _chunk_size=self.chunk_size
        )


type DecodingStrategy = Charset | Decoder

#: Default strategy when none is supplied.
UTF_8: Final[Charset] = Charset("utf-8")


@dataclass(slots=True)
class DecoderPipeline:
    """CharacterPipeline driving an explicit ``codecs.IncrementalDecoder``.

    Reads the byte stream in fixed-size chunks and keeps characters decoded
    beyond the caller's request for the next ``read``.
    """

    _stream: BinaryIO
    _decoder: codecs.IncrementalDecoder
    _chunk_size: int = DEFAULT_CHUNK_SIZE
    _pending: str = field(default="", init=False)
    _eof: bool = field(default=False, init=False)
    _closed: bool = field(default=False, init=False)

    @property
    def closed(self) -> bool:
        """True if the pipeline has been closed."""
        return self._closed

    def _check_closed(self) -> None:
        """Raise ValueError if closed."""
        if self._closed:
            msg = "I/O operation on closed file"
            raise ValueError(msg)

    def read(self, size: int = -1, /) -> str:
        """Read up to size characters."""
        self._check_closed()
        if size < 0:
            while not self._eof:
                self._pending += self._decode_chunk()
            text, self._pending = self._pending, ""
            return text
        while len(self._pending) < size and not self._eof:
            self._pending += self._decode_chunk()
        text, self._pending = self._pending[:size], self._pending[size:]
        return text

    def _decode_chunk(self) -> str:
        data = self._stream.read(self._chunk_size)
        if not data:
            self._eof = True
            return self._decoder.decode(b"", final=True)
        return self._decoder.decode(data)

    def close(self) -> None:
        """Close the pipeline and its byte stream."""
        if not self._closed:
            self._closed = True
            self._stream.close()


def _buffered(stream: BinaryIO) -> io.BufferedIOBase:
    """Return ``stream`` in a form ``io.TextIOWrapper`` accepts."""
    if isinstance(stream, io.BufferedIOBase):
        return stream
    if isinstance(stream, io.RawIOBase):
        return io.BufferedReader(stream)
    return io.BufferedReader(_StreamWrapper(stream))


class _StreamWrapper(io.RawIOBase):
    """Adapter making any object with ``read(n)`` usable by TextIOWrapper.

    Implements the minimal RawIOBase interface and closes the wrapped stream
    when closed itself.
    """

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__()
        self._stream = stream

    @override
    def readable(self) -> bool:
        return True

    @override
    def readinto(self, buffer: Buffer, /) -> int | None:
        """Read bytes into buffer, returning 0 at end of input."""
        mv = memoryview(buffer).cast("B")
        data = self._stream.read(len(mv))
        n = len(data)
        mv[:n] = data
        return n

    @override
    def close(self) -> None:
        if not self.closed:
            try:
                self._stream.close()
            finally:
                super().close()
