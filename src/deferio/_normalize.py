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

"""Conversion helpers turning common inputs into deferred readers.

Each helper only normalizes its input into a ``(ByteSource, DecodingStrategy)``
pair and hands it to :meth:`CharacterReader.from_source`. None of them open,
read or connect to anything.

Strategy selection is the same everywhere:

- ``decoder`` given: that exact ``codecs.IncrementalDecoder`` is used.
- ``charset`` given (a codec name or :class:`Charset`): used verbatim.
- neither: :data:`UTF_8`.
"""

from __future__ import annotations

import codecs
import os
from collections.abc import Buffer, Sequence
from pathlib import Path
from typing import BinaryIO, cast
from urllib.parse import ParseResult, SplitResult

from ._decoding import UTF_8, Charset, Decoder, DecodingStrategy
from ._reader import CharacterReader
from ._sources import (
    DEFAULT_URL_TIMEOUT,
    ByteSource,
    BytesSource,
    PathSource,
    StreamSource,
    TextSource,
    UrlSource,
)

__all__ = [
    "reader_from_bytes",
    "reader_from_chars",
    "reader_from_path",
    "reader_from_source",
    "reader_from_stream",
    "reader_from_text",
    "reader_from_url",
    "reader_of",
    "resolve_strategy",
]

type CharsetLike = str | Charset
type DecoderLike = codecs.IncrementalDecoder | Decoder


def resolve_strategy(
    charset: CharsetLike | None = None, decoder: DecoderLike | None = None
) -> DecodingStrategy:
    """Pick the decoding strategy for a reader.

    Raises:
        ValueError: If both ``charset`` and ``decoder`` are given.
    """
    if charset is not None and decoder is not None:
        msg = "Pass either charset or decoder, not both."
        raise ValueError(msg)
    if decoder is not None:
        return decoder if isinstance(decoder, Decoder) else Decoder(decoder)
    if charset is None:
        return UTF_8
    return charset if isinstance(charset, Charset) else Charset(charset)


def reader_from_source(
    source: ByteSource,
    charset: CharsetLike | None = None,
    *,
    decoder: DecoderLike | None = None,
) -> CharacterReader:
    """Reader over any :class:`ByteSource`."""
    return CharacterReader.from_source(source, resolve_strategy(charset, decoder))


def reader_from_bytes(
    data: Buffer,
    charset: CharsetLike | None = None,
    *,
    decoder: DecoderLike | None = None,
) -> CharacterReader:
    """Reader over a copy of ``data``."""
    return reader_from_source(BytesSource(bytes(data)), charset, decoder=decoder)


def reader_from_text(text: str, charset: CharsetLike | None = None) -> CharacterReader:
    """Reader over ``text``, encoded and decoded with the same charset.

    Unencodable characters follow the charset's error policy; a strict
    charset substitutes them with the codec's replacement character.
    """
    strategy = _as_charset(charset)
    errors = "replace" if strategy.errors == "strict" else strategy.errors
    source = TextSource(text, strategy.name, errors)
    return CharacterReader.from_source(source, strategy)


def reader_from_chars(
    chars: Sequence[str], charset: CharsetLike | None = None
) -> CharacterReader:
    """Reader over a sequence of characters (e.g. ``list("abc")``)."""
    return reader_from_text("".join(chars), charset)


def reader_from_path(
    path: str | os.PathLike[str],
    charset: CharsetLike | None = None,
    *,
    decoder: DecoderLike | None = None,
) -> CharacterReader:
    """Reader over a local file. The file is not touched until first use."""
    return reader_from_source(PathSource(Path(path)), charset, decoder=decoder)


def reader_from_url(
    url: str | SplitResult | ParseResult,
    charset: CharsetLike | None = None,
    *,
    decoder: DecoderLike | None = None,
    timeout: float = DEFAULT_URL_TIMEOUT,
) -> CharacterReader:
    """Reader over a ``file:``, ``http:`` or ``https:`` URL."""
    location = url if isinstance(url, str) else url.geturl()
    return reader_from_source(
        UrlSource(location, timeout=timeout), charset, decoder=decoder
    )


def reader_from_stream(
    stream: BinaryIO,
    charset: CharsetLike | None = None,
    *,
    decoder: DecoderLike | None = None,
) -> CharacterReader:
    """Reader taking ownership of an already-open binary stream."""
    return reader_from_source(StreamSource(stream), charset, decoder=decoder)


def reader_of(
    source: object,
    charset: CharsetLike | None = None,
    *,
    decoder: DecoderLike | None = None,
) -> CharacterReader:
    """Build a reader from whatever ``source`` is.

    =================================  ==========================
    ``source``                         treated as
    =================================  ==========================
    bytes, bytearray, memoryview       in-memory bytes
    ``os.PathLike``                    local file path
    ``SplitResult``/``ParseResult``    URL
    :class:`ByteSource`                the source itself
    object with ``read()``             already-open binary stream
    ``str``                            text
    sequence of ``str``                characters
    =================================  ==========================

    Plain strings are always text; use :func:`reader_from_path` or
    :func:`reader_from_url` for string paths and URLs.

    Raises:
        TypeError: If ``source`` matches none of the above.
        ValueError: If ``decoder`` is given for text or characters, or both
            ``charset`` and ``decoder`` are given.
    """
    if isinstance(source, bytes | bytearray | memoryview):
        return reader_from_bytes(source, charset, decoder=decoder)
    if isinstance(source, os.PathLike):
        return reader_from_path(source, charset, decoder=decoder)
    if isinstance(source, SplitResult | ParseResult):
        return reader_from_url(source, charset, decoder=decoder)
    if isinstance(source, ByteSource):
        return reader_from_source(source, charset, decoder=decoder)
    if callable(getattr(source, "read", None)):
        stream = cast(BinaryIO, source)
        return reader_from_stream(stream, charset, decoder=decoder)
    if isinstance(source, str) or _is_char_sequence(source):
        if decoder is not None:
            msg = "Text is decoded with its own charset; decoder is not allowed."
            raise ValueError(msg)
        if isinstance(source, str):
            return reader_from_text(source, charset)
        return reader_from_chars(source, charset)  # type: ignore[arg-type]
    msg = f"Cannot build a character reader from {type(source).__name__}"
    raise TypeError(msg)


def _as_charset(charset: CharsetLike | None) -> Charset:
    if charset is None:
        return UTF_8
    return charset if isinstance(charset, Charset) else Charset(charset)


def _is_char_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and all(
        isinstance(item, str) and len(item) == 1 for item in value
    )
