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

"""Deferred, memoized character readers over byte sources.

A reader records where bytes come from and how to decode them, and opens
nothing until the first ``read`` or ``close``. The decoding pipeline built on
that first call is reused for the rest of the reader's life.

Example usage::

    from deferio import END_OF_INPUT, reader_of

    reader = reader_of(b"hello")
    buffer = [""] * 10
    assert reader.read(buffer) == 5
    assert reader.read(buffer) == END_OF_INPUT
    reader.close()

Entry points:

- ``reader_of``: dispatch on the input type (bytes, text, paths, URLs,
  streams, sources).
- ``reader_from_*``: one helper per input kind.
- ``CharacterReader.from_source``: explicit ``(ByteSource, strategy)`` pair.
"""

from __future__ import annotations

from ._decoding import (
    DEFAULT_CHUNK_SIZE,
    UTF_8,
    CharacterPipeline,
    Charset,
    Decoder,
    DecoderPipeline,
    DecodingStrategy,
)
from ._lazy import LazyCell, Producer, Unchecked
from ._normalize import (
    reader_from_bytes,
    reader_from_chars,
    reader_from_path,
    reader_from_source,
    reader_from_stream,
    reader_from_text,
    reader_from_url,
    reader_of,
    resolve_strategy,
)
from ._reader import END_OF_INPUT, CharacterReader
from ._sources import (
    DEFAULT_URL_TIMEOUT,
    ByteSource,
    BytesSource,
    CallableSource,
    PathSource,
    StreamSource,
    TextSource,
    UrlSource,
)
from .errors import (
    CloseError,
    DecodeError,
    DeferioError,
    ReaderError,
    SourceUnavailableError,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_URL_TIMEOUT",
    "END_OF_INPUT",
    "UTF_8",
    "ByteSource",
    "BytesSource",
    "CallableSource",
    "CharacterPipeline",
    "CharacterReader",
    "Charset",
    "CloseError",
    "DecodeError",
    "Decoder",
    "DecoderPipeline",
    "DecodingStrategy",
    "DeferioError",
    "LazyCell",
    "PathSource",
    "Producer",
    "ReaderError",
    "SourceUnavailableError",
    "StreamSource",
    "TextSource",
    "Unchecked",
    "UrlSource",
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
