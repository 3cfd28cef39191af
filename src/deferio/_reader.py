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

"""Deferred character reader.

:class:`CharacterReader` turns "a byte source plus a decoding strategy" into a
reader that opens nothing until it is used. The first ``read`` or ``close``
opens the source, binds the strategy and keeps the resulting pipeline for the
rest of the reader's life::

    reader = CharacterReader.from_source(PathSource(Path("notes.txt")), UTF_8)
    buffer = [""] * 64
    count = reader.read(buffer)   # the file is opened here
    reader.close()

Readers are not thread-safe. Give each thread its own reader or serialize all
calls behind a lock.
"""

from __future__ import annotations

from collections.abc import MutableSequence
from typing import Final, Self

from ._decoding import UTF_8, CharacterPipeline, DecodingStrategy
from ._lazy import LazyCell, Producer, Unchecked
from ._sources import ByteSource
from .errors import CloseError, DecodeError, SourceUnavailableError
from .logging import get_logger

__all__ = [
    "END_OF_INPUT",
    "CharacterReader",
]

#: Returned by :meth:`CharacterReader.read` once the input is exhausted.
END_OF_INPUT: Final[int] = -1

logger = get_logger(__name__, context={"component": "character_reader"})


class CharacterReader:
    """Character reader that materializes its pipeline on first use.

    Construction records the producer and nothing else. ``read``, ``read_text``
    and ``close`` all materialize the pipeline when needed, so closing a reader
    that was never read still opens its source and immediately closes it.

    A failed materialization is not remembered: the next call tries again and
    raises a new :class:`~deferio.errors.SourceUnavailableError` if the source
    is still unavailable.
    """

    __slots__ = ("_cell", "_description", "_pipeline")

    def __init__(
        self,
        producer: Producer[CharacterPipeline],
        *,
        description: str = "<character source>",
    ) -> None:
        self._description = description
        self._cell = LazyCell(self._materialize_with(producer))
        self._pipeline = Unchecked(self._cell.value, self._unavailable)

    @classmethod
    def from_source(
        cls, source: ByteSource, strategy: DecodingStrategy = UTF_8
    ) -> CharacterReader:
        """Create a reader that opens ``source`` and decodes with ``strategy``.

        If binding the strategy fails after the source opened, the byte stream
        is closed before the failure propagates.
        """

        description = source.description

        def open_pipeline() -> CharacterPipeline:
            stream = source.open()
            logger.debug(
                "Opened byte source.",
                event="source.open",
                context={"source": description},
            )
            try:
                return strategy.bind(stream)
            except BaseException:
                stream.close()
                raise

        return cls(open_pipeline, description=f"{description} ({strategy.description})")

    @property
    def description(self) -> str:
        """Label naming the source and strategy."""
        return self._description

    def read(
        self,
        buffer: MutableSequence[str],
        offset: int = 0,
        length: int | None = None,
    ) -> int:
        """Read characters into ``buffer[offset:offset + length]``.

        Args:
            buffer: Mutable sequence of single characters, e.g. ``list[str]``.
            offset: First slot to fill.
            length: Maximum characters to read. Defaults to the rest of the
                buffer.

        Returns:
            Number of characters stored, or ``END_OF_INPUT`` when the input is
            exhausted.

        Raises:
            ValueError: If the range does not fit the buffer, or the pipeline
                was already closed.
            SourceUnavailableError: If the source cannot be opened.
            DecodeError: If the bytes cannot be decoded.
        """
        size = len(buffer)
        if length is None:
            length = size - offset
        if offset < 0 or length < 0 or offset + length > size:
            msg = f"Range offset={offset} length={length} exceeds buffer of {size}"
            raise ValueError(msg)
        pipeline = self._pipeline.value()
        if length == 0:
            return 0
        text = self._decode(pipeline, length)
        if not text:
            return END_OF_INPUT
        for index, char in enumerate(text, start=offset):
            buffer[index] = char
        return len(text)

    def read_text(self, size: int = -1) -> str:
        """Read up to ``size`` characters as a string (``-1`` reads all).

        Returns an empty string at end of input.
        """
        return self._decode(self._pipeline.value(), size)

    def close(self) -> None:
        """Close the pipeline, materializing it first if needed.

        Raises:
            SourceUnavailableError: If the source cannot be opened.
            CloseError: If releasing the byte stream fails.
        """
        pipeline = self._pipeline.value()
        logger.debug(
            "Closing character reader.",
            event="reader.close",
            context={"source": self._description},
        )
        try:
            pipeline.close()
        except Exception as e:
            raise CloseError(self._description, e) from e

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "materialized" if self._cell.materialized else "deferred"
        return f"{type(self).__name__}({self._description!r}, {state})"

    def _materialize_with(
        self, producer: Producer[CharacterPipeline]
    ) -> Producer[CharacterPipeline]:
        def materialize() -> CharacterPipeline:
            log = logger.bind(source=self._description)
            log.debug("Materializing pipeline.", event="reader.materialize.start")
            try:
                pipeline = producer()
            except Exception as e:
                log.debug(
                    "Pipeline materialization failed.",
                    event="reader.materialize.failed",
                    context={"error": type(e).__name__},
                )
                raise
            log.debug("Pipeline ready.", event="reader.materialize.complete")
            return pipeline

        return materialize

    def _unavailable(self, error: Exception) -> SourceUnavailableError:
        return SourceUnavailableError(self._description, error)

    def _decode(self, pipeline: CharacterPipeline, size: int) -> str:
        try:
            return pipeline.read(size)
        except UnicodeError as e:
            raise DecodeError(self._description, e) from e
        except ValueError as e:
            if pipeline.closed:
                # Closed pipeline: a usage error, reported as-is.
                raise
            raise DecodeError(self._description, e) from e
        except Exception as e:
            raise DecodeError(self._description, e) from e
