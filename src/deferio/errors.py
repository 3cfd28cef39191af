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

"""Exception hierarchy for :mod:`deferio`."""

from __future__ import annotations

__all__ = [
    "CloseError",
    "DecodeError",
    "DeferioError",
    "ReaderError",
    "SourceUnavailableError",
]


class DeferioError(Exception):
    """Base class for all deferio exceptions.

    Allows callers to catch every library-specific failure with a single
    handler while standard Python exceptions propagate normally.
    """


class ReaderError(DeferioError, OSError):
    """I/O failure raised by ``CharacterReader.read`` and ``close``.

    Subclasses ``OSError`` so code written against ordinary file objects keeps
    working. The original failure is kept on ``cause`` and as ``__cause__``.

    Example:
        Handling any reader failure::

            try:
                count = reader.read(buffer)
            except ReaderError as e:
                logger.error("read failed: %s", e)
    """

    _action = "I/O failure on"

    def __init__(self, source: str, cause: BaseException) -> None:
        self.source = source
        self.cause = cause
        super().__init__(f"{self._action} {source}: {type(cause).__name__}: {cause}")

    def __reduce__(self) -> tuple[type[ReaderError], tuple[str, BaseException]]:
        return (type(self), (self.source, self.cause))


class SourceUnavailableError(ReaderError):
    """The byte source could not be opened or bound to its decoding strategy.

    Common causes:
        - Missing file or insufficient permissions
        - Connection failure or an HTTP error status
        - Unknown charset name

    Only ever raised by the first ``read`` or ``close`` call (or a later retry),
    never when the reader is constructed.
    """

    _action = "Cannot open"


class DecodeError(ReaderError):
    """Bytes could not be decoded, or the stream failed while decoding."""

    _action = "Cannot decode"


class CloseError(ReaderError):
    """Releasing the underlying byte handle failed."""

    _action = "Cannot close"
