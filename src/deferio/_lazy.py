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

"""Deferred, memoized values and failure translation.

``LazyCell`` defers a producer until its value is first requested and keeps the
result for the rest of its lifetime. ``Unchecked`` sits in front of a producer
and converts arbitrary failures into the :class:`~deferio.errors.ReaderError`
taxonomy so callers only ever have to handle one exception family.

Neither type synchronizes access. Concurrent first access from several threads
may run the producer more than once; callers that share a value across threads
must serialize access themselves.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from .errors import ReaderError

__all__ = [
    "LazyCell",
    "Producer",
    "Unchecked",
]

type Producer[T] = Callable[[], T]


@dataclass(slots=True, eq=False)
class LazyCell[T]:
    """Single-slot cache computing its value on first access.

    Example::

        cell = LazyCell(lambda: expensive())
        cell.materialized  # False, nothing has run yet
        cell.value()       # runs expensive() once
        cell.value()       # returns the stored result

    A producer that raises leaves the cell empty, so the next ``value()`` call
    runs it again. This lets transiently unavailable resources recover.
    """

    producer: Producer[T]
    _value: T | None = field(default=None, init=False, repr=False)
    _materialized: bool = field(default=False, init=False)

    @property
    def materialized(self) -> bool:
        """True once the producer has returned a value."""
        return self._materialized

    def value(self) -> T:
        """Return the memoized value, running the producer on first use."""
        if not self._materialized:
            self._value = self.producer()
            self._materialized = True
        return self._value  # type: ignore[return-value]


@dataclass(slots=True, frozen=True)
class Unchecked[T]:
    """Producer wrapper that reports failures as ``ReaderError``.

    ``translate`` receives the original exception and returns the error to
    raise; the original is chained as ``__cause__``. Errors that already belong
    to the ``ReaderError`` family pass through untouched.
    """

    producer: Producer[T]
    translate: Callable[[Exception], ReaderError]

    def value(self) -> T:
        """Invoke the wrapped producer, translating any failure."""
        try:
            return self.producer()
        except ReaderError:
            raise
        except Exception as e:
            raise self.translate(e) from e
