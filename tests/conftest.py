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

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import pytest

from tests.helpers.sources import CountingSource


class SourceFactory(Protocol):
    def __call__(
        self, data: bytes = b"", *, failures: list[BaseException] | None = None
    ) -> CountingSource:
        """Return a new counting source over ``data``."""


@pytest.fixture
def counting_source() -> SourceFactory:
    """Return a factory producing :class:`CountingSource` instances."""

    def factory(
        data: bytes = b"", *, failures: list[BaseException] | None = None
    ) -> CountingSource:
        return CountingSource(data, failures=list(failures or []))

    return factory


@pytest.fixture
def text_file(tmp_path: Path) -> Path:
    """Return a path to a small UTF-8 file."""
    path = tmp_path / "notes.txt"
    path.write_text("línea uno\nline two\n", encoding="utf-8")
    return path
