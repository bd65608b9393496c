from __future__ import annotations

from typing import Protocol

from domain.models import Size


class TextMeasurer(Protocol):
    def min_line_width(self, text: str) -> float: ...

    def wrapped_size(self, text: str, width: float) -> Size: ...
