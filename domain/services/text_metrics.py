from __future__ import annotations

import math
from dataclasses import dataclass

from domain.models import AutoLayoutConfig, Size
from domain.ports.text_metrics import TextMeasurer


@dataclass(frozen=True)
class TextMetricsConfig:
    char_width: float = 10.0
    line_height: float = 25.0
    # Average glyph advance used for the wrapped-area estimate.
    wrap_char_width: float = 8.0

    @classmethod
    def from_layout_config(cls, config: AutoLayoutConfig) -> TextMetricsConfig:
        return cls(char_width=config.label_char_width, line_height=config.line_height)


class HeuristicTextMeasurer(TextMeasurer):
    """Character-count text estimate, no font metrics involved."""

    def __init__(self, config: TextMetricsConfig | None = None) -> None:
        self.config = config or TextMetricsConfig()

    def min_line_width(self, text: str) -> float:
        return self.config.char_width * len(text)

    def wrapped_size(self, text: str, width: float) -> Size:
        if width <= 0:
            return Size(0.0, self.config.line_height)
        lines = math.ceil(len(text) * self.config.wrap_char_width / width)
        return Size(width, max(1, lines) * self.config.line_height)
