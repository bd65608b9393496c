from __future__ import annotations

from dataclasses import replace

from domain.models import DiagramElement, Label
from domain.ports.text_metrics import TextMeasurer


def fit_labels(elements: list[DiagramElement], measurer: TextMeasurer) -> list[DiagramElement]:
    """Widen labels that are too narrow to hold their text on a single line.

    The height is re-estimated from the wrapped text area; the result is an
    approximation, only determinism is guaranteed.
    """
    fitted: list[DiagramElement] = []
    for element in elements:
        if isinstance(element, Label) and not element.is_deleted and element.text:
            min_width = measurer.min_line_width(element.text)
            if element.width < min_width:
                size = measurer.wrapped_size(element.text, min_width)
                element = replace(element, width=size.width, height=size.height)
        fitted.append(element)
    return fitted
