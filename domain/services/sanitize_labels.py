from __future__ import annotations

import re
from dataclasses import replace

from domain.models import DiagramElement, Label

LINE_BREAKS_RE = re.compile(r"[\r\n\u2028\u2029]+")


def sanitize_text(text: str) -> str:
    return LINE_BREAKS_RE.sub("", text).strip()


def sanitize_labels(elements: list[DiagramElement]) -> list[DiagramElement]:
    sanitized: list[DiagramElement] = []
    for element in elements:
        if isinstance(element, Label) and not element.is_deleted and element.text is not None:
            text = sanitize_text(element.text)
            if text != element.text:
                element = replace(element, text=text)
        sanitized.append(element)
    return sanitized
