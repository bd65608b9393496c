from __future__ import annotations

import copy
import math
from collections.abc import Iterable, Mapping
from typing import Any

from domain.models import (
    Connector,
    ConnectorShape,
    Container,
    ContainerShape,
    DiagramElement,
    ExcalidrawDocument,
    Label,
    LayoutReport,
)
from domain.services.auto_layout import AutoLayoutEngine

Element = dict[str, Any]

CONTAINER_TYPES = {shape.value for shape in ContainerShape}
CONNECTOR_TYPES = {shape.value for shape in ConnectorShape}


class SceneFormatError(ValueError):
    pass


def parse_scene(payload: Any) -> ExcalidrawDocument:
    if not isinstance(payload, Mapping):
        msg = "Excalidraw scene must be a JSON object"
        raise SceneFormatError(msg)
    elements = payload.get("elements")
    if not isinstance(elements, list):
        msg = "Excalidraw scene must contain an 'elements' list"
        raise SceneFormatError(msg)
    app_state = payload.get("appState") or {}
    files = payload.get("files") or {}
    return ExcalidrawDocument(
        elements=[element for element in elements if isinstance(element, dict)],
        app_state=app_state if isinstance(app_state, dict) else {},
        files=files if isinstance(files, dict) else {},
    )


def elements_from_scene(raw_elements: Iterable[Element]) -> list[DiagramElement]:
    elements: list[DiagramElement] = []
    for raw in raw_elements:
        element = element_from_dict(raw)
        if element is not None:
            elements.append(element)
    return elements


def element_from_dict(raw: Element) -> DiagramElement | None:
    element_id = raw.get("id")
    element_type = raw.get("type")
    geometry = _geometry(raw)
    if not isinstance(element_id, str) or geometry is None:
        return None
    x, y, width, height = geometry
    is_deleted = bool(raw.get("isDeleted", False))

    if element_type in CONTAINER_TYPES:
        return Container(
            id=element_id,
            x=x,
            y=y,
            width=width,
            height=height,
            shape=ContainerShape(element_type),
            is_deleted=is_deleted,
        )
    if element_type == "text":
        text = raw.get("text")
        container_id = raw.get("containerId")
        return Label(
            id=element_id,
            x=x,
            y=y,
            width=width,
            height=height,
            text=text if isinstance(text, str) else None,
            container_id=container_id if isinstance(container_id, str) else None,
            is_deleted=is_deleted,
        )
    if element_type in CONNECTOR_TYPES:
        return Connector(
            id=element_id,
            x=x,
            y=y,
            width=width,
            height=height,
            shape=ConnectorShape(element_type),
            points=_points(raw.get("points")),
            is_deleted=is_deleted,
        )
    return None


def apply_layout(raw_elements: Iterable[Element], elements: Iterable[DiagramElement]) -> list[Element]:
    by_id: dict[str, DiagramElement] = {element.id: element for element in elements}
    updated: list[Element] = []
    for raw in raw_elements:
        element = by_id.get(raw.get("id"))  # type: ignore[arg-type]
        if element is None:
            updated.append(raw)
            continue
        patched = copy.deepcopy(raw)
        patched["x"] = element.x
        patched["y"] = element.y
        patched["width"] = element.width
        patched["height"] = element.height
        if isinstance(element, Label) and element.text is not None:
            patched["text"] = element.text
            if "originalText" in patched:
                patched["originalText"] = element.text
        if isinstance(element, Connector) and element.points:
            patched["points"] = [[px, py] for px, py in element.points]
        updated.append(patched)
    return updated


def relayout_scene(
    document: ExcalidrawDocument,
    engine: AutoLayoutEngine,
) -> tuple[ExcalidrawDocument, LayoutReport]:
    result = engine.apply(elements_from_scene(document.elements))
    return (
        ExcalidrawDocument(
            elements=apply_layout(document.elements, result.elements),
            app_state=dict(document.app_state),
            files=dict(document.files),
        ),
        result.report,
    )


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _geometry(raw: Element) -> tuple[float, float, float, float] | None:
    values = [_number(raw.get(key)) for key in ("x", "y", "width", "height")]
    if any(value is None for value in values):
        return None
    x, y, width, height = values
    return x, y, width, height  # type: ignore[return-value]


def _points(raw_points: Any) -> tuple[tuple[float, float], ...]:
    if not isinstance(raw_points, list):
        return ()
    points: list[tuple[float, float]] = []
    for point in raw_points:
        if not isinstance(point, (list, tuple)) or len(point) < 2:
            return ()
        px, py = _number(point[0]), _number(point[1])
        if px is None or py is None:
            return ()
        points.append((px, py))
    return tuple(points)
