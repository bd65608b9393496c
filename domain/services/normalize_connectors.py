from __future__ import annotations

from dataclasses import replace

from domain.models import Connector, DiagramElement


def normalize_connector(connector: Connector) -> Connector:
    if not connector.points:
        return connector
    origin_x, origin_y = connector.points[0]
    if origin_x == 0 and origin_y == 0:
        return connector
    points = tuple((px - origin_x, py - origin_y) for px, py in connector.points)
    return replace(
        connector,
        x=connector.x + origin_x,
        y=connector.y + origin_y,
        points=points,
    )


def normalize_connectors(elements: list[DiagramElement]) -> list[DiagramElement]:
    return [
        normalize_connector(element)
        if isinstance(element, Connector) and not element.is_deleted
        else element
        for element in elements
    ]
