from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace

from domain.models import (
    AutoLayoutConfig,
    Container,
    DiagramElement,
    Label,
    Offset,
)


def labels_by_container(elements: list[DiagramElement]) -> dict[str, Label]:
    # Several labels per container are unexpected; the last one wins.
    bound: dict[str, Label] = {}
    for element in elements:
        if isinstance(element, Label) and not element.is_deleted and element.container_id:
            bound[element.container_id] = element
    return bound


def resize_containers(
    elements: list[DiagramElement],
    config: AutoLayoutConfig,
) -> tuple[list[DiagramElement], dict[str, Offset]]:
    bound = labels_by_container(elements)
    shifts: dict[str, Offset] = {}
    resized: list[DiagramElement] = []
    for element in elements:
        label = bound.get(element.id)
        if isinstance(element, Container) and not element.is_deleted and label is not None:
            required_width = label.width * config.width_scale(element.shape) + config.padding
            required_height = label.height + 2 * config.padding
            target_width = max(element.width, config.min_width, required_width)
            target_height = max(element.height, config.min_height, required_height)
            if target_width > element.width or target_height > element.height:
                # Grow symmetrically so the center stays put.
                shift = Offset(
                    (element.width - target_width) / 2,
                    (element.height - target_height) / 2,
                )
                element = replace(
                    element,
                    x=element.x + shift.dx,
                    y=element.y + shift.dy,
                    width=target_width,
                    height=target_height,
                )
                shifts[element.id] = shift
        resized.append(element)
    return resized, shifts


def reposition_labels(
    elements: list[DiagramElement],
    shifts: Mapping[str, Offset],
) -> list[DiagramElement]:
    if not shifts:
        return list(elements)
    moved: list[DiagramElement] = []
    for element in elements:
        if (
            isinstance(element, Label)
            and not element.is_deleted
            and element.container_id in shifts
        ):
            shift = shifts[element.container_id]
            element = replace(element, x=element.x + shift.dx, y=element.y + shift.dy)
        moved.append(element)
    return moved
