from __future__ import annotations

import logging
from dataclasses import replace

from domain.models import (
    CollisionCorrection,
    Connector,
    DiagramElement,
    Label,
    is_bound_label,
    live_containers,
)

logger = logging.getLogger(__name__)


def find_topmost_independent(elements: list[DiagramElement]) -> DiagramElement | None:
    containers = live_containers(elements)
    topmost: DiagramElement | None = None
    for element in elements:
        if element.is_deleted or isinstance(element, Connector):
            continue
        if is_bound_label(element, containers):
            continue
        # Strict comparison keeps the first element on ties.
        if topmost is None or element.y < topmost.y:
            topmost = element
    return topmost


def penetration_depth(top: DiagramElement, candidate: DiagramElement) -> float:
    top_box = top.bounds()
    box = candidate.bounds()
    if not top_box.overlaps_horizontally(box):
        return 0.0
    # Only elements starting below the top edge push it upwards.
    if not top_box.y < box.y < top_box.bottom:
        return 0.0
    return top_box.bottom - box.y


def correct_vertical_collision(
    elements: list[DiagramElement],
) -> tuple[list[DiagramElement], CollisionCorrection | None]:
    topmost = find_topmost_independent(elements)
    if topmost is None:
        return list(elements), None

    own_container_id = topmost.container_id if isinstance(topmost, Label) else None
    max_depth = 0.0
    obstacle_id: str | None = None
    for candidate in elements:
        if candidate is topmost or candidate.is_deleted or isinstance(candidate, Connector):
            continue
        if candidate.id == own_container_id:
            continue
        if isinstance(candidate, Label) and candidate.container_id == topmost.id:
            continue
        depth = penetration_depth(topmost, candidate)
        if depth > max_depth:
            max_depth = depth
            obstacle_id = candidate.id

    if max_depth <= 0 or obstacle_id is None:
        return list(elements), None

    corrected: list[DiagramElement] = []
    moved_labels: list[str] = []
    for element in elements:
        if element is topmost:
            element = replace(element, y=element.y - max_depth)
        elif (
            isinstance(element, Label)
            and not element.is_deleted
            and element.container_id == topmost.id
        ):
            element = replace(element, y=element.y - max_depth)
            moved_labels.append(element.id)
        corrected.append(element)

    logger.info(
        "Shifted %s up by %.2f to clear %s", topmost.id, max_depth, obstacle_id
    )
    return corrected, CollisionCorrection(
        element_id=topmost.id,
        obstacle_id=obstacle_id,
        depth=max_depth,
        moved_label_ids=tuple(moved_labels),
    )
