from __future__ import annotations

import logging
from collections.abc import Sequence

from domain.models import (
    AutoLayoutConfig,
    Connector,
    DiagramElement,
    Label,
    LayoutReport,
    LayoutResult,
)
from domain.ports.text_metrics import TextMeasurer
from domain.services.correct_collisions import correct_vertical_collision
from domain.services.fit_labels import fit_labels
from domain.services.normalize_connectors import normalize_connectors
from domain.services.resize_containers import reposition_labels, resize_containers
from domain.services.sanitize_labels import sanitize_labels
from domain.services.text_metrics import HeuristicTextMeasurer, TextMetricsConfig

logger = logging.getLogger(__name__)


class AutoLayoutEngine:
    """Corrects the geometry of an already positioned element set.

    Passes run in a fixed order: sanitize label text, widen narrow labels,
    grow containers around their labels, move labels with their containers,
    anchor connectors at their first point, then nudge the top-most element
    clear of whatever sits below it. The input list is never mutated and the
    result keeps its length and order.
    """

    def __init__(
        self,
        config: AutoLayoutConfig | None = None,
        measurer: TextMeasurer | None = None,
    ) -> None:
        self.config = config or AutoLayoutConfig()
        self.measurer = measurer or HeuristicTextMeasurer(
            TextMetricsConfig.from_layout_config(self.config)
        )

    def apply(self, elements: Sequence[DiagramElement]) -> LayoutResult:
        original = list(elements)
        report = LayoutReport()

        current = sanitize_labels(original)
        report.sanitized_label_ids = _changed_ids(original, current, Label)

        fitted = fit_labels(current, self.measurer)
        report.widened_label_ids = _changed_ids(current, fitted, Label)
        current = fitted

        current, shifts = resize_containers(current, self.config)
        report.container_shifts = dict(shifts)
        current = reposition_labels(current, shifts)

        normalized = normalize_connectors(current)
        report.normalized_connector_ids = _changed_ids(current, normalized, Connector)
        current = normalized

        current, report.collision = correct_vertical_collision(current)

        logger.debug(
            "Auto layout: %d elements, %d labels sanitized, %d labels widened, "
            "%d containers resized, %d connectors normalized",
            len(current),
            len(report.sanitized_label_ids),
            len(report.widened_label_ids),
            len(report.container_shifts),
            len(report.normalized_connector_ids),
        )
        return LayoutResult(elements=current, report=report)


def auto_layout(
    elements: Sequence[DiagramElement],
    config: AutoLayoutConfig | None = None,
) -> list[DiagramElement]:
    return AutoLayoutEngine(config).apply(elements).elements


def _changed_ids(
    before: list[DiagramElement],
    after: list[DiagramElement],
    kind: type,
) -> list[str]:
    return [
        new.id
        for old, new in zip(before, after)
        if isinstance(new, kind) and old is not new
    ]
