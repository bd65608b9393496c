from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

SCENE_SOURCE = "excalidraw-autofit"


class ElementKind(str, Enum):
    CONTAINER = "container"
    LABEL = "label"
    CONNECTOR = "connector"


class ContainerShape(str, Enum):
    ELLIPSE = "ellipse"
    RECTANGLE = "rectangle"
    DIAMOND = "diamond"


class ConnectorShape(str, Enum):
    ARROW = "arrow"
    LINE = "line"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Offset:
    dx: float
    dy: float


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def overlaps_horizontally(self, other: Bounds) -> bool:
        return self.x < other.right and other.x < self.right

    def overlaps_vertically(self, other: Bounds) -> bool:
        return self.y < other.bottom and other.y < self.bottom


@dataclass(frozen=True)
class _Positioned:
    id: str
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        # Upstream generators occasionally emit negative extents.
        if self.width < 0:
            object.__setattr__(self, "width", 0.0)
        if self.height < 0:
            object.__setattr__(self, "height", 0.0)

    def bounds(self) -> Bounds:
        return Bounds(self.x, self.y, self.width, self.height)

    def center(self) -> Point:
        return self.bounds().center()


@dataclass(frozen=True)
class Container(_Positioned):
    shape: ContainerShape = ContainerShape.RECTANGLE
    is_deleted: bool = False

    @property
    def kind(self) -> ElementKind:
        return ElementKind.CONTAINER


@dataclass(frozen=True)
class Label(_Positioned):
    text: str | None = None
    container_id: str | None = None
    is_deleted: bool = False

    @property
    def kind(self) -> ElementKind:
        return ElementKind.LABEL


@dataclass(frozen=True)
class Connector(_Positioned):
    shape: ConnectorShape = ConnectorShape.ARROW
    points: tuple[tuple[float, float], ...] = ()
    is_deleted: bool = False

    @property
    def kind(self) -> ElementKind:
        return ElementKind.CONNECTOR

    def absolute_points(self) -> list[tuple[float, float]]:
        return [(self.x + px, self.y + py) for px, py in self.points]


DiagramElement = Container | Label | Connector


def live_containers(elements: list[DiagramElement]) -> dict[str, Container]:
    return {
        element.id: element
        for element in elements
        if isinstance(element, Container) and not element.is_deleted
    }


def is_bound_label(element: DiagramElement, containers: dict[str, Container]) -> bool:
    return (
        isinstance(element, Label)
        and element.container_id is not None
        and element.container_id in containers
    )


@dataclass(frozen=True)
class AutoLayoutConfig:
    padding: float = 20.0
    min_width: float = 100.0
    min_height: float = 50.0
    label_char_width: float = 10.0
    line_height: float = 25.0
    ellipse_width_scale: float = 1.6
    default_width_scale: float = 1.3

    def width_scale(self, shape: ContainerShape) -> float:
        # Label text has to clear the curved boundary of an ellipse.
        if shape is ContainerShape.ELLIPSE:
            return self.ellipse_width_scale
        return self.default_width_scale


@dataclass(frozen=True)
class CollisionCorrection:
    element_id: str
    obstacle_id: str
    depth: float
    moved_label_ids: tuple[str, ...] = ()


@dataclass
class LayoutReport:
    sanitized_label_ids: list[str] = field(default_factory=list)
    widened_label_ids: list[str] = field(default_factory=list)
    container_shifts: dict[str, Offset] = field(default_factory=dict)
    normalized_connector_ids: list[str] = field(default_factory=list)
    collision: CollisionCorrection | None = None

    @property
    def changed(self) -> bool:
        return bool(
            self.sanitized_label_ids
            or self.widened_label_ids
            or self.container_shifts
            or self.normalized_connector_ids
            or self.collision
        )

    def to_dict(self) -> dict:
        return {
            "sanitized_label_ids": list(self.sanitized_label_ids),
            "widened_label_ids": list(self.widened_label_ids),
            "container_shifts": {
                element_id: {"dx": shift.dx, "dy": shift.dy}
                for element_id, shift in self.container_shifts.items()
            },
            "normalized_connector_ids": list(self.normalized_connector_ids),
            "collision": (
                {
                    "element_id": self.collision.element_id,
                    "obstacle_id": self.collision.obstacle_id,
                    "depth": self.collision.depth,
                    "moved_label_ids": list(self.collision.moved_label_ids),
                }
                if self.collision
                else None
            ),
        }


@dataclass(frozen=True)
class LayoutResult:
    elements: list[DiagramElement]
    report: LayoutReport


@dataclass(frozen=True)
class ExcalidrawDocument:
    elements: list[dict]
    app_state: dict
    files: dict

    def to_dict(self) -> dict:
        return {
            "type": "excalidraw",
            "version": 2,
            "source": SCENE_SOURCE,
            "elements": self.elements,
            "appState": self.app_state,
            "files": self.files,
        }
