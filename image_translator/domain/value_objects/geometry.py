"""Geometry value objects."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence


@dataclass(frozen=True, slots=True)
class Point:
    """2D point with float coordinates."""
    x: float
    y: float
    
    def distance_to(self, other: Point) -> float:
        """Calculate Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)
    
    def scale(self, sx: float, sy: float) -> Point:
        return Point(self.x * sx, self.y * sy)
    
    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)
    
    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)
    
    def __mul__(self, scalar: float) -> Point:
        return Point(self.x * scalar, self.y * scalar)
    
    @classmethod
    def from_value(cls, value: object) -> Point:
        """Build a point from ``{"x", "y"}``, ``(x, y)`` or a Point."""
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(float(value["x"]), float(value["y"]))
        x, y = value  # type: ignore[misc]
        return cls(float(x), float(y))


@dataclass(frozen=True, slots=True)
class Rect:
    """Floating-point box in ``x, y, width, height`` form (OCR coordinates)."""
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
    
    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)
    
    def scale(self, sx: float, sy: float) -> Rect:
        return Rect(self.x * sx, self.y * sy, self.width * sx, self.height * sy)
    
    def union(self, other: Rect) -> Rect:
        """Return the smallest box containing both boxes."""
        min_x = min(self.x, other.x)
        min_y = min(self.y, other.y)
        max_x = max(self.right, other.right)
        max_y = max(self.bottom, other.bottom)
        return Rect(min_x, min_y, max_x - min_x, max_y - min_y)
    
    def vertical_overlap_ratio(self, other: Rect) -> float:
        """Vertical overlap divided by the smaller of the two heights."""
        overlap = max(0.0, min(self.bottom, other.bottom) - max(self.y, other.y))
        denom = min(self.height, other.height)
        return overlap / denom if denom > 0 else 0.0
    
    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}
    
    @classmethod
    def from_dict(cls, data: dict) -> Rect:
        return cls(
            float(data["x"]),
            float(data["y"]),
            float(data["width"]),
            float(data["height"]),
        )
    
    @classmethod
    def union_all(cls, rects: Iterable[Rect]) -> Rect:
        rects = list(rects)
        if not rects:
            raise ValueError("union_all() requires at least one rect")
        result = rects[0]
        for rect in rects[1:]:
            result = result.union(rect)
        return result


@dataclass(frozen=True, slots=True)
class Bounds:
    """Axis-aligned integer window clamped to an image."""
    x: int
    y: int
    width: int
    height: int
    
    @property
    def right(self) -> int:
        return self.x + self.width
    
    @property
    def bottom(self) -> int:
        return self.y + self.height
    
    @property
    def area(self) -> int:
        return self.width * self.height
    
    def overlaps(self, other: Bounds) -> bool:
        """Check for a strictly positive-area intersection."""
        return (
            self.x < other.right and
            other.x < self.right and
            self.y < other.bottom and
            other.y < self.bottom
        )
    
    def distance_to(self, other: Bounds) -> int:
        """Largest axis gap between the two windows (0 when touching)."""
        dx = max(0, self.x - other.right, other.x - self.right)
        dy = max(0, self.y - other.bottom, other.y - self.bottom)
        return max(dx, dy)
    
    def is_close_to(self, other: Bounds, distance: float) -> bool:
        return self.overlaps(other) or self.distance_to(other) <= distance
    
    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)
    
    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}
    
    @classmethod
    def from_rect(cls, rect: Rect, image_width: int, image_height: int) -> Bounds:
        """Snap a float box outward to whole pixels inside the image.
        
        The result always has at least one pixel in each dimension.
        """
        x = _clamp(math.floor(rect.x), 0, image_width - 1)
        y = _clamp(math.floor(rect.y), 0, image_height - 1)
        max_x = _clamp(math.ceil(rect.right), x + 1, image_width)
        max_y = _clamp(math.ceil(rect.bottom), y + 1, image_height)
        return cls(x, y, max_x - x, max_y - y)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box in min/max form."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    
    @property
    def width(self) -> float:
        return self.max_x - self.min_x
    
    @property
    def height(self) -> float:
        return self.max_y - self.min_y
    
    def to_rect(self) -> Rect:
        return Rect(self.min_x, self.min_y, self.width, self.height)


@dataclass(frozen=True, slots=True)
class Quadrilateral:
    """Four-point polygon, clockwise from the top-left corner."""
    p1: Point
    p2: Point
    p3: Point
    p4: Point
    
    def __iter__(self) -> Iterator[Point]:
        """Allow unpacking: p1, p2, p3, p4 = quad"""
        yield self.p1
        yield self.p2
        yield self.p3
        yield self.p4
    
    def __getitem__(self, index: int) -> Point:
        return self.points[index]
    
    @property
    def points(self) -> list[Point]:
        return [self.p1, self.p2, self.p3, self.p4]
    
    @property
    def bounding_box(self) -> BoundingBox:
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return BoundingBox(min(xs), min(ys), max(xs), max(ys))
    
    @property
    def area(self) -> float:
        """Calculate area using shoelace formula."""
        points = self.points + [self.p1]
        area = 0.0
        for i in range(4):
            area += points[i].x * points[i + 1].y
            area -= points[i + 1].x * points[i].y
        return abs(area) / 2
    
    @property
    def angle(self) -> float:
        """Angle of the top edge in degrees (0 for horizontal text)."""
        return math.degrees(math.atan2(self.p2.y - self.p1.y, self.p2.x - self.p1.x))
    
    @property
    def edge_width(self) -> float:
        """Mean length of the top and bottom edges."""
        return (self.p1.distance_to(self.p2) + self.p4.distance_to(self.p3)) / 2
    
    @property
    def edge_height(self) -> float:
        """Mean length of the left and right edges."""
        return (self.p1.distance_to(self.p4) + self.p2.distance_to(self.p3)) / 2
    
    def scale(self, sx: float, sy: float) -> Quadrilateral:
        return Quadrilateral(*(p.scale(sx, sy) for p in self.points))
    
    def normalized(self) -> Quadrilateral:
        """Same outline with the point order rotated to start top-left.
    
        OCR engines may list a clockwise quad from any corner. The corner
        with the smallest ``x + y`` becomes ``p1`` so that ``angle`` and the
        edge lengths describe the text direction.
        """
        points = self.points
        start = min(range(4), key=lambda i: (points[i].x + points[i].y, points[i].y))
        return Quadrilateral(*(points[(start + k) % 4] for k in range(4)))
    
    def to_list(self) -> list[dict[str, float]]:
        return [{"x": p.x, "y": p.y} for p in self.points]
    
    @classmethod
    def from_points(cls, points: Sequence[object]) -> Quadrilateral:
        """Create from four point-like values (dicts, pairs or Points)."""
        if len(points) != 4:
            raise ValueError(f"A quadrilateral needs 4 points, got {len(points)}")
        return cls(*(Point.from_value(p) for p in points))
    
    @classmethod
    def from_bbox(cls, x: float, y: float, w: float, h: float) -> Quadrilateral:
        """Create quadrilateral from bounding box."""
        return cls(
            Point(x, y),
            Point(x + w, y),
            Point(x + w, y + h),
            Point(x, y + h)
        )
    
    @classmethod
    def from_rect(cls, rect: Rect) -> Quadrilateral:
        return cls.from_bbox(rect.x, rect.y, rect.width, rect.height)


def _clamp(value: float, low: float, high: float) -> int:
    return int(max(low, min(high, value)))
