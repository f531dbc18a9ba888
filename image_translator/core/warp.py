"""Homography warp of rendered text onto a quadrilateral."""

from __future__ import annotations

import math

import numpy as np

from ..config import PIPELINE_CONFIG
from ..domain.value_objects.geometry import Bounds, Point, Quadrilateral
from ..exceptions import GeometryError
from .canvas import ImageArray

Matrix3 = tuple[float, float, float, float, float, float, float, float, float]


def quad_bounds(quad: Quadrilateral) -> Bounds:
    """Integer window enclosing the quad (not clamped to any image)."""
    box = quad.bounding_box
    min_x, min_y = math.floor(box.min_x), math.floor(box.min_y)
    max_x, max_y = math.ceil(box.max_x), math.ceil(box.max_y)
    return Bounds(min_x, min_y, max(1, max_x - min_x), max(1, max_y - min_y))


def solve_linear_system(matrix: list[list[float]], vector: list[float]) -> list[float]:
    """Gauss-Jordan elimination with partial pivoting.
    
    Raises:
        GeometryError: If a pivot is (near) zero
    """
    n = len(vector)
    augmented = [list(row) + [vector[i]] for i, row in enumerate(matrix)]
    
    for i in range(n):
        max_row = max(range(i, n), key=lambda k: abs(augmented[k][i]))
        augmented[i], augmented[max_row] = augmented[max_row], augmented[i]
        
        pivot = augmented[i][i]
        if abs(pivot) < PIPELINE_CONFIG.singular_epsilon:
            raise GeometryError("Homography solve failed.")
        row_i = augmented[i]
        for j in range(i, n + 1):
            row_i[j] /= pivot
        
        for k in range(n):
            if k == i:
                continue
            row_k = augmented[k]
            factor = row_k[i]
            for j in range(i, n + 1):
                row_k[j] -= factor * row_i[j]
    
    return [row[n] for row in augmented]


def compute_homography(src: list[Point], dst: list[Point]) -> Matrix3:
    """Projective transform mapping four source points onto four destination points."""
    matrix: list[list[float]] = []
    vector: list[float] = []
    for (x, y), (u, v) in zip(((p.x, p.y) for p in src), ((p.x, p.y) for p in dst)):
        matrix.append([x, y, 1, 0, 0, 0, -u * x, -u * y])
        matrix.append([0, 0, 0, x, y, 1, -v * x, -v * y])
        vector.extend((u, v))
    
    h = solve_linear_system(matrix, vector)
    return (h[0], h[1], h[2], h[3], h[4], h[5], h[6], h[7], 1.0)


def invert_matrix3(matrix: Matrix3) -> Matrix3:
    """Invert a 3x3 matrix by its adjugate.
    
    Raises:
        GeometryError: If the determinant is (near) zero
    """
    a, b, c, d, e, f, g, h, i = matrix
    co_a = e * i - f * h
    co_b = f * g - d * i
    co_c = d * h - e * g
    det = a * co_a + b * co_b + c * co_c
    if abs(det) < PIPELINE_CONFIG.singular_epsilon:
        raise GeometryError("Homography inversion failed.")
    inv = 1 / det
    return (
        co_a * inv,
        (c * h - b * i) * inv,
        (b * f - c * e) * inv,
        co_b * inv,
        (a * i - c * g) * inv,
        (c * d - a * f) * inv,
        co_c * inv,
        (b * g - a * h) * inv,
        (a * e - b * d) * inv,
    )


def apply_homography(matrix: Matrix3, x: float, y: float) -> tuple[float, float]:
    """Map a point; points on the line at infinity are returned unchanged."""
    a, b, c, d, e, f, g, h, i = matrix
    denom = g * x + h * y + i
    if abs(denom) < PIPELINE_CONFIG.singular_epsilon:
        return (x, y)
    return ((a * x + b * y + c) / denom, (d * x + e * y + f) / denom)


def _cross_sign(a: Point, b: Point, px: np.ndarray, py: np.ndarray) -> np.ndarray:
    cross = (b.x - a.x) * (py - a.y) - (b.y - a.y) * (px - a.x)
    return np.where(cross >= 0, 1, -1)


def points_in_quad(px: np.ndarray, py: np.ndarray, quad: Quadrilateral) -> np.ndarray:
    """Vectorized point-in-convex-quad test (all edge cross products agree)."""
    p = quad.points
    s1 = _cross_sign(p[0], p[1], px, py)
    s2 = _cross_sign(p[1], p[2], px, py)
    s3 = _cross_sign(p[2], p[3], px, py)
    s4 = _cross_sign(p[3], p[0], px, py)
    return (s1 == s2) & (s2 == s3) & (s3 == s4)


def point_in_quad(point: Point, quad: Quadrilateral) -> bool:
    return bool(points_in_quad(np.array(point.x), np.array(point.y), quad))


def is_rect_quad(
    quad: Quadrilateral,
    bounds: Bounds,
    epsilon: float = PIPELINE_CONFIG.rect_epsilon,
) -> bool:
    """Check whether the quad's corners match the window corners within ``epsilon``."""
    rect = Quadrilateral.from_bbox(bounds.x, bounds.y, bounds.width, bounds.height)
    return all(
        abs(p.x - r.x) <= epsilon and abs(p.y - r.y) <= epsilon
        for p, r in zip(quad.points, rect.points)
    )


def warp_mask_to_quad(source: ImageArray, quad: Quadrilateral) -> tuple[ImageArray, Bounds]:
    """Perspective-map an RGBA canvas onto ``quad``.
    
    Destination pixels inside the quad are mapped back through the inverse
    homography and bilinearly sampled; everything else stays transparent.
    
    Args:
        source: HxWx4 rendered layer
        quad: Target corners, clockwise from top-left
        
    Returns:
        Tuple of (warped layer, its window in destination coordinates)
        
    Raises:
        GeometryError: If the quad is degenerate
    """
    bounds = quad_bounds(quad)
    src_h, src_w = source.shape[:2]
    output = np.zeros((bounds.height, bounds.width, 4), dtype=np.uint8)
    
    src_points = [Point(0, 0), Point(src_w, 0), Point(src_w, src_h), Point(0, src_h)]
    homography = compute_homography(src_points, quad.points)
    inverse = invert_matrix3(homography)
    
    ys, xs = np.mgrid[0:bounds.height, 0:bounds.width]
    px = (xs + bounds.x).astype(np.float64)
    py = (ys + bounds.y).astype(np.float64)
    inside = points_in_quad(px, py, quad)
    
    a, b, c, d, e, f, g, h, i = inverse
    denom = g * px + h * py + i
    degenerate = np.abs(denom) < PIPELINE_CONFIG.singular_epsilon
    safe = np.where(degenerate, 1.0, denom)
    sx = np.where(degenerate, px, (a * px + b * py + c) / safe)
    sy = np.where(degenerate, py, (d * px + e * py + f) / safe)
    
    valid = inside & (sx >= 0) & (sy >= 0) & (sx < src_w - 1) & (sy < src_h - 1)
    if not valid.any():
        return output, bounds
    
    sx, sy = sx[valid], sy[valid]
    x0 = np.floor(sx).astype(np.int64)
    y0 = np.floor(sy).astype(np.int64)
    dx = (sx - x0)[:, None]
    dy = (sy - y0)[:, None]
    
    src = source.astype(np.float64)
    v00 = src[y0, x0]
    v10 = src[y0, x0 + 1]
    v01 = src[y0 + 1, x0]
    v11 = src[y0 + 1, x0 + 1]
    top = v00 + (v10 - v00) * dx
    bottom = v01 + (v11 - v01) * dx
    output[valid] = np.clip(np.floor(top + (bottom - top) * dy + 0.5), 0, 255).astype(np.uint8)
    return output, bounds
