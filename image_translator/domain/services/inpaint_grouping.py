"""Inpaint grouping service - cluster nearby regions into shared inpaint calls."""

from __future__ import annotations

from dataclasses import dataclass

from ..entities.region import Region
from ..value_objects.geometry import Bounds


@dataclass(frozen=True, slots=True)
class RegionBounds:
    """A region paired with its pixel window in the target image."""
    region: Region
    bounds: Bounds


@dataclass(frozen=True, slots=True)
class InpaintGroup:
    """Regions whose windows overlap or lie within the grouping distance."""
    entries: list[RegionBounds]
    has_overlap: bool = False
    
    @property
    def regions(self) -> list[Region]:
        return [entry.region for entry in self.entries]
    
    def __len__(self) -> int:
        return len(self.entries)


def build_inpaint_groups(entries: list[RegionBounds], distance: float) -> list[InpaintGroup]:
    """Partition regions into connected components of the proximity graph.
    
    Two regions are connected when their windows overlap or their axis gap
    is at most ``distance``. A group records whether any two of its members
    actually overlap, which forces a union inpaint.
    
    Args:
        entries: Regions with their image windows
        distance: Maximum gap (pixels) that still links two regions
        
    Returns:
        Groups ordered by their first member; members keep input order
        
    Complexity: O(n^2) pair checks
    """
    n = len(entries)
    if n == 0:
        return []
    
    # Union-Find data structure
    parent = list(range(n))
    
    def find(x: int) -> int:
        if parent[x] != x:
            parent[x] = find(parent[x])  # Path compression
        return parent[x]
    
    def union(x: int, y: int) -> None:
        px, py = find(x), find(y)
        if px != py:
            parent[max(px, py)] = min(px, py)
    
    overlapping: set[int] = set()
    for i in range(n):
        for j in range(i + 1, n):
            a, b = entries[i].bounds, entries[j].bounds
            if not a.is_close_to(b, distance):
                continue
            union(i, j)
            if a.overlaps(b):
                overlapping.update((i, j))
    
    components: dict[int, list[int]] = {}
    for i in range(n):
        components.setdefault(find(i), []).append(i)
    
    return [
        InpaintGroup(
            entries=[entries[i] for i in indices],
            has_overlap=any(i in overlapping for i in indices),
        )
        for indices in components.values()
    ]
