# Estimates how much two route segments share the same corridor.
#
# Each segment is reduced to the axis-aligned box spanned by its two
# endpoints. The score is the intersection area over the smaller box's area.
# This is a coarse proxy for shared travel, not true path intersection.

from dataclasses import dataclass

from ride_structures import Coordinates, RouteSegment


@dataclass(frozen=True)
class BoundingBox:
    lat_min: float
    lat_max: float
    lng_min: float
    lng_max: float

    @classmethod
    def spanning(cls, a: Coordinates, b: Coordinates) -> "BoundingBox":
        return cls(lat_min=min(a.lat, b.lat), lat_max=max(a.lat, b.lat),
                   lng_min=min(a.lng, b.lng), lng_max=max(a.lng, b.lng))

    @property
    def area(self) -> float:
        return (self.lat_max - self.lat_min) * (self.lng_max - self.lng_min)

    def intersection_area(self, other: "BoundingBox") -> float:
        lat_overlap = max(0.0, min(self.lat_max, other.lat_max) - max(self.lat_min, other.lat_min))
        lng_overlap = max(0.0, min(self.lng_max, other.lng_max) - max(self.lng_min, other.lng_min))
        return lat_overlap * lng_overlap


def segment_box(segment: RouteSegment) -> BoundingBox:
    return BoundingBox.spanning(segment.start, segment.end)


def overlap(segment_a: RouteSegment, segment_b: RouteSegment) -> float:
    """Returns the overlap score of two segments, in [0, 1].

    A segment whose pickup and drop share a latitude or longitude has a
    zero-area box and scores 0 against everything, itself included.
    """
    box_a, box_b = segment_box(segment_a), segment_box(segment_b)
    smaller = min(box_a.area, box_b.area)
    if smaller <= 0:
        return 0.0
    if box_a == box_b:
        return 1.0
    score = box_a.intersection_area(box_b) / smaller
    return min(1.0, max(0.0, score))


def best_overlap(segment: RouteSegment, others) -> float:
    """The highest overlap of ``segment`` against any of ``others`` (0 if none)."""
    return max((overlap(segment, other) for other in others), default=0.0)
