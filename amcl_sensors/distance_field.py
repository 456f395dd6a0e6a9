# distance_field.py
# Read-only map interface the sensor models score against.
# All queries take points shaped (..., D) and answer per point; nothing here
# raises for out-of-bounds points, they get a sentinel instead.

from abc import ABC, abstractmethod

# cell states (same convention as the classic AMCL map)
FREE, UNKNOWN, OCCUPIED = -1, 0, 1


class DistanceField(ABC):
    max_occ_dist = 0.0

    @abstractmethod
    def distance_to_nearest_obstacle(self, points):
        """Distance (m) to the closest occupied cell, clamped to max_occ_dist.
        Out-of-bounds points return max_occ_dist."""

    @abstractmethod
    def is_in_map(self, points):
        """Bool array, True where the point falls inside the map bounds."""

    @abstractmethod
    def distance_to_non_free_space(self, points):
        """Distance (m) from the point to the nearest occupied/unknown cell.
        0 for points that are themselves in non-free space or off the map."""

    @abstractmethod
    def update_cspace(self, max_occ_dist):
        """Re-clamp the obstacle distance field to a new max_occ_dist."""

    def calc_range(self, origins, angles, max_range):
        raise NotImplementedError(f"{type(self).__name__} does not support ray casting")
