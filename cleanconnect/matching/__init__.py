from cleanconnect.matching.engine import find_candidates, rank_by_distance
from cleanconnect.matching.geo import calculate_distance

__all__ = ["calculate_distance", "find_candidates", "rank_by_distance"]
