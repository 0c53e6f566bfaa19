# src/core/matching/__init__.py
"""
Домен матчинга поездок.
Сопоставление маршрутов водителей с запросами пассажиров.
"""

from src.core.matching.errors import MatchingError, NoMatchError, InvalidSearchWindowError
from src.core.matching.route_matcher import RouteMatch, compute_stride, match_route, is_route_match
from src.core.matching.time_window import SearchWindow, resolve_search_window, filter_by_departure
from src.core.matching.service import MatchQuery, MatchingService

__all__ = [
    "MatchingError",
    "NoMatchError",
    "InvalidSearchWindowError",
    "RouteMatch",
    "compute_stride",
    "match_route",
    "is_route_match",
    "SearchWindow",
    "resolve_search_window",
    "filter_by_departure",
    "MatchQuery",
    "MatchingService",
]
