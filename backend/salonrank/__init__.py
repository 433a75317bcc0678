"""Relevance, ranking, slot allocation and recommendation core for salon bookings."""

from .booking import check_booking
from .contracts import BookingDecision, InvalidOptionsError, SalonRankError, SlotRanking
from .pipeline import recommend, search
from .ranking import rank_candidates
from .recommend import hybrid_recommend, popular_items
from .semantic_search import semantic_search
from .slot_scoring import rank_slots

__all__ = [
    "BookingDecision",
    "InvalidOptionsError",
    "SalonRankError",
    "SlotRanking",
    "check_booking",
    "hybrid_recommend",
    "popular_items",
    "rank_candidates",
    "rank_slots",
    "recommend",
    "search",
    "semantic_search",
]
