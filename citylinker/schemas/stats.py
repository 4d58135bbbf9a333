"""Dashboard counters for admins and business owners."""

from citylinker.schemas.base import ApiModel


class AdminStats(ApiModel):
    total_users: int
    total_businesses: int
    total_clients: int
    total_publications: int
    pending_publications: int
    total_reviews: int


class BusinessStats(ApiModel):
    """Aggregates over one owner's publications."""

    total_views: int
    total_reviews: int
    average_rating: float
    pending_count: int
    approved_count: int
