# books_reviews/services/listing_resolver.py
"""
Maps a ``(title, filter)`` request pair to a composed ``BookQuery``.

Windowed filters look back a whole number of calendar months from the
moment of resolution; the same filter resolved at two different times may
cover two different windows.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from dateutil.relativedelta import relativedelta

from books_reviews.crud.book_query import BookQuery
from books_reviews.schemas.book_schema import BookListingFilter

logger = logging.getLogger(__name__)


def _popular(months: int, minimum: int) -> Callable[[BookQuery, datetime], BookQuery]:
    def compose(query: BookQuery, now: datetime) -> BookQuery:
        start = now - relativedelta(months=months)
        return (
            query.popular(start, now)
            .highest_rated(start, now)
            .min_reviews(minimum)
        )

    return compose


def _highest_rated(
    months: int, minimum: int
) -> Callable[[BookQuery, datetime], BookQuery]:
    def compose(query: BookQuery, now: datetime) -> BookQuery:
        start = now - relativedelta(months=months)
        return (
            query.highest_rated(start, now)
            .popular(start, now)
            .min_reviews(minimum)
        )

    return compose


def _default(query: BookQuery, now: datetime) -> BookQuery:
    return query.latest().with_avg_rating().with_reviews_count()


LISTING_FILTERS: Dict[str, Callable[[BookQuery, datetime], BookQuery]] = {
    BookListingFilter.POPULAR_LAST_MONTH.value: _popular(1, 2),
    BookListingFilter.POPULAR_LAST_6MONTHS.value: _popular(6, 5),
    BookListingFilter.HIGHEST_RATED_LAST_MONTH.value: _highest_rated(1, 2),
    BookListingFilter.HIGHEST_RATED_LAST_6MONTHS.value: _highest_rated(6, 5),
}


def resolve_listing(
    title: Optional[str],
    filter_name: Optional[str],
    *,
    now: Optional[datetime] = None,
) -> BookQuery:
    """
    Build the listing query. The title filter always comes first; unknown
    or empty filter names use the default, newest-first listing.
    """
    now = now or datetime.now(timezone.utc)
    query = BookQuery().title(title)

    compose = LISTING_FILTERS.get(filter_name or "")
    if compose is None:
        if filter_name:
            logger.debug(f"Unknown listing filter '{filter_name}', using default")
        compose = _default

    return compose(query, now)
