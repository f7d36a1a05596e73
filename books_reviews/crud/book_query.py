# books_reviews/crud/book_query.py
"""
Composable query specification over books.

A ``BookQuery`` is an immutable record of title filters, requested review
aggregates, orderings and post-aggregation minimums. Every operation
returns a new ``BookQuery``; ``compile()`` turns the final record into a
single SQLAlchemy ``Select`` of ``(Book, <aggregate columns>...)``.

Aggregates are correlated scalar subqueries over ``reviews``, restricted
to an optional ``ReviewWindow``. The window applies to the reviews being
aggregated, never to the book row itself.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import Select, func, select

from books_reviews.core.exceptions import ValidationError
from books_reviews.models.book_model import Book
from books_reviews.models.review_model import Review

REVIEWS_COUNT = "reviews_count"
REVIEWS_AVG_RATING = "reviews_avg_rating"


@dataclass(frozen=True)
class ReviewWindow:
    """Inclusive ``created_at`` bounds for the reviews of an aggregate."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def apply(self, statement: Select) -> Select:
        if self.start is not None and self.end is not None:
            return statement.where(Review.created_at.between(self.start, self.end))
        if self.start is not None:
            return statement.where(Review.created_at >= self.start)
        if self.end is not None:
            return statement.where(Review.created_at <= self.end)
        return statement


def date_range(
    start: Optional[datetime] = None, end: Optional[datetime] = None
) -> ReviewWindow:
    """Window bounded below, above, both or neither."""
    return ReviewWindow(start=start, end=end)


@dataclass(frozen=True)
class Aggregate:
    name: str
    window: ReviewWindow = ReviewWindow()

    def expression(self):
        if self.name == REVIEWS_COUNT:
            column = func.count(Review.id)
        elif self.name == REVIEWS_AVG_RATING:
            column = func.avg(Review.rating)
        else:
            raise ValueError(f"Unknown aggregate: {self.name}")

        statement = select(column).where(Review.book_id == Book.id)
        return self.window.apply(statement).correlate(Book).scalar_subquery()


@dataclass(frozen=True)
class BookQuery:
    title_terms: Tuple[str, ...] = ()
    aggregates: Tuple[Aggregate, ...] = ()
    orderings: Tuple[Tuple[str, bool], ...] = ()
    min_reviews_counts: Tuple[int, ...] = ()

    # ---- filters ----

    def title(self, substring: Optional[str]) -> "BookQuery":
        """Keep books whose title contains ``substring``. No-op when empty."""
        if not substring:
            return self
        return replace(self, title_terms=self.title_terms + (substring,))

    def min_reviews(self, minimum: int) -> "BookQuery":
        """Keep books whose computed ``reviews_count`` is at least ``minimum``."""
        if not self.has_aggregate(REVIEWS_COUNT):
            raise ValidationError(
                "min_reviews requires the reviews count aggregate to be requested first"
            )
        return replace(
            self, min_reviews_counts=self.min_reviews_counts + (minimum,)
        )

    def order_by(self, field_name: str, *, descending: bool = False) -> "BookQuery":
        return replace(self, orderings=self.orderings + ((field_name, descending),))

    def latest(self) -> "BookQuery":
        return self.order_by("created_at", descending=True)

    # ---- aggregates ----

    def with_reviews_count(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> "BookQuery":
        return self._with_aggregate(Aggregate(REVIEWS_COUNT, date_range(start, end)))

    def with_avg_rating(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> "BookQuery":
        return self._with_aggregate(
            Aggregate(REVIEWS_AVG_RATING, date_range(start, end))
        )

    def popular(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> "BookQuery":
        return self.with_reviews_count(start, end).order_by(
            REVIEWS_COUNT, descending=True
        )

    def highest_rated(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> "BookQuery":
        return self.with_avg_rating(start, end).order_by(
            REVIEWS_AVG_RATING, descending=True
        )

    def has_aggregate(self, name: str) -> bool:
        return any(aggregate.name == name for aggregate in self.aggregates)

    @property
    def aggregate_names(self) -> Tuple[str, ...]:
        return tuple(aggregate.name for aggregate in self.aggregates)

    def _with_aggregate(self, aggregate: Aggregate) -> "BookQuery":
        # A second request for the same aggregate replaces the first window.
        kept = tuple(a for a in self.aggregates if a.name != aggregate.name)
        return replace(self, aggregates=kept + (aggregate,))

    # ---- compilation ----

    def compile(self) -> Select:
        expressions = {a.name: a.expression() for a in self.aggregates}
        labels = {name: expr.label(name) for name, expr in expressions.items()}

        statement = select(Book, *labels.values())

        for term in self.title_terms:
            statement = statement.where(Book.title.contains(term, autoescape=True))

        # Having-equivalent: compares the computed per-book count, not a review row
        for minimum in self.min_reviews_counts:
            statement = statement.where(expressions[REVIEWS_COUNT] >= minimum)

        for field_name, descending in self.orderings:
            column = labels[field_name] if field_name in labels else getattr(Book, field_name)
            statement = statement.order_by(column.desc() if descending else column.asc())

        return statement
