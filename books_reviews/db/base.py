# Import all models so that SQLModel.metadata knows about every table.
from books_reviews.models.book_model import Book  # noqa: F401
from books_reviews.models.review_model import Review  # noqa: F401
