from redis import asyncio as aioredis

from books_reviews.core.config import settings

# The client connects lazily on first command.
redis_client: aioredis.Redis = aioredis.from_url(
    settings.REDIS_URL, encoding="utf-8", decode_responses=True
)
