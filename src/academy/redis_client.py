"""Redis connection pool. Only rate limiting and the readiness probe use it."""

import redis.asyncio as redis

_pool: redis.Redis | None = None


async def init_redis(url: str, max_connections: int = 20) -> None:
    """Create the shared client; connections are opened lazily on first command."""
    global _pool  # noqa: PLW0603
    _pool = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=max_connections,
    )


async def close_redis() -> None:
    global _pool  # noqa: PLW0603
    if _pool is not None:
        await _pool.aclose()
        _pool = None


def get_redis() -> redis.Redis:
    """Return the shared client.

    Raises:
        RuntimeError: ``init_redis`` has not run (no lifespan, or Redis disabled).
    """
    if _pool is None:
        msg = "Redis not initialized"
        raise RuntimeError(msg)
    return _pool
