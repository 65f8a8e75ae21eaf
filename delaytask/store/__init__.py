"""
Store module.
Contains the Redis connection shared by every queue operation.
"""

from delaytask.store.connection import (
    close_redis,
    create_redis,
    get_redis,
    init_redis,
)

__all__ = [
    "create_redis",
    "get_redis",
    "init_redis",
    "close_redis",
]
