from .base import Base, TimeStamp, as_utc, utcnow

__all__ = [
    "Base",
    "TimeStamp",
    "as_utc",
    "utcnow",
]
