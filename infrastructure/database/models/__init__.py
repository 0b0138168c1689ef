from . import tickets  # noqa: F401
from . import reviews  # noqa: F401

__all__ = [
    "tickets",
    "reviews",
]
