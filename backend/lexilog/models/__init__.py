from .words import Word
from .users import User


__all__ = [
    "Word",
    "User",
]
