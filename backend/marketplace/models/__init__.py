from marketplace.models.ad import Ad
from marketplace.models.user import User

__all__ = [
    "Ad",
    "User",
]
