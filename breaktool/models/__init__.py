from .base import Base
from .review import Review, ReviewStatus, ReviewType
from .review_vote import ReviewVote, ReviewVoteType
from .tool import Tool
from .user import ADMIN_ROLES, User, UserRole

__all__ = [
    "Base",
    "Tool",
    "User",
    "UserRole",
    "ADMIN_ROLES",
    "Review",
    "ReviewStatus",
    "ReviewType",
    "ReviewVote",
    "ReviewVoteType",
]
