from reviewdesk.models.user import User
from reviewdesk.models.profile import Profile
from reviewdesk.models.reviewer import Reviewer, Experience
from reviewdesk.models.resume import Resume, Review, ReviewerRating, RESUME_STATUSES
from reviewdesk.models.follow import Follow
from reviewdesk.models.conversation import Conversation, Message

__all__ = [
    "User",
    "Profile",
    "Reviewer",
    "Experience",
    "Resume",
    "Review",
    "ReviewerRating",
    "RESUME_STATUSES",
    "Follow",
    "Conversation",
    "Message",
]
