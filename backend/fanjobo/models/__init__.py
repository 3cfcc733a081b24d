"""SQLAlchemy ORM models for the student-services bot.

All models are exported from this module for convenient imports:
    from fanjobo.models import User, UserProfile, ContentSubmission, ...

Models are organized by domain:
- user.py: User, UserProfile
- submission.py: ContentSubmission, AdminNotification
- path.py: PathProfile, PathGoal, PathTask, PathArtifact
- content.py: Content
"""

from fanjobo.models.base import Base, TimestampMixin
from fanjobo.models.content import Content
from fanjobo.models.path import PathArtifact, PathGoal, PathProfile, PathTask
from fanjobo.models.submission import AdminNotification, ContentSubmission
from fanjobo.models.user import User, UserProfile

__all__ = [
    "AdminNotification",
    "Base",
    "Content",
    "ContentSubmission",
    "PathArtifact",
    "PathGoal",
    "PathProfile",
    "PathTask",
    "TimestampMixin",
    "User",
    "UserProfile",
]
