"""
app.models
----------

This module exports the models.
"""

from app.models.user import User, Profile
from app.models.catalog import (
    Category,
    Tool,
    Review,
    ReviewVote,
    ReviewReport,
    Favorite,
    SponsoredSlot,
    ToolSubmission,
)
from app.models.content import BlogPost, ContactMessage, Signup, ContentCache
from app.models.workflow import Workflow, WorkflowRun
from app.models.analytics import (
    AnalyticsEvent,
    SearchStatistic,
    ToolInteractionStat,
    AffiliateClick,
    AuditLog,
)

__all__ = [
    "User",
    "Profile",
    "Category",
    "Tool",
    "Review",
    "ReviewVote",
    "ReviewReport",
    "Favorite",
    "SponsoredSlot",
    "ToolSubmission",
    "BlogPost",
    "ContactMessage",
    "Signup",
    "ContentCache",
    "Workflow",
    "WorkflowRun",
    "AnalyticsEvent",
    "SearchStatistic",
    "ToolInteractionStat",
    "AffiliateClick",
    "AuditLog",
]
