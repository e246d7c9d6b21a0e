"""
routes.py
-----------
Routes for the Flask application.
This module is responsible for registering the routes of the REST API
and linking them to the corresponding resources.
"""

from flask_restful import Api
from app.logger import logger

# System endpoints
from app.resources.version import VersionResource
from app.resources.config import ConfigResource
from app.resources.health import HealthResource

# Authentication and account
from app.resources.auth import (
    LoginResource,
    LogoutResource,
    RegisterResource,
    SessionResource,
)
from app.resources.account import (
    AccountResource,
    DashboardResource,
    ExportResource,
    ProfileResource,
)

# Public catalog
from app.resources.tools import (
    SponsoredToolsResource,
    ToolDetailResource,
    ToolListResource,
    TrendingCategoriesResource,
    TrendingInsightsResource,
    ToolSubmissionResource,
    TrendingToolsResource,
)
from app.resources.categories import (
    CategoryDetailResource,
    CategoryListResource,
    CategoryTrendingResource,
)
from app.resources.search import AdvancedSearchResource, SearchResource
from app.resources.reviews import (
    ReviewListResource,
    ReviewReportResource,
    ReviewVoteResource,
)
from app.resources.favorites import FavoritesResource

# Editorial content and analytics
from app.resources.content import (
    BlogCategoriesResource,
    BlogListResource,
    BlogPostResource,
    ContactResource,
    NewsResource,
    SignupResource,
)
from app.resources.analytics import (
    AdminAnalyticsResource,
    AffiliateClickResource,
    TrackEventResource,
)

# Administration
from app.resources.admin_catalog import (
    AdminCategoriesResource,
    AdminReviewReportsResource,
    AdminReviewsResource,
    AdminSponsoredResource,
    AdminToolEnrichResource,
    AdminToolPublishResource,
    AdminToolsResource,
    AdminToolSubmissionsResource,
    AdminToolValidateResource,
)
from app.resources.admin_users import (
    AdminUserPasswordResource,
    AdminUserResource,
    AdminUserRoleResource,
    AdminUsersResource,
    AdminUserStatusResource,
)
from app.resources.admin_content import (
    AdminBlogResource,
    AdminContactResource,
    AuditLogsResource,
    AutomationResource,
    RefreshContentResource,
    RevalidateToolsResource,
)
from app.resources.admin_workflows import (
    AdminWorkflowExecuteResource,
    AdminWorkflowsResource,
)


def register_routes(app):
    """
    Register the REST API routes on the Flask application.

    Args:
        app (Flask): The Flask application instance.
    """
    api = Api(app)

    # System endpoints
    api.add_resource(HealthResource, "/health", "/api/health")
    api.add_resource(VersionResource, "/version")
    api.add_resource(ConfigResource, "/api/admin/config")

    # Authentication
    api.add_resource(RegisterResource, "/api/auth/register")
    api.add_resource(LoginResource, "/api/auth/login")
    api.add_resource(LogoutResource, "/api/auth/logout")
    api.add_resource(SessionResource, "/api/auth/session")

    # Account
    api.add_resource(ProfileResource, "/api/user/profile")
    api.add_resource(AccountResource, "/api/user/account")
    api.add_resource(ExportResource, "/api/user/export")
    api.add_resource(DashboardResource, "/api/dashboard")

    # Tools and categories
    api.add_resource(ToolListResource, "/api/tools")
    api.add_resource(TrendingToolsResource, "/api/tools/trending")
    api.add_resource(TrendingCategoriesResource, "/api/tools/trending/categories")
    api.add_resource(TrendingInsightsResource, "/api/tools/trending/insights")
    api.add_resource(ToolSubmissionResource, "/api/tools/submit")
    api.add_resource(ToolDetailResource, "/api/tools/<string:tool_id>")
    api.add_resource(CategoryListResource, "/api/categories")
    api.add_resource(CategoryDetailResource, "/api/categories/<string:name>")
    api.add_resource(
        CategoryTrendingResource, "/api/categories/<string:name>/trending"
    )
    api.add_resource(SponsoredToolsResource, "/api/sponsored")

    # Search
    api.add_resource(SearchResource, "/api/search")
    api.add_resource(AdvancedSearchResource, "/api/search/advanced")

    # Reviews and favorites
    api.add_resource(ReviewListResource, "/api/reviews")
    api.add_resource(ReviewVoteResource, "/api/reviews/<string:review_id>/vote")
    api.add_resource(
        ReviewReportResource, "/api/reviews/<string:review_id>/report"
    )
    api.add_resource(FavoritesResource, "/api/favorites")

    # Editorial content
    api.add_resource(BlogListResource, "/api/blog")
    api.add_resource(BlogCategoriesResource, "/api/blog/categories")
    api.add_resource(BlogPostResource, "/api/blog/<string:slug>")
    api.add_resource(ContactResource, "/api/contact")
    api.add_resource(SignupResource, "/api/signup")
    api.add_resource(NewsResource, "/api/news")

    # Analytics
    api.add_resource(TrackEventResource, "/api/analytics/track")
    api.add_resource(AffiliateClickResource, "/api/analytics/affiliate-click")
    api.add_resource(AdminAnalyticsResource, "/api/admin/analytics")

    # Administration: catalog
    api.add_resource(AdminToolsResource, "/api/admin/tools")
    api.add_resource(AdminToolPublishResource, "/api/admin/tools/publish")
    api.add_resource(AdminToolEnrichResource, "/api/admin/tools/enrich")
    api.add_resource(AdminToolValidateResource, "/api/admin/tools/validate")
    api.add_resource(
        AdminToolSubmissionsResource, "/api/admin/tools/submissions"
    )
    api.add_resource(AdminCategoriesResource, "/api/admin/categories")
    api.add_resource(AdminReviewsResource, "/api/admin/reviews")
    api.add_resource(AdminReviewReportsResource, "/api/admin/reviews/reports")
    api.add_resource(AdminSponsoredResource, "/api/admin/sponsored")

    # Administration: users
    api.add_resource(AdminUsersResource, "/api/admin/users")
    api.add_resource(AdminUserResource, "/api/admin/users/<string:user_id>")
    api.add_resource(
        AdminUserRoleResource, "/api/admin/users/<string:user_id>/role"
    )
    api.add_resource(
        AdminUserStatusResource, "/api/admin/users/<string:user_id>/status"
    )
    api.add_resource(
        AdminUserPasswordResource, "/api/admin/users/<string:user_id>/password"
    )

    # Administration: content, automation and audit
    api.add_resource(AdminBlogResource, "/api/admin/blog")
    api.add_resource(AdminContactResource, "/api/admin/contact")
    api.add_resource(RevalidateToolsResource, "/api/revalidate/tools")
    api.add_resource(RefreshContentResource, "/api/admin/refresh-content")
    api.add_resource(AutomationResource, "/api/admin/automation")
    api.add_resource(AuditLogsResource, "/api/admin/audit-logs")

    # Administration: workflows
    api.add_resource(AdminWorkflowsResource, "/api/admin/workflows")
    api.add_resource(
        AdminWorkflowExecuteResource, "/api/admin/workflows/execute"
    )

    logger.info("Routes registered successfully.")
