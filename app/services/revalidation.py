"""
revalidation.py
---------------

Content freshness stamps. Front-ends poll ``content_cache`` and refetch a
listing when its stamp is newer than their copy.
"""

from datetime import datetime, timezone

from app.logger import logger
from app.models.content import ContentCache
from app.models.db import db

DEFAULT_TOOL_PATHS = ["/", "/AITools", "/categories"]

# Listing paths affected by each content type
CONTENT_PATHS = {
    "tools": DEFAULT_TOOL_PATHS,
    "categories": ["/", "/categories"],
    "blog": ["/", "/blog"],
    "reviews": ["/AITools"],
}


def mark_stale(content_type, updated_by=None, commit=True):
    """Stamp ``content_type`` as updated now."""
    entry = ContentCache.touch(content_type, updated_by=updated_by)
    if commit:
        db.session.commit()
    logger.info(
        "Content marked stale.", content_type=content_type, updated_by=updated_by
    )
    return entry


def revalidate_tools(paths=None, updated_by=None):
    """
    Invalidate the tool listings.

    Returns:
        dict: the paths revalidated and the timestamp used.
    """
    paths = list(paths) if paths else list(DEFAULT_TOOL_PATHS)
    mark_stale("tools", updated_by=updated_by)
    for path in paths:
        logger.debug("Revalidated path.", path=path)
    return {
        "revalidated": True,
        "paths": paths,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def refresh_content(content_type, content_id=None, updated_by=None):
    """Invalidate every listing that shows ``content_type``."""
    mark_stale(content_type, updated_by=updated_by)
    paths = CONTENT_PATHS.get(content_type, ["/"])
    logger.info(
        "Content refresh triggered.",
        content_type=content_type,
        content_id=content_id,
        paths=paths,
    )
    return {
        "revalidated": True,
        "paths": paths,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def cache_status():
    """All stamps, most recent first."""
    return ContentCache.query.order_by(ContentCache.last_updated.desc()).all()
