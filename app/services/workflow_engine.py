"""
workflow_engine.py
------------------

Runs admin workflows. A workflow's ``actions`` is an ordered list of dicts,
each with a ``type`` key naming one of the handlers below plus any handler
options. Actions run sequentially inside one transaction: if any action
fails, its changes are rolled back and the run is recorded as failed.
"""

import time
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from app.logger import logger
from app.models.catalog import Tool
from app.models.content import BlogPost
from app.models.db import db
from app.models.workflow import WorkflowRun
from app.services.revalidation import mark_stale
from app.services.tool_validation import summarize_catalog


class WorkflowExecutionError(Exception):
    """Raised by an action that cannot complete."""


def _noop(action, context):
    return {}


def _refresh_content(action, context):
    content_type = action.get("content_type", "tools")
    mark_stale(content_type, updated_by=context.get("user_id"), commit=False)
    return {"content_type": content_type}


def _recalculate_review_stats(action, context):
    tools = Tool.query.all()
    for tool in tools:
        tool.refresh_review_stats()
    return {"tools_updated": len(tools)}


def _data_quality_check(action, context):
    summary = summarize_catalog(Tool.published().all())
    summary.pop("reports")
    return summary


def _publish_scheduled_posts(action, context):
    now = datetime.now(timezone.utc)
    posts = BlogPost.query.filter(
        BlogPost.status == "draft",
        BlogPost.published_at.isnot(None),
        BlogPost.published_at <= now,
    ).all()
    for post in posts:
        post.status = "published"
    return {"posts_published": len(posts)}


ACTION_HANDLERS = {
    "noop": _noop,
    "refresh_content": _refresh_content,
    "recalculate_review_stats": _recalculate_review_stats,
    "data_quality_check": _data_quality_check,
    "publish_scheduled_posts": _publish_scheduled_posts,
}


def run_actions(workflow, context):
    """Execute each action of ``workflow`` and collect their outputs."""
    results = []
    for index, action in enumerate(workflow.actions or []):
        action_type = (action or {}).get("type")
        handler = ACTION_HANDLERS.get(action_type)
        if handler is None:
            raise WorkflowExecutionError(
                f"Unknown action type at step {index}: {action_type}"
            )
        output = handler(action, context)
        results.append({"type": action_type, "output": output})
    return results


def execute_workflow(workflow, triggered_by="manual", metadata=None, user_id=None):
    """
    Execute ``workflow`` and record a :class:`WorkflowRun`.

    Counters on the workflow (``run_count``, ``success_count``,
    ``error_count``, ``last_run``) are updated either way.

    Returns:
        WorkflowRun: the finished run (``completed`` or ``failed``).
    """
    metadata = metadata or {}
    run = WorkflowRun.start(
        workflow, triggered_by=triggered_by, run_metadata=metadata
    )
    started = time.monotonic()
    logger.info(
        "Executing workflow.",
        workflow_id=workflow.id,
        run_id=run.id,
        triggered_by=triggered_by,
    )

    try:
        action_results = run_actions(
            workflow, {"user_id": user_id, "metadata": metadata}
        )
        result = {
            "executed_at": datetime.now(timezone.utc).isoformat(),
            "steps_completed": len((workflow.config or {}).get("steps", [])),
            "actions_executed": len(action_results),
            "conditions_met": len(workflow.conditions or []),
            "action_results": action_results,
            "metadata": metadata,
        }
        run.status = "completed"
        run.result = result
        workflow.success_count = (workflow.success_count or 0) + 1
    except (WorkflowExecutionError, SQLAlchemyError) as e:
        db.session.rollback()
        logger.error(
            "Workflow execution failed.",
            workflow_id=workflow.id,
            run_id=run.id,
            error=str(e),
        )
        run.status = "failed"
        run.error_message = str(e)
        workflow.error_count = (workflow.error_count or 0) + 1

    finished_at = datetime.now(timezone.utc)
    run.completed_at = finished_at
    run.duration_ms = int((time.monotonic() - started) * 1000)
    workflow.run_count = (workflow.run_count or 0) + 1
    workflow.last_run = finished_at
    db.session.commit()
    return run
