"""
Tests for workflow execution.
"""

from datetime import datetime, timedelta, timezone

from app.models.content import BlogPost, ContentCache
from app.models.workflow import Workflow
from app.services.workflow_engine import ACTION_HANDLERS, execute_workflow
from tests.conftest import make_review


def _workflow(actions, **fields):
    values = {
        "name": "Maintenance",
        "type": "maintenance",
        "status": "active",
        "is_active": True,
        "actions": actions,
        "config": {"steps": ["a", "b"]},
        "conditions": [{"field": "status"}],
    }
    values.update(fields)
    return Workflow.create(**values)


def test_known_handlers():
    assert set(ACTION_HANDLERS) == {
        "noop",
        "refresh_content",
        "recalculate_review_stats",
        "data_quality_check",
        "publish_scheduled_posts",
    }


def test_successful_run(app, admin):
    workflow = _workflow(
        [{"type": "noop"}, {"type": "refresh_content", "content_type": "blog"}]
    )

    run = execute_workflow(
        workflow, triggered_by="manual", metadata={"why": "test"}, user_id=admin.id
    )

    assert run.status == "completed"
    assert run.completed_at is not None
    assert run.duration_ms >= 0
    assert run.run_metadata == {"why": "test"}
    assert run.result["actions_executed"] == 2
    assert run.result["steps_completed"] == 2
    assert run.result["conditions_met"] == 1
    assert run.result["action_results"][1]["output"] == {"content_type": "blog"}
    assert workflow.run_count == 1
    assert workflow.success_count == 1
    assert workflow.error_count == 0
    assert workflow.last_run is not None
    assert ContentCache.query.filter_by(content_type="blog").count() == 1


def test_unknown_action_fails_run(app):
    workflow = _workflow(
        [{"type": "refresh_content", "content_type": "tools"}, {"type": "explode"}]
    )

    run = execute_workflow(workflow)

    assert run.status == "failed"
    assert "explode" in run.error_message
    assert workflow.error_count == 1
    assert workflow.run_count == 1
    assert ContentCache.query.count() == 0


def test_recalculate_review_stats(app, tool):
    make_review(tool, rating=4)
    tool.update(rating=1.0, review_count=0)

    run = execute_workflow(_workflow([{"type": "recalculate_review_stats"}]))

    assert run.status == "completed"
    assert tool.rating == 4.0
    assert tool.review_count == 1


def test_data_quality_check(app, tool):
    run = execute_workflow(_workflow([{"type": "data_quality_check"}]))

    output = run.result["action_results"][0]["output"]
    assert output["tools_checked"] == 1
    assert "reports" not in output


def test_publish_scheduled_posts(app):
    due = BlogPost.create(
        title="Due post",
        content="body",
        status="draft",
        published_at=datetime.now(timezone.utc) - timedelta(hours=1),
    )
    later = BlogPost.create(
        title="Later post",
        content="body",
        status="draft",
        published_at=datetime.now(timezone.utc) + timedelta(days=3),
    )

    run = execute_workflow(_workflow([{"type": "publish_scheduled_posts"}]))

    assert run.result["action_results"][0]["output"] == {"posts_published": 1}
    assert due.status == "published"
    assert later.status == "draft"
