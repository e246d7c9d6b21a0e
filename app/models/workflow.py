"""
workflow.py
-----------

Admin-defined automation workflows and their execution history.
"""

import uuid
from datetime import datetime, timezone

from app.models.db import db

WORKFLOW_STATUSES = ("draft", "active", "paused", "archived")


def _now():
    return datetime.now(timezone.utc)


class Workflow(db.Model):
    """
    Data model for an automation workflow.

    Attributes:
        id (str): UUID identifier.
        name (str): Display name.
        type (str): Free-form workflow type (``content``, ``maintenance``...).
        status (str): Lifecycle status.
        is_active (bool): Only active workflows can be executed.
        actions (list): Ordered list of ``{"type": ..., ...}`` action dicts.
        run_count / success_count / error_count (int): Execution counters.
        last_run (datetime): Completion time of the latest run.
    """

    __tablename__ = "workflows"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    type = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="draft")
    is_active = db.Column(db.Boolean, nullable=False, default=False)
    config = db.Column(db.JSON, default=dict)
    triggers = db.Column(db.JSON, default=list)
    actions = db.Column(db.JSON, default=list)
    conditions = db.Column(db.JSON, default=list)
    schedule = db.Column(db.JSON, nullable=True)
    run_count = db.Column(db.Integer, nullable=False, default=0)
    success_count = db.Column(db.Integer, nullable=False, default=0)
    error_count = db.Column(db.Integer, nullable=False, default=0)
    last_run = db.Column(db.DateTime, nullable=True)
    created_by = db.Column(db.String(36), nullable=True)
    created_at = db.Column(db.DateTime, default=_now, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=_now, onupdate=_now, nullable=False
    )

    runs = db.relationship(
        "WorkflowRun",
        back_populates="workflow",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('draft', 'active', 'paused', 'archived')",
            name="check_workflow_status",
        ),
        db.Index("idx_workflows_status", "status"),
        db.Index("idx_workflows_type", "type"),
    )

    def __repr__(self):
        return f"<Workflow {self.name} (ID: {self.id}, {self.status})>"

    @classmethod
    def get_by_id(cls, workflow_id):
        return db.session.get(cls, workflow_id)

    @classmethod
    def create(cls, **fields):
        workflow = cls(**fields)
        db.session.add(workflow)
        db.session.commit()
        return workflow

    def update(self, **kwargs):
        for key, value in kwargs.items():
            if hasattr(self, key) and key not in ("id", "created_at"):
                setattr(self, key, value)
        self.updated_at = _now()
        db.session.commit()

    def delete(self):
        db.session.delete(self)
        db.session.commit()


class WorkflowRun(db.Model):
    """One execution of a workflow."""

    __tablename__ = "workflow_runs"

    id = db.Column(
        db.String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    workflow_id = db.Column(
        db.String(36),
        db.ForeignKey("workflows.id", ondelete="CASCADE"),
        nullable=False,
    )
    status = db.Column(db.String(20), nullable=False, default="running")
    triggered_by = db.Column(db.String(100), nullable=False, default="manual")
    # "metadata" is reserved on declarative models
    run_metadata = db.Column("metadata", db.JSON, default=dict)
    result = db.Column(db.JSON, nullable=True)
    error_message = db.Column(db.Text, nullable=True)
    started_at = db.Column(db.DateTime, default=_now, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    duration_ms = db.Column(db.Integer, nullable=True)

    workflow = db.relationship("Workflow", back_populates="runs")

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('running', 'completed', 'failed')",
            name="check_run_status",
        ),
        db.Index("idx_workflow_runs_workflow", "workflow_id", "started_at"),
    )

    def __repr__(self):
        return f"<WorkflowRun {self.id} of {self.workflow_id} ({self.status})>"

    @classmethod
    def start(cls, workflow, triggered_by="manual", run_metadata=None):
        run = cls(
            workflow_id=workflow.id,
            triggered_by=triggered_by,
            run_metadata=run_metadata or {},
            status="running",
        )
        db.session.add(run)
        db.session.commit()
        return run
