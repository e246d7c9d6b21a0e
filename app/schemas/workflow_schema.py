"""
workflow_schema.py
------------------

Schemas for workflows and workflow runs.
"""

from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from app.models.workflow import WORKFLOW_STATUSES, Workflow, WorkflowRun


class WorkflowSchema(SQLAlchemyAutoSchema):
    """Schema for Workflow model."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = Workflow


class WorkflowRunSchema(SQLAlchemyAutoSchema):
    """Schema for WorkflowRun model; ``run_metadata`` is dumped as ``metadata``."""

    class Meta:  # pylint: disable=missing-class-docstring
        model = WorkflowRun
        include_fk = True

    run_metadata = fields.Raw(data_key="metadata", dump_only=True)


class WorkflowWriteSchema(Schema):
    """Fields accepted when creating or updating a workflow."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(allow_none=True)
    type = fields.String(required=True, validate=validate.Length(min=1, max=50))
    status = fields.String(validate=validate.OneOf(WORKFLOW_STATUSES))
    is_active = fields.Boolean()
    config = fields.Dict()
    triggers = fields.List(fields.Dict())
    actions = fields.List(fields.Dict())
    conditions = fields.List(fields.Dict())
    schedule = fields.Dict(allow_none=True)


class WorkflowExecuteSchema(Schema):
    """Payload of ``POST /api/admin/workflows/execute``."""

    class Meta:  # pylint: disable=missing-class-docstring
        unknown = EXCLUDE

    workflow_id = fields.String(required=True, data_key="workflowId")
    triggered_by = fields.String(load_default="manual", data_key="triggeredBy")
    run_metadata = fields.Dict(load_default=dict, data_key="metadata")
