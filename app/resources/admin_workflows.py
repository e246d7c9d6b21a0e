"""
admin_workflows.py
------------------

Admin management and execution of automation workflows.

Reads go through the admin rate limiter; every mutation (create, update,
delete, execute) goes through the stricter sensitive-operation limiter.
"""

from flask import g, request
from flask_restful import Resource
from marshmallow import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from app.logger import logger
from app.models.workflow import Workflow, WorkflowRun
from app.resources.base import BaseCatalogResource
from app.schemas.workflow_schema import (
    WorkflowExecuteSchema,
    WorkflowRunSchema,
    WorkflowSchema,
    WorkflowWriteSchema,
)
from app.services.audit import audit_logger
from app.services.rate_limit import admin_limiter, rate_limited, sensitive_limiter
from app.services.workflow_engine import execute_workflow
from app.utils import keys_to_snake, parse_int_arg, require_admin

workflow_schema = WorkflowSchema()
workflows_schema = WorkflowSchema(many=True)
workflow_write_schema = WorkflowWriteSchema()
workflow_execute_schema = WorkflowExecuteSchema()
workflow_run_schema = WorkflowRunSchema()
workflow_runs_schema = WorkflowRunSchema(many=True)


class AdminWorkflowsResource(Resource, BaseCatalogResource):
    """GET/POST/PUT/DELETE /api/admin/workflows"""

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        """
        Paginated workflows, newest first.

        Query parameters: ``status``, ``type`` (``all`` disables either),
        ``search`` (name or description), ``page`` and ``limit``.
        """
        page = parse_int_arg("page", 1, minimum=1)
        limit = parse_int_arg("limit", 20, minimum=1, maximum=100)
        query = Workflow.query

        status = request.args.get("status")
        if status and status != "all":
            query = query.filter(Workflow.status == status)
        workflow_type = request.args.get("type")
        if workflow_type and workflow_type != "all":
            query = query.filter(Workflow.type == workflow_type)
        search = (request.args.get("search") or "").strip()
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Workflow.name.ilike(pattern), Workflow.description.ilike(pattern))
            )

        workflows, pagination = self._paginate(
            query.order_by(Workflow.created_at.desc()), page, limit
        )
        return {
            "workflows": workflows_schema.dump(workflows),
            "pagination": pagination,
        }, 200

    @rate_limited(sensitive_limiter)
    @require_admin()
    def post(self):
        try:
            data = workflow_write_schema.load(keys_to_snake(self._payload()))
        except ValidationError as err:
            if "name" in err.messages or "type" in err.messages:
                return {"error": "Name and type are required"}, 400
            return self._validation_error(err)

        data.setdefault("status", "draft")
        try:
            workflow = Workflow.create(created_by=g.user_id, **data)
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to create workflow")

        audit_logger.log_crud("CREATE", "WORKFLOW", workflow.id, {"name": workflow.name})
        return {
            "message": "Workflow created successfully",
            "workflow": workflow_schema.dump(workflow),
        }, 201

    @rate_limited(sensitive_limiter)
    @require_admin()
    def put(self):
        payload = keys_to_snake(self._payload())
        workflow_id = payload.pop("id", None)
        if not workflow_id:
            return {"error": "Workflow ID is required"}, 400
        workflow = Workflow.get_by_id(workflow_id)
        if workflow is None:
            return {"error": "Workflow not found"}, 404
        try:
            updates = workflow_write_schema.load(payload, partial=True)
        except ValidationError as err:
            return self._validation_error(err)

        try:
            workflow.update(**updates)
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to update workflow")

        audit_logger.log_crud("UPDATE", "WORKFLOW", workflow.id, {"fields": sorted(updates)})
        return {
            "message": "Workflow updated successfully",
            "workflow": workflow_schema.dump(workflow),
        }, 200

    @rate_limited(sensitive_limiter)
    @require_admin()
    def delete(self):
        workflow_id = request.args.get("id")
        if not workflow_id:
            return {"error": "Workflow ID is required"}, 400
        workflow = Workflow.get_by_id(workflow_id)
        if workflow is None:
            return {"error": "Workflow not found"}, 404
        try:
            workflow.delete()
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to delete workflow")

        audit_logger.log_crud("DELETE", "WORKFLOW", workflow_id)
        return {"message": "Workflow deleted successfully"}, 200


class AdminWorkflowExecuteResource(Resource, BaseCatalogResource):
    """POST/GET /api/admin/workflows/execute"""

    @rate_limited(sensitive_limiter)
    @require_admin()
    def post(self):
        """
        Run a workflow now.

        Returns:
            200: ``{"message", "runId", "result", "run"}``
            400: Missing workflowId or workflow inactive
            404: Unknown workflow
            500: An action failed (the failed run is still recorded)
        """
        try:
            data = workflow_execute_schema.load(self._payload())
        except ValidationError as err:
            if "workflowId" in err.messages:
                return {"error": "Workflow ID is required"}, 400
            return self._validation_error(err)

        workflow = Workflow.get_by_id(data["workflow_id"])
        if workflow is None:
            return {"error": "Workflow not found"}, 404
        if not workflow.is_active:
            return {"error": "Workflow is not active"}, 400

        try:
            run = execute_workflow(
                workflow,
                triggered_by=data["triggered_by"],
                metadata=data["run_metadata"],
                user_id=g.user_id,
            )
        except SQLAlchemyError as e:
            return self._database_error(e, "Failed to start workflow execution")

        audit_logger.log_action(
            "EXECUTE", "WORKFLOW", resource_id=workflow.id,
            details={"run_id": run.id, "status": run.status},
        )
        if run.status == "failed":
            return {
                "error": "Workflow execution failed",
                "details": run.error_message,
                "runId": run.id,
            }, 500

        logger.info("Workflow executed.", workflow_id=workflow.id, run_id=run.id)
        return {
            "message": "Workflow executed successfully",
            "runId": run.id,
            "result": run.result,
            "run": workflow_run_schema.dump(run),
        }, 200

    @rate_limited(admin_limiter)
    @require_admin()
    def get(self):
        workflow_id = request.args.get("workflowId")
        if not workflow_id:
            return {"error": "Workflow ID is required"}, 400
        page = parse_int_arg("page", 1, minimum=1)
        limit = parse_int_arg("limit", 20, minimum=1, maximum=100)

        query = WorkflowRun.query.filter_by(workflow_id=workflow_id).order_by(
            WorkflowRun.started_at.desc()
        )
        runs, pagination = self._paginate(query, page, limit)
        return {"runs": workflow_runs_schema.dump(runs), "pagination": pagination}, 200
