"""
test_admin_workflows_api.py
---------------------------
Tests for workflow management and execution endpoints.
"""

from app.models.workflow import Workflow, WorkflowRun


def _workflow(**fields):
    values = {
        "name": "Nightly refresh",
        "description": "Refresh listings",
        "type": "maintenance",
        "status": "active",
        "is_active": True,
        "actions": [{"type": "refresh_content", "content_type": "tools"}],
    }
    values.update(fields)
    return Workflow.create(**values)


class TestWorkflowManagement:
    def test_create(self, admin_client, admin):
        response = admin_client.post(
            "/api/admin/workflows",
            json={
                "name": "Publisher",
                "type": "content",
                "isActive": True,
                "actions": [{"type": "publish_scheduled_posts"}],
            },
        )

        assert response.status_code == 201
        workflow = response.get_json()["workflow"]
        assert workflow["status"] == "draft"
        assert workflow["is_active"] is True
        assert workflow["created_by"] == admin.id

    def test_create_requires_name_and_type(self, admin_client):
        response = admin_client.post("/api/admin/workflows", json={"name": "x"})
        assert response.status_code == 400
        assert response.get_json() == {"error": "Name and type are required"}

    def test_list_with_filters(self, admin_client, app):
        _workflow()
        _workflow(name="Paused job", status="paused", type="content")

        everything = admin_client.get("/api/admin/workflows").get_json()
        paused = admin_client.get("/api/admin/workflows?status=paused").get_json()
        searched = admin_client.get("/api/admin/workflows?search=listings").get_json()

        assert everything["pagination"]["total"] == 2
        assert [w["name"] for w in paused["workflows"]] == ["Paused job"]
        assert searched["pagination"]["total"] == 2

    def test_update(self, admin_client, app):
        workflow = _workflow()

        response = admin_client.put(
            "/api/admin/workflows", json={"id": workflow.id, "status": "paused"}
        )

        assert response.status_code == 200
        assert response.get_json()["message"] == "Workflow updated successfully"
        assert workflow.status == "paused"

    def test_update_errors(self, admin_client):
        assert admin_client.put("/api/admin/workflows", json={}).get_json() == {
            "error": "Workflow ID is required"
        }
        assert (
            admin_client.put("/api/admin/workflows", json={"id": "nope"}).status_code
            == 404
        )

    def test_delete(self, admin_client, app):
        workflow = _workflow()
        workflow_id = workflow.id

        response = admin_client.delete(f"/api/admin/workflows?id={workflow_id}")

        assert response.status_code == 200
        assert Workflow.get_by_id(workflow_id) is None
        assert admin_client.delete("/api/admin/workflows").status_code == 400

    def test_requires_admin(self, user_client):
        assert user_client.get("/api/admin/workflows").status_code == 403


class TestWorkflowExecution:
    def test_execute(self, admin_client, app):
        workflow = _workflow()

        response = admin_client.post(
            "/api/admin/workflows/execute",
            json={"workflowId": workflow.id, "metadata": {"reason": "test"}},
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["message"] == "Workflow executed successfully"
        assert data["result"]["actions_executed"] == 1
        assert data["run"]["status"] == "completed"
        assert data["run"]["metadata"] == {"reason": "test"}
        assert workflow.run_count == 1

    def test_failed_run_is_recorded(self, admin_client, app):
        workflow = _workflow(actions=[{"type": "launch_rockets"}])

        response = admin_client.post(
            "/api/admin/workflows/execute", json={"workflowId": workflow.id}
        )

        assert response.status_code == 500
        data = response.get_json()
        assert data["error"] == "Workflow execution failed"
        run = WorkflowRun.query.one()
        assert run.id == data["runId"]
        assert run.status == "failed"

    def test_inactive_workflow(self, admin_client, app):
        workflow = _workflow(is_active=False)
        response = admin_client.post(
            "/api/admin/workflows/execute", json={"workflowId": workflow.id}
        )
        assert response.get_json() == {"error": "Workflow is not active"}

    def test_execute_validation(self, admin_client):
        missing = admin_client.post("/api/admin/workflows/execute", json={})
        unknown = admin_client.post(
            "/api/admin/workflows/execute", json={"workflowId": "nope"}
        )
        assert missing.get_json() == {"error": "Workflow ID is required"}
        assert unknown.status_code == 404

    def test_run_history(self, admin_client, app):
        workflow = _workflow()
        for _ in range(3):
            admin_client.post(
                "/api/admin/workflows/execute", json={"workflowId": workflow.id}
            )

        data = admin_client.get(
            f"/api/admin/workflows/execute?workflowId={workflow.id}&limit=2"
        ).get_json()

        assert len(data["runs"]) == 2
        assert data["pagination"]["total"] == 3
        assert admin_client.get("/api/admin/workflows/execute").status_code == 400
