"""Workspace API client - submissions, method configurations, workflows."""

from firecloud_client.base import BaseClient


class WorkspaceClient(BaseClient):
    """Client for FireCloud workspace endpoints."""

    async def get_submission(self, project: str, workspace: str, submission_id: str) -> dict:
        """GET /api/workspaces/{project}/{workspace}/submissions/{id}."""
        return await self._get(f"workspaces/{project}/{workspace}/submissions/{submission_id}")

    async def get_configuration(self, project: str, workspace: str, namespace: str, name: str) -> dict:
        """GET /api/workspaces/{project}/{workspace}/method_configs/{namespace}/{name}."""
        return await self._get(f"workspaces/{project}/{workspace}/method_configs/{namespace}/{name}")

    async def get_submission_workflow(
        self, project: str, workspace: str, submission_id: str, workflow_id: str
    ) -> dict:
        """GET /api/workspaces/{project}/{workspace}/submissions/{sid}/workflows/{wid} - call-level metadata."""
        return await self._get(f"workspaces/{project}/{workspace}/submissions/{submission_id}/workflows/{workflow_id}")
