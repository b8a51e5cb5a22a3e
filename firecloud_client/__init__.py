"""FireCloud API client package."""

from firecloud_client.base import BaseClient, safe_request, set_api_config
from firecloud_client.workspaces import WorkspaceClient

__all__ = [
    # Base
    "BaseClient",
    "safe_request",
    "set_api_config",
    # Clients
    "WorkspaceClient",
]
