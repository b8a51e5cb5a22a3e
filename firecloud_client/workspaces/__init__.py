"""Workspace API client."""

from firecloud_client.workspaces.client import WorkspaceClient
from firecloud_client.workspaces.schemas import (
    MethodConfigurationSchema,
    MethodRepoMethodSchema,
    SubmissionSchema,
    SubmissionWorkflowSchema,
)

__all__ = [
    "WorkspaceClient",
    "SubmissionSchema",
    "SubmissionWorkflowSchema",
    "MethodConfigurationSchema",
    "MethodRepoMethodSchema",
]
