"""Workspace API schemas - the envelope fields payload assembly depends on."""

from pydantic import BaseModel, Field


class SubmissionWorkflowSchema(BaseModel):
    """Workflow stub listed on a submission."""

    workflow_id: str | None = Field(alias="workflowId", default=None)
    status: str | None = None

    class Config:
        populate_by_name = True


class SubmissionSchema(BaseModel):
    """Workspace submission."""

    submission_id: str = Field(alias="submissionId")
    submission_date: str | None = Field(alias="submissionDate", default=None)
    method_configuration_namespace: str = Field(alias="methodConfigurationNamespace")
    method_configuration_name: str = Field(alias="methodConfigurationName")
    status: str | None = None
    workflows: list[SubmissionWorkflowSchema] = []

    class Config:
        populate_by_name = True


class MethodRepoMethodSchema(BaseModel):
    """Method repository reference of a configuration."""

    method_namespace: str = Field(alias="methodNamespace")
    method_name: str = Field(alias="methodName")
    method_version: int | str = Field(alias="methodVersion")

    class Config:
        populate_by_name = True

    @property
    def path(self) -> str:
        return f"{self.method_namespace}/{self.method_name}/{self.method_version}"


class MethodConfigurationSchema(BaseModel):
    """Workspace method configuration."""

    name: str
    namespace: str | None = None
    method_repo_method: MethodRepoMethodSchema = Field(alias="methodRepoMethod")
    inputs: dict[str, str] = {}
    outputs: dict[str, str] = {}

    class Config:
        populate_by_name = True
