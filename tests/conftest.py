"""Shared fixtures - in-memory duckdb and a fake FireCloud workspace client."""

import copy

import pytest

from app.models.study import Study
from app.repositories import AnalysisMetadataRepository, ViewCacheRepository, connect

SUBMISSION = {
    "submissionId": "sub-1",
    "submissionDate": "2017-09-01T12:00:00.000Z",
    "methodConfigurationNamespace": "single-cell-portal",
    "methodConfigurationName": "cellranger-count",
    "status": "Done",
    "workflows": [
        {"workflowId": "wf-1", "status": "Succeeded"},
        {"workflowId": "wf-2", "status": "Succeeded"},
    ],
}

CONFIGURATION = {
    "name": "cellranger-count",
    "namespace": "single-cell-portal",
    "methodRepoMethod": {
        "methodNamespace": "single-cell-portal",
        "methodName": "cellranger",
        "methodVersion": 3,
    },
    "inputs": {
        "cellranger.sampleId": '"sample1"',
        "cellranger.transcriptome": '"gs://reference-bucket/GRCh38/transcriptome.tar.gz"',
        "cellranger.fastqs": "this.fastqs",
    },
    "outputs": {"cellranger.matrix": "this.matrix"},
}


def _call(cpu: str, start: str, end: str, name: str) -> list[dict]:
    return [
        {
            "runtimeAttributes": {
                "cpu": cpu,
                "disks": "local-disk 500 HDD",
                "docker": "gcr.io/broad/cellranger:2.1.1",
                "memory": "64 GB",
                "zones": "us-central1-b us-central1-c",
            },
            "stderr": f"gs://workspace-bucket/sub-1/{name}/stderr",
            "stdout": f"gs://workspace-bucket/sub-1/{name}/stdout",
            "start": start,
            "end": end,
        }
    ]


WORKFLOWS = {
    "wf-1": {
        "id": "wf-1",
        "start": "2017-09-01T12:05:00.000Z",
        "end": "2017-09-01T14:00:00.000Z",
        "inputs": {"cellranger.sampleId": "sample1", "cellranger.expectCells": 3000},
        "outputs": {
            "cellranger.matrix": "gs://workspace-bucket/sub-1/wf-1/call-count/matrix.mtx",
            "cellranger.bams": [
                "gs://workspace-bucket/sub-1/wf-1/call-count/shard-0/possorted.bam",
                "gs://workspace-bucket/sub-1/wf-1/call-count/shard-1/possorted.bam",
            ],
        },
        "calls": {
            "cellranger.mkfastq": _call("4", "2017-09-01T12:05:00.000Z", "2017-09-01T12:45:00.000Z", "mkfastq"),
            "cellranger.count": _call("16", "2017-09-01T12:46:00.000Z", "2017-09-01T14:00:00.000Z", "count"),
        },
    },
    "wf-2": {
        "id": "wf-2",
        "start": "2017-09-01T12:06:00.000Z",
        "end": "2017-09-01T15:30:00.000Z",
        "inputs": {"cellranger.sampleId": "sample2"},
        "outputs": {"cellranger.matrix": "gs://workspace-bucket/sub-1/wf-2/call-count/matrix.mtx"},
        "calls": {
            "cellranger.count": _call("16", "2017-09-01T12:06:00.000Z", "2017-09-01T15:30:00.000Z", "count"),
        },
    },
}


class FakeWorkspaceClient:
    """Serves canned FireCloud records; ids listed in ``failing`` raise."""

    api_root = "https://api.firecloud.org"

    def __init__(self, submission=None, configuration=None, workflows=None, failing=()):
        self.submission = copy.deepcopy(SUBMISSION if submission is None else submission)
        self.configuration = copy.deepcopy(CONFIGURATION if configuration is None else configuration)
        self.workflows = copy.deepcopy(WORKFLOWS if workflows is None else workflows)
        self.failing = set(failing)
        self.requests: list[tuple] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *_):
        return None

    async def get_submission(self, project, workspace, submission_id):
        self.requests.append(("submission", project, workspace, submission_id))
        if "submission" in self.failing:
            raise RuntimeError("500 Internal Server Error")
        return self.submission

    async def get_configuration(self, project, workspace, namespace, name):
        self.requests.append(("configuration", project, workspace, namespace, name))
        if "configuration" in self.failing:
            raise RuntimeError("404 Not Found")
        return self.configuration

    async def get_submission_workflow(self, project, workspace, submission_id, workflow_id):
        self.requests.append(("workflow", project, workspace, submission_id, workflow_id))
        if workflow_id in self.failing:
            raise RuntimeError(f"workflow {workflow_id} unavailable")
        return self.workflows[workflow_id]


@pytest.fixture
def conn():
    connection = connect(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def cache_repo(conn):
    return ViewCacheRepository(read_only=False, conn=conn)


@pytest.fixture
def analysis_repo(conn):
    return AnalysisMetadataRepository(read_only=False, conn=conn)


@pytest.fixture
def study():
    return Study(
        name="Test Study",
        firecloud_project="scp-project",
        firecloud_workspace="test-study-workspace",
        clusters=["Cluster 1", "Cluster 2"],
        annotations=["Category--group--cluster"],
        genes=["Sox2", "Gad1", "Pax6"],
    )


@pytest.fixture
def fake_client():
    return FakeWorkspaceClient()


@pytest.fixture
def make_client():
    return FakeWorkspaceClient
