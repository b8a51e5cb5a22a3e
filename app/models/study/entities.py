"""Study domain entities - the records the view cache and analysis metadata hang off."""

import re
from dataclasses import dataclass, field

from app.models.common import BaseEntity


class FileType:
    """Study file types as labelled on upload."""

    CLUSTER = "Cluster"
    EXPRESSION = "Expression Matrix"
    METADATA = "Metadata"
    GENE_LIST = "Gene List"
    FASTQ = "Fastq"
    BAM = "BAM"
    DOCUMENTATION = "Documentation"
    OTHER = "Other"


def url_safe(name: str) -> str:
    """Lowercase name with every non-alphanumeric run collapsed to '-'."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


@dataclass
class Study(BaseEntity):
    """A single-cell study backed by a FireCloud workspace."""

    name: str
    firecloud_project: str
    firecloud_workspace: str
    clusters: list[str] = field(default_factory=list)
    annotations: list[str] = field(default_factory=list)
    genes: list[str] = field(default_factory=list)

    @property
    def url_safe_name(self) -> str:
        return url_safe(self.name)

    @property
    def workspace_url(self) -> str:
        return f"https://portal.firecloud.org/#workspaces/{self.firecloud_project}/{self.firecloud_workspace}"

    @property
    def cache_removal_key(self):
        from app.services.cache.keys import removal_key_for_study

        return removal_key_for_study(self)


@dataclass
class StudyFile(BaseEntity):
    """An uploaded study file.

    For cluster files ``name`` is the cluster name; for gene lists it is the
    name of the precomputed marker list.
    """

    study: Study
    file_type: str
    name: str

    @property
    def cache_removal_key(self):
        from app.services.cache.keys import removal_key_for_file

        return removal_key_for_file(self)
