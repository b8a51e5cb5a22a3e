"""Cache key registry - deterministic keys for derived view/query artifacts.

Keys follow the portal's view path layout, e.g.::

    views/localhost/single_cell/study/<study>/render_cluster_<cluster>_<annotation>.js
    views/localhost/single_cell/study/<study>/expression_query_<cluster>_<annotation>__<genes_hash>.js

Variable parts are escaped so '_' only ever appears as a separator. Multi-gene
keys carry a SHA-256 digest of the sorted, de-duplicated gene names joined by
spaces, so the same gene set in any order resolves to one key. Neither rule is
byte-compatible with keys written by the Rails portal.
"""

import hashlib

from pydantic import BaseModel, Field

from app.models.common import Action, CacheKey, CacheRemovalKey
from app.models.study import FileType, Study, StudyFile

KEY_PREFIX = "views"
KEY_SUFFIX = ".js"


class ViewParams(BaseModel):
    """Request parameters that define one cacheable view."""

    cluster: str
    annotation: str  # "name--type--scope", treated as opaque
    gene: str | None = None
    genes: list[str] = Field(default_factory=list)
    gene_set: str | None = None


def collapse(name: str) -> str:
    """Collapse whitespace runs into '-' ("tSNE  plot 1" -> "tSNE-plot-1")."""
    return "-".join(name.split())


def escape(part: str) -> str:
    """Percent-escape '%' and '_' so a key part never contains the separator."""
    return part.replace("%", "%25").replace("_", "%5F")


def genes_hash(genes: list[str]) -> str:
    """Order-independent digest of a gene list."""
    unique = sorted(set(genes))
    return hashlib.sha256(" ".join(unique).encode("utf-8")).hexdigest()


def _gene_token(action: str, params: ViewParams) -> tuple[str, str | None]:
    """Tail token for multi-gene views and the gene set it names, if any."""
    if params.gene_set:
        gene_set = collapse(params.gene_set)
        return escape(gene_set), gene_set
    if not params.genes:
        raise ValueError(f"{action} requires genes or a gene_set")
    return genes_hash(params.genes), None


def compute_key(view_namespace: str, study_id: str, action: str, params: ViewParams) -> CacheKey:
    """Build the cache key for one view request."""
    cluster = collapse(params.cluster)
    annotation = params.annotation
    gene_set = None
    c, a = escape(cluster), escape(annotation)

    if action == Action.RENDER_CLUSTER:
        body = f"render_cluster_{c}_{a}"
    elif action == Action.GENE_EXPRESSION:
        if not params.gene:
            raise ValueError(f"{action} requires a gene")
        body = f"render_gene_expression_plots/{escape(params.gene)}_{c}_{a}"
    elif action == Action.GENE_SET_EXPRESSION:
        token, gene_set = _gene_token(action, params)
        body = f"render_gene_set_expression_plots_{c}_{a}_{token}"
    elif action == Action.EXPRESSION_QUERY:
        token, gene_set = _gene_token(action, params)
        body = f"expression_query_{c}_{a}__{token}"
    elif action == Action.ANNOTATION_QUERY:
        body = f"annotation_query_{c}_{a}"
    else:
        raise ValueError(f"Unknown cacheable action: {action}")

    return CacheKey(
        value=f"{KEY_PREFIX}/{view_namespace}/{study_id}/{body}{KEY_SUFFIX}",
        study=study_id,
        action=action,
        cluster=cluster,
        annotation=annotation,
        gene_set=gene_set,
    )


def removal_key_for_study(study: Study) -> CacheRemovalKey:
    """Scope covering every cached entry of a study."""
    return CacheRemovalKey(study=study.url_safe_name)


def removal_key_for_file(file: StudyFile) -> CacheRemovalKey | None:
    """Scope of entries derived from one study file, None if nothing depends on it."""
    study = file.study.url_safe_name

    if file.file_type == FileType.CLUSTER:
        return CacheRemovalKey(study=study, cluster=collapse(file.name))
    if file.file_type == FileType.EXPRESSION:
        return CacheRemovalKey(study=study, actions=Action.EXPRESSION)
    if file.file_type == FileType.GENE_LIST:
        return CacheRemovalKey(study=study, actions=Action.MULTI_GENE, gene_set=collapse(file.name))
    if file.file_type == FileType.METADATA:
        # annotations appear in every view
        return CacheRemovalKey(study=study)
    return None
