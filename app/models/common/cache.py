"""View cache table and key types - derived per-study artifacts.

The structured columns (study, action, cluster, gene_set) act as the reverse
index used for scoped invalidation; the full key string stays the primary key.
"""

from dataclasses import dataclass

VIEW_CACHE_DDL = """
CREATE TABLE IF NOT EXISTS view_cache (
    key VARCHAR PRIMARY KEY,
    study VARCHAR NOT NULL,
    action VARCHAR NOT NULL,
    cluster VARCHAR,
    annotation VARCHAR,
    gene_set VARCHAR,
    value BLOB NOT NULL,
    created_at TIMESTAMP NOT NULL
)
"""

VIEW_CACHE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_view_cache_study ON view_cache(study)",
]


class Action:
    """Cacheable view/query actions."""

    RENDER_CLUSTER = "render_cluster"
    GENE_EXPRESSION = "render_gene_expression_plots"
    GENE_SET_EXPRESSION = "render_gene_set_expression_plots"
    EXPRESSION_QUERY = "expression_query"
    ANNOTATION_QUERY = "annotation_query"

    ALL = (RENDER_CLUSTER, GENE_EXPRESSION, GENE_SET_EXPRESSION, EXPRESSION_QUERY, ANNOTATION_QUERY)
    # views computed from the expression matrix
    EXPRESSION = (GENE_EXPRESSION, GENE_SET_EXPRESSION, EXPRESSION_QUERY)
    # views that accept a gene list or a precomputed gene set
    MULTI_GENE = (GENE_SET_EXPRESSION, EXPRESSION_QUERY)


@dataclass(frozen=True)
class CacheKey:
    """A rendered cache key plus the parts it was built from."""

    value: str
    study: str
    action: str
    cluster: str | None = None
    annotation: str | None = None
    gene_set: str | None = None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CacheRemovalKey:
    """Invalidation scope: a study, optionally narrowed by action, cluster or gene set."""

    study: str
    actions: tuple[str, ...] | None = None
    cluster: str | None = None
    gene_set: str | None = None

    @property
    def study_wide(self) -> bool:
        return self.actions is None and self.cluster is None and self.gene_set is None

    def matches(self, key: CacheKey) -> bool:
        """True if ``key`` falls inside this scope."""
        if key.study != self.study:
            return False
        if self.actions is not None and key.action not in self.actions:
            return False
        if self.cluster is not None and key.cluster != self.cluster:
            return False
        if self.gene_set is not None and key.gene_set != self.gene_set:
            return False
        return True

    def __str__(self) -> str:
        parts = [self.study]
        if self.actions:
            parts.append("|".join(self.actions))
        if self.cluster:
            parts.append(f"cluster={self.cluster}")
        if self.gene_set:
            parts.append(f"gene_set={self.gene_set}")
        return ":".join(parts)
