"""Tests for the view cache store and scoped invalidation."""

import pytest

from app.models.common import Action
from app.models.study import FileType, Study, StudyFile
from app.repositories import ViewCacheRepository
from app.services.cache.invalidator import CacheInvalidator
from app.services.cache.keys import ViewParams, compute_key, removal_key_for_file, removal_key_for_study

NS = "localhost/single_cell/study"
ANNOTATION = "Category--group--cluster"
GENES = ["Sox2", "Gad1", "Pax6"]


def _keys_for(study: Study, cluster: str) -> dict:
    """One key per cacheable action for a cluster."""
    sid = study.url_safe_name
    return {
        Action.RENDER_CLUSTER: compute_key(NS, sid, Action.RENDER_CLUSTER, ViewParams(cluster=cluster, annotation=ANNOTATION)),
        Action.GENE_EXPRESSION: compute_key(
            NS, sid, Action.GENE_EXPRESSION, ViewParams(cluster=cluster, annotation=ANNOTATION, gene="Sox2")
        ),
        Action.GENE_SET_EXPRESSION: compute_key(
            NS, sid, Action.GENE_SET_EXPRESSION, ViewParams(cluster=cluster, annotation=ANNOTATION, genes=GENES)
        ),
        Action.EXPRESSION_QUERY: compute_key(
            NS, sid, Action.EXPRESSION_QUERY, ViewParams(cluster=cluster, annotation=ANNOTATION, genes=GENES)
        ),
        Action.ANNOTATION_QUERY: compute_key(NS, sid, Action.ANNOTATION_QUERY, ViewParams(cluster=cluster, annotation=ANNOTATION)),
    }


@pytest.fixture
def other_study():
    return Study(name="Other Study", firecloud_project="p", firecloud_workspace="w2")


@pytest.fixture
def populated(cache_repo, study, other_study):
    keys = {
        "C1": _keys_for(study, "Cluster 1"),
        "C2": _keys_for(study, "Cluster 2"),
        "other": _keys_for(other_study, "Cluster 1"),
    }
    for group in keys.values():
        for key in group.values():
            cache_repo.write(key, f"$('#plot').html('{key.action}');".encode())
    return keys


@pytest.fixture
def invalidator(cache_repo):
    return CacheInvalidator(cache_repo)


class TestStore:
    def test_read_write(self, cache_repo, study):
        key = _keys_for(study, "Cluster 1")[Action.RENDER_CLUSTER]
        assert cache_repo.read(key) is None
        cache_repo.write(key, b"artifact")
        assert cache_repo.read(key) == b"artifact"
        assert cache_repo.exists(key.value)

    def test_overwrite(self, cache_repo, study):
        key = _keys_for(study, "Cluster 1")[Action.RENDER_CLUSTER]
        cache_repo.write(key, b"old")
        cache_repo.write(key, b"new")
        assert cache_repo.read(key) == b"new"
        assert cache_repo.count() == 1

    def test_delete_absent_is_noop(self, cache_repo):
        assert cache_repo.delete("views/nothing/here.js") is False

    def test_read_only_repo_refuses_writes(self, conn, study):
        repo = ViewCacheRepository(read_only=True, conn=conn)
        with pytest.raises(RuntimeError):
            repo.write(_keys_for(study, "Cluster 1")[Action.RENDER_CLUSTER], b"x")


class TestInvalidate:
    def test_cluster_file_removes_only_that_cluster(self, populated, invalidator, cache_repo, study):
        file = StudyFile(study=study, file_type=FileType.CLUSTER, name="Cluster 1")
        removed = invalidator.invalidate(removal_key_for_file(file))

        assert removed == 5
        assert not any(cache_repo.exists(k) for k in populated["C1"].values())
        assert all(cache_repo.exists(k) for k in populated["C2"].values())
        assert all(cache_repo.exists(k) for k in populated["other"].values())

    def test_expression_file_removes_expression_views(self, populated, invalidator, cache_repo, study):
        file = StudyFile(study=study, file_type=FileType.EXPRESSION, name="expression_matrix.txt")
        removed = invalidator.invalidate(removal_key_for_file(file))

        assert removed == 6
        for cluster in ("C1", "C2"):
            keys = populated[cluster]
            for action in Action.EXPRESSION:
                assert not cache_repo.exists(keys[action])
            assert cache_repo.exists(keys[Action.RENDER_CLUSTER])
            assert cache_repo.exists(keys[Action.ANNOTATION_QUERY])
        assert cache_repo.count("other-study") == 5

    def test_study_key_removes_everything_for_study(self, populated, invalidator, cache_repo, study):
        removed = invalidator.invalidate(removal_key_for_study(study))

        assert removed == 10
        assert cache_repo.count("test-study") == 0
        assert cache_repo.count("other-study") == 5

    def test_gene_list_file(self, cache_repo, invalidator, study):
        sid = study.url_safe_name
        named = compute_key(NS, sid, Action.GENE_SET_EXPRESSION, ViewParams(cluster="Cluster 1", annotation=ANNOTATION, gene_set="Marker Genes"))
        hashed = compute_key(NS, sid, Action.GENE_SET_EXPRESSION, ViewParams(cluster="Cluster 1", annotation=ANNOTATION, genes=GENES))
        cache_repo.write(named, b"named")
        cache_repo.write(hashed, b"hashed")

        file = StudyFile(study=study, file_type=FileType.GENE_LIST, name="Marker Genes")
        assert invalidator.invalidate(removal_key_for_file(file)) == 1
        assert not cache_repo.exists(named)
        assert cache_repo.exists(hashed)

    def test_idempotent(self, populated, invalidator, study):
        removal_key = removal_key_for_study(study)
        assert invalidator.invalidate(removal_key) == 10
        assert invalidator.invalidate(removal_key) == 0

    def test_preview_matches_scope(self, populated, invalidator, study):
        removal_key = StudyFile(study=study, file_type=FileType.CLUSTER, name="Cluster 2").cache_removal_key
        preview = invalidator.preview(removal_key)
        assert preview == sorted(k.value for k in populated["C2"].values())
        assert all(removal_key.matches(k) for k in populated["C2"].values())

    def test_index_scope_equals_key_matching(self, populated, invalidator, cache_repo, study):
        every_key = [k for group in populated.values() for k in group.values()]
        for file_type, name in [(FileType.CLUSTER, "Cluster 1"), (FileType.EXPRESSION, "m.txt"), (FileType.METADATA, "meta.txt")]:
            removal_key = removal_key_for_file(StudyFile(study=study, file_type=file_type, name=name))
            expected = sorted(k.value for k in every_key if removal_key.matches(k))
            assert invalidator.preview(removal_key) == expected

    def test_scenario_delete_one_cluster(self, cache_repo, invalidator, study):
        k1 = _keys_for(study, "C1")[Action.RENDER_CLUSTER]
        k2 = _keys_for(study, "C2")[Action.RENDER_CLUSTER]
        cache_repo.write(k1, b"k1")
        cache_repo.write(k2, b"k2")

        invalidator.invalidate(StudyFile(study=study, file_type=FileType.CLUSTER, name="C1").cache_removal_key)

        assert not cache_repo.exists(k1)
        assert cache_repo.exists(k2)

    def test_portal_sequence(self, populated, invalidator, cache_repo, study):
        """Cluster file, then expression matrix, then the whole study."""
        keys = populated["C1"]
        invalidator.invalidate(StudyFile(study=study, file_type=FileType.CLUSTER, name="Cluster 1").cache_removal_key)
        assert not cache_repo.exists(keys[Action.RENDER_CLUSTER])

        invalidator.invalidate(StudyFile(study=study, file_type=FileType.EXPRESSION, name="m.txt").cache_removal_key)
        for action in Action.EXPRESSION:
            assert not cache_repo.exists(keys[action])

        invalidator.invalidate(study.cache_removal_key)
        assert not cache_repo.exists(keys[Action.ANNOTATION_QUERY])
        assert cache_repo.count("test-study") == 0


class TestEventualConsistency:
    def test_write_after_invalidation_survives(self, cache_repo, invalidator, study):
        key = _keys_for(study, "Cluster 1")[Action.RENDER_CLUSTER]
        cache_repo.write(key, b"before")

        invalidator.invalidate(removal_key_for_study(study))
        # a render that started before the file changed lands after the purge
        cache_repo.write(key, b"stale")

        assert cache_repo.read(key) == b"stale"
        assert invalidator.invalidate(removal_key_for_study(study)) == 1
        assert cache_repo.read(key) is None
