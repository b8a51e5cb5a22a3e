"""View cache repository - rendered artifact storage with a study reverse index."""

from collections.abc import Callable
from datetime import datetime
from functools import wraps

import duckdb
from loguru import logger

from app.errors import CacheStoreUnavailable
from app.models.common import CacheKey, CacheRemovalKey
from app.repositories.base import BaseRepository


def _store_errors(fn: Callable) -> Callable:
    """Translate transient duckdb failures into CacheStoreUnavailable.

    Write conflicts between concurrent transactions are transient too; the
    removal job retries them like an unreachable store.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (duckdb.ConnectionException, duckdb.IOException) as e:
            raise CacheStoreUnavailable(f"Cache store unavailable: {e}") from e
        except duckdb.TransactionException as e:
            raise CacheStoreUnavailable(f"Cache store write conflict: {e}") from e

    return wrapper


class ViewCacheRepository(BaseRepository):
    """Repository for view cache operations."""

    @_store_errors
    def read(self, key: CacheKey | str) -> bytes | None:
        """Load a cached artifact, None on miss."""
        row = self.fetchone("SELECT value FROM view_cache WHERE key = ?", [str(key)])
        if row:
            logger.debug("Cache hit: {}", key)
            return bytes(row[0])
        logger.debug("Cache miss: {}", key)
        return None

    @_store_errors
    def write(self, key: CacheKey, value: bytes) -> None:
        """Store an artifact and its index columns, replacing any previous value."""
        self._check_writable("write cache")
        try:
            # indexed columns cannot be reassigned by an upsert
            self.execute("DELETE FROM view_cache WHERE key = ?", [key.value])
            self.execute(
                """
                INSERT INTO view_cache (key, study, action, cluster, annotation, gene_set, value, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    key.value,
                    key.study,
                    key.action,
                    key.cluster,
                    key.annotation,
                    key.gene_set,
                    value,
                    datetime.utcnow(),
                ],
            )
        except (duckdb.ConstraintException, duckdb.TransactionException):
            logger.debug("Concurrent write won for {}", key)
            return
        logger.debug("Cache saved: {}", key)

    @_store_errors
    def exists(self, key: CacheKey | str) -> bool:
        row = self.fetchone("SELECT COUNT(*) FROM view_cache WHERE key = ?", [str(key)])
        return row[0] > 0

    @_store_errors
    def delete(self, key: CacheKey | str) -> bool:
        """Delete one key. Absent keys are a no-op."""
        self._check_writable("delete cache")
        row = self.fetchone("DELETE FROM view_cache WHERE key = ? RETURNING key", [str(key)])
        return row is not None

    @staticmethod
    def _scope_filter(removal_key: CacheRemovalKey) -> tuple[str, list]:
        clauses = ["study = ?"]
        params: list = [removal_key.study]
        if removal_key.actions is not None:
            clauses.append(f"action IN ({', '.join('?' for _ in removal_key.actions)})")
            params.extend(removal_key.actions)
        if removal_key.cluster is not None:
            clauses.append("cluster = ?")
            params.append(removal_key.cluster)
        if removal_key.gene_set is not None:
            clauses.append("gene_set = ?")
            params.append(removal_key.gene_set)
        return " AND ".join(clauses), params

    @_store_errors
    def keys_in_scope(self, removal_key: CacheRemovalKey) -> list[str]:
        """Keys a removal key would purge, resolved through the study index."""
        where, params = self._scope_filter(removal_key)
        rows = self.fetchall(f"SELECT key FROM view_cache WHERE {where} ORDER BY key", params)
        return [r[0] for r in rows]

    @_store_errors
    def delete_scope(self, removal_key: CacheRemovalKey) -> int:
        """Delete every key in scope, returning the number removed."""
        self._check_writable("clear cache")
        where, params = self._scope_filter(removal_key)
        rows = self.fetchall(f"DELETE FROM view_cache WHERE {where} RETURNING key", params)
        logger.info("Cache cleared for {}: {} entries", removal_key, len(rows))
        return len(rows)

    @_store_errors
    def count(self, study: str | None = None) -> int:
        if study:
            return self.fetchone("SELECT COUNT(*) FROM view_cache WHERE study = ?", [study])[0]
        return self.fetchone("SELECT COUNT(*) FROM view_cache")[0]
