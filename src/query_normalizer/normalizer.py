"""
QueryNormalizer — compose the pipeline and run the normalized query.

Order is fixed: parse -> sanitize projection -> integrate search ->
default sort -> bound pagination. Sanitization runs before search so the
synthetic score projection is never redacted and compulsory fields cannot
be removed again afterwards.
"""

from __future__ import annotations

import copy
import logging
import time
from typing import TYPE_CHECKING, Any

from .descriptor import QueryDescriptor, QueryResult
from .parser import QueryParamParser
from .pipeline.pagination import PaginationBounder
from .pipeline.projection import sanitize_projection
from .pipeline.search import integrate_search
from .pipeline.sorting import apply_default_sort

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .config import NormalizerConfig
    from .ports import IDocumentStore

logger = logging.getLogger("query_normalizer.normalizer")


class QueryNormalizer:
    """Turn untrusted request parameters into a bounded, safe query."""

    def __init__(
        self,
        config: NormalizerConfig,
        store: IDocumentStore | None = None,
        *,
        parser: QueryParamParser | None = None,
    ) -> None:
        """
        Initialize QueryNormalizer.

        Args:
            config: Deployment policy (whitelist, field sets, limits, sort).
            store: Backend executing the normalized query. Only needed for
                :meth:`normalize_and_execute`.
            parser: Raw-parameter parser; defaults to a QueryParamParser
                that ignores the configured search and count parameters.
        """
        self._config = config
        self._store = store
        self._parser = parser or QueryParamParser(
            ignored_keys=(config.search_param, config.count_param)
        )
        self._pagination = PaginationBounder(config.default_limit, config.max_limit)

    @property
    def config(self) -> NormalizerConfig:
        return self._config

    def normalize(
        self,
        raw_params: Mapping[str, Any],
        search_term: str | None = None,
    ) -> QueryDescriptor:
        """Parse ``raw_params`` and return the normalized descriptor."""
        descriptor = self._parser.parse(raw_params, whitelist=self._config.whitelist)
        self._apply(descriptor, search_term)
        logger.debug("Normalized query: %s", descriptor.to_dict())
        return descriptor

    def renormalize(self, descriptor: QueryDescriptor) -> QueryDescriptor:
        """Run the pipeline (without search) over a copy of ``descriptor``.

        A descriptor already carrying a ``$text`` clause keeps its relevance
        score projection, so the score sort still has a score to order by.
        """
        result = descriptor.copy()
        score_field = self._config.score_field
        score = None
        if "$text" in result.filter and isinstance(result.projection, dict):
            score = result.projection.get(score_field)
        self._apply(result, None)
        if isinstance(score, dict) and "$meta" in score:
            result.projection[score_field] = dict(score)
        return result

    def _apply(self, descriptor: QueryDescriptor, search_term: str | None) -> None:
        cfg = self._config
        descriptor.projection = sanitize_projection(
            descriptor.projection,
            cfg.private_fields,
            cfg.compulsory_fields,
            identity_field=cfg.identity_field,
        )
        integrate_search(descriptor, search_term, score_field=cfg.score_field)
        apply_default_sort(descriptor, cfg.default_sort)
        bounds = self._pagination.bound(limit=descriptor.limit, skip=descriptor.skip)
        descriptor.skip = bounds.skip
        descriptor.limit = bounds.limit

    async def normalize_and_execute(
        self,
        raw_params: Mapping[str, Any],
        search_term: str | None = None,
        want_count: bool = False,
    ) -> QueryResult:
        """Normalize, optionally count, then fetch one page.

        Count and find share one filter snapshot taken before either call.
        Store errors are logged and re-raised unchanged.
        """
        if self._store is None:
            raise RuntimeError("QueryNormalizer was created without a store")
        query = self.normalize(raw_params, search_term)
        filter_snapshot = copy.deepcopy(query.filter)
        start = time.perf_counter()
        try:
            total: int | None = None
            if want_count:
                total = await self._store.count(copy.deepcopy(filter_snapshot))
            records = await self._store.find(
                copy.deepcopy(filter_snapshot),
                dict(query.projection),
                dict(query.sort or {}),
                query.skip or 0,
                query.limit or self._config.default_limit,
            )
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            logger.exception("Query failed after %.2fms", elapsed)
            raise
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "Query returned %d records (skip=%s, limit=%s, count=%s) in %.2fms",
            len(records),
            query.skip,
            query.limit,
            total,
            elapsed,
        )
        return QueryResult(query=query, total_matches=total, records=list(records))

    async def handle_request(self, raw_params: Mapping[str, Any]) -> QueryResult:
        """Read the search term and count flag from ``raw_params`` and execute."""
        search = raw_params.get(self._config.search_param)
        if isinstance(search, (list, tuple)):
            search = search[-1] if search else None
        return await self.normalize_and_execute(
            raw_params,
            search_term=search if isinstance(search, str) else None,
            want_count=self._config.count_param in raw_params,
        )
