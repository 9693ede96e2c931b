"""Pure normalization steps applied to a QueryDescriptor."""

from __future__ import annotations

from .pagination import PaginationBounder, PaginationBounds, bound_limit, bound_skip
from .paths import is_descendant, is_descendant_of_any, is_private, is_public
from .projection import (
    drop_identity,
    force_compulsory,
    keep_inclusions,
    redact_private,
    sanitize_projection,
)
from .search import integrate_search, quote_search_terms
from .sorting import apply_default_sort

__all__ = [
    "PaginationBounder",
    "PaginationBounds",
    "apply_default_sort",
    "bound_limit",
    "bound_skip",
    "drop_identity",
    "force_compulsory",
    "integrate_search",
    "is_descendant",
    "is_descendant_of_any",
    "is_private",
    "is_public",
    "keep_inclusions",
    "quote_search_terms",
    "redact_private",
    "sanitize_projection",
]
