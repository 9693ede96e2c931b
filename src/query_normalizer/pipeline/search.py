"""
Full-text search integration.

A free-text term is turned into a MongoDB ``$text`` clause, the relevance
score is projected, and the result is ordered by relevance unless the
caller asked for a different sort.

Quoting is token-level: all double quotes are stripped, the remainder is
split on whitespace and every token is quoted on its own. ``foo "bar baz"``
therefore searches for ``"foo" "bar" "baz"`` which the text index treats as
an AND of three exact terms; the quoted phrase itself is not kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..descriptor import QueryDescriptor

TEXT_SCORE: dict[str, Any] = {"$meta": "textScore"}


def search_tokens(term: str | None) -> list[str]:
    if not term:
        return []
    return term.replace('"', "").split()


def quote_search_terms(term: str) -> str:
    """Quote each whitespace-separated token of ``term`` individually."""
    return " ".join(f'"{token}"' for token in search_tokens(term))


def integrate_search(
    descriptor: QueryDescriptor,
    term: str | None,
    *,
    score_field: str = "score",
) -> None:
    """Fold ``term`` into the descriptor's filter, projection and sort.

    No-op when the term is absent or has no tokens once quotes are removed.
    """
    if not search_tokens(term):
        return
    descriptor.filter["$text"] = {"$search": quote_search_terms(term or "")}
    descriptor.projection[score_field] = dict(TEXT_SCORE)
    if not descriptor.has_sort:
        descriptor.sort = {score_field: dict(TEXT_SCORE)}
