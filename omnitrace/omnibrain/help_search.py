"""
Keyword search over the static knowledge base.

Scoring, per query token (tokens are lower-cased words longer than two
characters; a token matches when either string contains the other):
    title token match    +3
    keyword match        +2
    answer token match   +1
Entries with a zero score are dropped; ties keep knowledge-base order.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from omnitrace.models import KnowledgeEntry
from omnitrace.omnibrain.knowledge_base import KNOWLEDGE_BASE


_NON_WORD = re.compile(r"[^\w\s]")

TITLE_WEIGHT = 3
KEYWORD_WEIGHT = 2
ANSWER_WEIGHT = 1


def normalize_text(text: str) -> list[str]:
    return [t for t in _NON_WORD.sub(" ", text.lower()).split() if len(t) > 2]


def _overlap(query_tokens: list[str], candidates: Sequence[str]) -> int:
    return sum(1 for q in query_tokens for c in candidates if c in q or q in c)


def score_entry(entry: KnowledgeEntry, query_tokens: list[str]) -> int:
    return (
        TITLE_WEIGHT * _overlap(query_tokens, normalize_text(entry.title))
        + KEYWORD_WEIGHT * _overlap(query_tokens, entry.keywords)
        + ANSWER_WEIGHT * _overlap(query_tokens, normalize_text(entry.answer))
    )


def search_knowledge_base(
    query: str,
    max_results: int = 3,
    entries: Sequence[KnowledgeEntry] | None = None,
) -> list[KnowledgeEntry]:
    query_tokens = normalize_text(query)
    if not query_tokens:
        return []

    scored = []
    for entry in entries if entries is not None else KNOWLEDGE_BASE:
        score = score_entry(entry, query_tokens)
        if score > 0:
            scored.append((score, entry))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in scored[:max_results]]


__all__ = ["normalize_text", "score_entry", "search_knowledge_base"]
