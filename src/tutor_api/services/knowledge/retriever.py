from __future__ import annotations

import re
from typing import Sequence

from tutor_api.services.knowledge.types import Fragment

DEFAULT_LIMIT = 5
DEFAULT_FALLBACK_COUNT = 3

_TOKEN_SEPARATORS = re.compile(r"[\s,，.。]+")


def tokenize(question: str) -> list[str]:
    """Case-folded, de-duplicated query tokens in first-seen order."""
    tokens = (token.casefold() for token in _TOKEN_SEPARATORS.split(question) if token)
    return list(dict.fromkeys(tokens))


def score_fragment(tokens: Sequence[str], fragment: Fragment) -> int:
    haystack = f"{fragment.digest} {fragment.raw_text}".casefold()
    return sum(1 for token in tokens if token in haystack)


def _ranking_key(scored: tuple[int, Fragment]) -> tuple[int, int]:
    score, fragment = scored
    return (-score, fragment.id)


def retrieve(
    question: str,
    fragments: Sequence[Fragment],
    limit: int = DEFAULT_LIMIT,
    *,
    fallback_count: int = DEFAULT_FALLBACK_COUNT,
) -> list[Fragment]:
    """Rank fragments by lexical overlap with ``question``.

    Ties are broken by fragment id so results are reproducible. When nothing
    overlaps, the first ``fallback_count`` fragments in store order are returned
    so the answer still has some context.
    """
    tokens = tokenize(question)
    scored = [(score_fragment(tokens, fragment), fragment) for fragment in fragments]
    ranked = sorted((item for item in scored if item[0] > 0), key=_ranking_key)

    if ranked:
        return [fragment for _, fragment in ranked[: max(0, limit)]]

    in_store_order = sorted(fragments, key=lambda fragment: fragment.id)
    return in_store_order[: max(0, min(fallback_count, len(fragments)))]
