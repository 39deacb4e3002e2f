"""Lexical relevance search over the AHA resource corpus.

Every resource gets an additive score from a few independent signals:

1) exact phrase anywhere in the resource      +100
2) exact phrase in the title                  +50
3) keyword matching the phrase or any term    +30 per keyword
4) occurrences of each term longer than 2     +5 per occurrence
5) exact phrase in the category               +20

Resources scoring 0 are dropped; the rest are ranked by score, keeping corpus
order on ties.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from aha_resources import AhaResource

PHRASE_SCORE = 100
TITLE_SCORE = 50
KEYWORD_SCORE = 30
TERM_SCORE = 5
CATEGORY_SCORE = 20
MIN_TERM_LENGTH = 3


def _normalize(query: str) -> str:
    return query.lower().strip()


def _tokenize(normalized_query: str) -> tuple[str, ...]:
    return tuple(normalized_query.split())


def _count_occurrences(text: str, term: str) -> int:
    """Non-overlapping literal occurrences of ``term`` in ``text``."""
    if not term:
        return 0
    return text.count(term)


def _searchable_text(resource: AhaResource) -> str:
    return "\n".join(
        [
            resource.title,
            resource.category,
            resource.content,
            " ".join(resource.keywords),
        ]
    ).lower()


@dataclass(frozen=True)
class ScoredResource:
    resource: AhaResource
    score: int


def score_resource(query: str, resource: AhaResource) -> int:
    """Relevance of ``resource`` for ``query``; 0 means no match."""
    phrase = _normalize(query)
    if not phrase:
        return 0
    terms = _tokenize(phrase)
    text = _searchable_text(resource)

    score = 0
    if phrase in text:
        score += PHRASE_SCORE
    if phrase in resource.title.lower():
        score += TITLE_SCORE

    keyword_matches = 0
    for keyword in resource.keywords:
        keyword = keyword.lower()
        if phrase in keyword or any(term in keyword for term in terms):
            keyword_matches += 1
    score += keyword_matches * KEYWORD_SCORE

    for term in terms:
        if len(term) >= MIN_TERM_LENGTH:
            score += _count_occurrences(text, term) * TERM_SCORE

    if phrase in resource.category.lower():
        score += CATEGORY_SCORE
    return score


def rank_resources(query: str, resources: Sequence[AhaResource]) -> list[ScoredResource]:
    if not query or not query.strip():
        return []

    scored = [ScoredResource(resource=r, score=score_resource(query, r)) for r in resources]
    matches = [s for s in scored if s.score > 0]
    # list.sort is stable, so equal scores keep corpus order
    matches.sort(key=lambda s: s.score, reverse=True)
    return matches


def search_resources(query: str, resources: Sequence[AhaResource]) -> list[AhaResource]:
    """Resources matching ``query``, most relevant first.

    An empty or whitespace-only query returns an empty list.
    """
    return [s.resource for s in rank_resources(query, resources)]
