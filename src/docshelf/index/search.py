"""Keyword ranking over the search index.

Two matching strategies live here and are not interchangeable:

* ``rank``/``search`` split the query into tokens and score each document with
  fixed field weights. The chat assistant uses this.
* ``match_entries`` checks whether the whole query appears anywhere in an
  entry and returns hits in corpus order. The interactive search box and the
  agent ``search_docs`` tool use this.
"""

from __future__ import annotations

import string
from typing import List, Sequence

from docshelf.models import ScoredDocument, SearchIndexEntry

MAX_RESULTS = 10
MIN_TOKEN_LENGTH = 3

TITLE_WEIGHT = 10
KEYWORD_WEIGHT = 5
SUMMARY_WEIGHT = 3
DESCRIPTION_WEIGHT = 3
FULL_TEXT_WEIGHT = 1


def tokenize(query: str) -> List[str]:
    """Lowercase and split on whitespace, dropping tokens of two chars or fewer.

    Tokens are kept as written, so "c++" and ".net" survive.
    """
    return [word for word in query.lower().split() if len(word) >= MIN_TOKEN_LENGTH]


def _forms(token: str) -> List[str]:
    """The token itself, plus its trimmed form when surrounding punctuation hides a word.

    "install?" also matches as "install"; "c++" never degrades to "c".
    """
    forms = [token]
    trimmed = token.strip(string.punctuation)
    if trimmed != token and len(trimmed) >= MIN_TOKEN_LENGTH:
        forms.append(trimmed)
    return forms


def _contains(text: str, forms: Sequence[str]) -> bool:
    return any(form in text for form in forms)


def _haystack(entry: SearchIndexEntry) -> str:
    return " ".join(
        [
            entry.title,
            entry.description or "",
            entry.ai_summary or "",
            " ".join(entry.ai_keywords),
            entry.excerpt,
        ]
    ).lower()


def score_entry(entry: SearchIndexEntry, tokens: Sequence[str]) -> int:
    title = entry.title.lower()
    keywords = [keyword.lower() for keyword in entry.ai_keywords]
    summary = (entry.ai_summary or "").lower()
    description = (entry.description or "").lower()
    haystack = _haystack(entry)

    score = 0
    for token in tokens:
        forms = _forms(token)
        if _contains(title, forms):
            score += TITLE_WEIGHT
        if any(_contains(keyword, forms) for keyword in keywords):
            score += KEYWORD_WEIGHT
        if _contains(summary, forms):
            score += SUMMARY_WEIGHT
        if _contains(description, forms):
            score += DESCRIPTION_WEIGHT
        if _contains(haystack, forms):
            score += FULL_TEXT_WEIGHT
    return score


def _scored(index: Sequence[SearchIndexEntry], query: str) -> List[tuple[int, SearchIndexEntry]]:
    tokens = tokenize(query)
    if not tokens:
        return []
    scored = [(score_entry(entry, tokens), entry) for entry in index]
    scored = [pair for pair in scored if pair[0] > 0]
    # sorted() is stable, so equal scores keep corpus order.
    return sorted(scored, key=lambda pair: pair[0], reverse=True)


def rank(index: Sequence[SearchIndexEntry], query: str, *, limit: int = MAX_RESULTS) -> List[ScoredDocument]:
    """Score every entry against ``query`` and return the best matches."""
    limit = min(limit, MAX_RESULTS)
    return [
        ScoredDocument(title=entry.title, slug=entry.slug, score=score)
        for score, entry in _scored(index, query)[:limit]
    ]


def search(index: Sequence[SearchIndexEntry], query: str, *, limit: int = MAX_RESULTS) -> List[SearchIndexEntry]:
    """Like ``rank`` but returns the index entries themselves."""
    limit = min(limit, MAX_RESULTS)
    return [entry for _, entry in _scored(index, query)[:limit]]


def match_entries(
    index: Sequence[SearchIndexEntry], query: str, *, limit: int = MAX_RESULTS
) -> List[SearchIndexEntry]:
    """Plain substring containment, first ``limit`` hits in corpus order."""
    q = query.strip().lower()
    if not q:
        return []
    results: List[SearchIndexEntry] = []
    for entry in index:
        if (
            q in entry.title.lower()
            or q in entry.excerpt.lower()
            or q in (entry.description or "").lower()
            or q in (entry.ai_summary or "").lower()
            or any(q in keyword.lower() for keyword in entry.ai_keywords)
        ):
            results.append(entry)
            if len(results) >= limit:
                break
    return results
