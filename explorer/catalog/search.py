"""Free-text search over catalog entries.

A small in-memory inverted index built once per catalog tier. A hit must
match every query term, exactly or as a prefix. Name matches weigh more
than other fields, and non-archived or featured entries rank higher.
Search never looks at the active filters.
"""

import math
import re
import unicodedata
from bisect import bisect_left
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from explorer.catalog.models import Entry

logger = structlog.get_logger()

DEFAULT_MAX_RESULTS = 30

# Field boosts; fields absent here weigh 1.
FIELD_BOOSTS = {"name": 3.0}

# Prefix matches count for less than exact matches.
PREFIX_WEIGHT = 0.5

ARCHIVED = "archived"

TOKEN_PATTERN = re.compile(r"[^\W_]+(?:[+#][^\W_]*)*", re.UNICODE)


def tokenize(text: str | None) -> list[str]:
    """Split text into lowercase, accent-folded tokens."""
    if not text:
        return []
    folded = unicodedata.normalize("NFKC", text).casefold()
    return TOKEN_PATTERN.findall(folded)


def searchable_fields(entry: Entry) -> dict[str, str]:
    """Extract the indexed text of an entry, per field.

    The description falls back to the primary repository description when
    the entry has none of its own.
    """
    primary = entry.primary_repository
    repo_data = primary.github_data if primary else None

    description = entry.description or (repo_data.description if repo_data else None)
    topics = " ".join(repo_data.topics) if repo_data else ""
    industries = " ".join(entry.crunchbase_data.categories) if entry.crunchbase_data else ""
    summary_tags = " ".join(entry.summary.tags) if entry.summary else ""

    return {
        "name": entry.name,
        "description": description or "",
        "primary_repository_topics": topics,
        "industries": industries,
        "summary_tags": summary_tags,
    }


def document_boost(entry: Entry) -> float:
    """Ranking multiplier of an entry, independent of the query."""
    boost = 1.0
    if entry.maturity and entry.maturity != ARCHIVED:
        boost += 0.5
    if entry.is_featured:
        boost += 0.5
    return boost


@dataclass(frozen=True)
class SearchHit:
    """Ranked search result.

    Attributes:
        id: Entry id.
        name: Entry name.
        score: Relevance score, higher first.
        category: Primary category.
        subcategory: Primary subcategory.
        maturity: Maturity level, if any.
        logo: Logo path, if any.
        featured: Whether the entry is featured.
    """

    id: str
    name: str
    score: float
    category: str
    subcategory: str
    maturity: str | None = None
    logo: str | None = None
    featured: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "score": round(self.score, 4),
            "category": self.category,
            "subcategory": self.subcategory,
            "maturity": self.maturity,
            "logo": self.logo,
            "featured": self.featured,
        }


class SearchIndex:
    """Inverted index over entry text.

    Example usage:
        search = SearchIndex(index.entries, max_results=30)
        hits = search.search_term("service mesh")
    """

    def __init__(self, entries: Iterable[Entry], max_results: int = DEFAULT_MAX_RESULTS) -> None:
        """Index entries.

        Args:
            entries: Entries to index.
            max_results: Maximum number of hits returned per query.
        """
        self.max_results = max_results
        self._entries: dict[str, Entry] = {}
        self._boosts: dict[str, float] = {}
        # token -> entry id -> weighted term frequency
        self._postings: dict[str, dict[str, float]] = defaultdict(dict)

        for entry in entries:
            self._add(entry)

        self._vocabulary = sorted(self._postings)
        logger.debug(
            "Search index built",
            entries=len(self._entries),
            tokens=len(self._vocabulary),
        )

    def _add(self, entry: Entry) -> None:
        self._entries[entry.id] = entry
        self._boosts[entry.id] = document_boost(entry)
        for field_name, text in searchable_fields(entry).items():
            boost = FIELD_BOOSTS.get(field_name, 1.0)
            for token in tokenize(text):
                postings = self._postings[token]
                postings[entry.id] = postings.get(entry.id, 0.0) + boost

    def __len__(self) -> int:
        return len(self._entries)

    def _expand(self, term: str) -> list[tuple[str, float]]:
        """Vocabulary tokens matching a term, with their match weight."""
        matches = []
        start = bisect_left(self._vocabulary, term)
        for token in self._vocabulary[start:]:
            if not token.startswith(term):
                break
            matches.append((token, 1.0 if token == term else PREFIX_WEIGHT))
        return matches

    def _idf(self, token: str) -> float:
        return math.log(1 + len(self._entries) / len(self._postings[token]))

    def search_term(self, text: str) -> list[SearchHit]:
        """Search entries matching every term of a query.

        Args:
            text: Free-text query.

        Returns:
            Hits ordered by descending score, then name, capped at
            `max_results`. Empty for a blank query.
        """
        terms = list(dict.fromkeys(tokenize(text)))
        if not terms:
            return []

        scores: dict[str, float] | None = None
        for term in terms:
            term_scores: dict[str, float] = {}
            for token, weight in self._expand(term):
                idf = self._idf(token)
                for entry_id, frequency in self._postings[token].items():
                    score = weight * idf * frequency
                    term_scores[entry_id] = term_scores.get(entry_id, 0.0) + score

            if scores is None:
                scores = term_scores
            else:
                scores = {
                    entry_id: score + term_scores[entry_id]
                    for entry_id, score in scores.items()
                    if entry_id in term_scores
                }
            if not scores:
                return []

        hits = [self._hit(entry_id, score * self._boosts[entry_id]) for entry_id, score in scores.items()]
        hits.sort(key=lambda h: (-h.score, h.name.casefold()))
        return hits[: self.max_results]

    def _hit(self, entry_id: str, score: float) -> SearchHit:
        entry = self._entries[entry_id]
        return SearchHit(
            id=entry.id,
            name=entry.name,
            score=score,
            category=entry.category,
            subcategory=entry.subcategory,
            maturity=entry.maturity,
            logo=entry.logo,
            featured=entry.is_featured,
        )
