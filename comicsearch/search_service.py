"""Comic search: direct database lookups and an in-memory inverted index."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Set


@dataclass(frozen=True)
class Comic:
    """A comic with its image URL."""

    id: int
    url: str


@dataclass(frozen=True)
class IndexEntry:
    """A normalised word and the comics it occurs in."""

    word: str
    comic_ids: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class IndexInfo:
    """Every word of the database with the comics holding it."""

    comics: List[IndexEntry] = field(default_factory=list)


@dataclass(frozen=True)
class SearchReply:
    """Comics found for a search, best match first."""

    comics: List[Comic] = field(default_factory=list)


@dataclass(frozen=True)
class SearchRequest:
    """A phrase to look for and the most comics to return."""

    phrase: str
    limit: int


class ComicsDB(Protocol):
    def find(self, words: List[str], limit: int) -> SearchReply: ...

    def find_all(self) -> IndexInfo: ...

    def get_by_id(self, comic_id: int) -> Comic: ...


class WordNormalizer(Protocol):
    def norm(self, phrase: str) -> List[str]: ...


class SearchService:
    """Finds comics for phrases, either in the database or in its word index."""

    def __init__(self, db, words, log=None):
        self.db = db
        self.words = words
        self.log = log if log is not None else logging.getLogger(__name__)
        self.index: Dict[str, Set[int]] = {}

    def update_index(self):
        """Merge every word-to-comics entry of the database into the index."""
        try:
            info = self.db.find_all()
        except Exception as exc:
            self.log.error("Failed to update index: %s", exc)
            raise
        for entry in info.comics:
            self.index.setdefault(entry.word, set()).update(entry.comic_ids)

    def search(self, request):
        """Normalise the phrase and let the database rank matching comics."""
        words = self.words.norm(request.phrase)
        return self.db.find(words, request.limit)

    def search_index(self, request):
        """Rank comics by how many of the phrase's words they hold, using the index.

        Ties go to the lower comic id; comics the database cannot return are skipped.
        """
        words = self.words.norm(request.phrase)

        scores = Counter()
        for word in words:
            scores.update(self.index.get(word, ()))
        if not scores:
            return SearchReply()

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        best_ids = [comic_id for comic_id, _ in ranked[: max(request.limit, 0)]]

        comics = []
        for comic_id in best_ids:
            try:
                comics.append(self.db.get_by_id(comic_id))
            except Exception as exc:
                self.log.debug("Skipping comic %d: %s", comic_id, exc)
        return SearchReply(comics=comics)