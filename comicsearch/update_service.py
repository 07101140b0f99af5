"""Filling the comics database from XKCD and reporting on it."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Protocol

__all__ = [
    "AlreadyExistsError",
    "BadArgumentsError",
    "Comic",
    "DBStats",
    "NotFoundError",
    "ServiceStats",
    "ServiceStatus",
    "UpdateService",
    "XKCDInfo",
    "split_words_into_chunks",
]

MAX_CHUNK_SIZE = 4 * 1024
_MISSING_COMIC_ID = 404


class BadArgumentsError(ValueError):
    """Arguments given to the update service are not acceptable."""

    def __init__(self, message="arguments are not acceptable"):
        super().__init__(message)


class AlreadyExistsError(Exception):
    """The resource or task already exists, e.g. an update is running."""

    def __init__(self, message="resource or task already exists"):
        super().__init__(message)


class NotFoundError(LookupError):
    """The requested resource does not exist."""

    def __init__(self, message="resource is not found"):
        super().__init__(message)


class ServiceStatus(str, Enum):
    """Whether an update is in progress."""

    RUNNING = "running"
    IDLE = "idle"


@dataclass(frozen=True)
class DBStats:
    """Counters kept by the comics database."""

    words_total: int = 0
    words_unique: int = 0
    comics_fetched: int = 0


@dataclass(frozen=True)
class ServiceStats(DBStats):
    """Database counters together with the number of comics XKCD has."""

    comics_total: int = 0

    @property
    def db_stats(self):
        """The database part of the stats."""
        return DBStats(
            words_total=self.words_total,
            words_unique=self.words_unique,
            comics_fetched=self.comics_fetched,
        )


@dataclass(frozen=True)
class Comic:
    """A comic ready to be stored, with its normalised words."""

    id: int
    url: str = ""
    words: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class XKCDInfo:
    """What XKCD tells about one comic."""

    id: int
    url: str = ""
    title: str = ""
    description: str = ""
    safe_title: str = ""
    transcript: str = ""


class ComicsStorage(Protocol):
    def add(self, comic: Comic) -> None: ...

    def stats(self) -> DBStats: ...

    def drop(self) -> None: ...

    def ids(self) -> List[int]: ...


class ComicsSource(Protocol):
    def get(self, comic_id: int) -> XKCDInfo: ...

    def last_id(self) -> int: ...


class WordNormalizer(Protocol):
    def norm(self, phrase: str) -> List[str]: ...


class DBPublisher(Protocol):
    def send_db_changed_event(self) -> None: ...


def split_words_into_chunks(words, max_size):
    """Join words with spaces into chunks of at most max_size bytes.

    A single word longer than max_size forms a chunk of its own.
    """
    chunks = []
    current = []
    size = 0
    for word in words:
        length = len(word.encode("utf-8"))
        if size and size + length + 1 > max_size:
            chunks.append(" ".join(current))
            current, size = [], 0
        if size:
            size += 1
        current.append(word)
        size += length
    if size:
        chunks.append(" ".join(current))
    return chunks


class UpdateService:
    """Downloads missing comics, normalises their text and stores them."""

    def __init__(self, db, xkcd, words, publisher, concurrency, log=None):
        if concurrency < 1:
            raise BadArgumentsError(f"wrong concurrency specified: {concurrency}")
        self.db = db
        self.xkcd = xkcd
        self.words = words
        self.publisher = publisher
        self.concurrency = concurrency
        self.log = log if log is not None else logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._running = threading.Event()

    def update(self):
        """Fetch every comic the database lacks; raise AlreadyExistsError if busy."""
        if not self._lock.acquire(blocking=False):
            self.log.error("service already runs update")
            raise AlreadyExistsError()
        try:
            self._running.set()
            self._update()
        finally:
            self._running.clear()
            self._lock.release()

    def _update(self):
        self.log.info("Start updating db")
        try:
            last_id = self.xkcd.last_id()
            existing = set(self.db.ids())
        except Exception as exc:
            self.log.error("Failed update db: %s", exc)
            raise

        missing = [i for i in range(1, last_id + 1) if i not in existing]
        if missing:
            with ThreadPoolExecutor(max_workers=self.concurrency) as pool:
                list(pool.map(self._store_comic, missing))
            try:
                self.publisher.send_db_changed_event()
            except Exception as exc:
                self.log.error("Error publishing db changed event: %s", exc)
        self.log.info("Finished updating db")

    def _store_comic(self, comic_id):
        try:
            self.db.add(self.fetch_comic(comic_id))
        except Exception as exc:
            self.log.error("Failed to add comics %d to db: %s", comic_id, exc)
            return
        self.log.info("Comics %d has been added to db", comic_id)

    def fetch_comic(self, comic_id):
        """Download one comic and normalise its text into words."""
        self.log.info("Load info about comics %d", comic_id)
        if comic_id == _MISSING_COMIC_ID:
            info = XKCDInfo(
                id=comic_id,
                title="404",
                description="Not found",
                safe_title="404",
                transcript="Not found",
            )
        else:
            try:
                info = self.xkcd.get(comic_id)
            except Exception as exc:
                self.log.error("Failed load info about comics %d: %s", comic_id, exc)
                raise

        text = " ".join((info.title, info.description, info.safe_title, info.transcript))
        normalized = []
        for chunk in split_words_into_chunks(text.split(), MAX_CHUNK_SIZE):
            try:
                normalized.extend(self.words.norm(chunk))
            except Exception as exc:
                self.log.error("failed to normalize chunk: %s", exc)
                raise
        return Comic(id=info.id, url=info.url, words=normalized)

    def stats(self):
        """Return database counters and the number of comics on XKCD."""
        try:
            db_stats = self.db.stats()
        except Exception as exc:
            self.log.error("Failed to get stats information in db: %s", exc)
            raise
        try:
            total = self.xkcd.last_id()
        except Exception as exc:
            self.log.error("Failed to get lastId in xkcd: %s", exc)
            raise
        return ServiceStats(
            words_total=db_stats.words_total,
            words_unique=db_stats.words_unique,
            comics_fetched=db_stats.comics_fetched,
            comics_total=total,
        )

    def status(self):
        """Return RUNNING while an update is in progress, IDLE otherwise."""
        return ServiceStatus.RUNNING if self._running.is_set() else ServiceStatus.IDLE

    def drop(self):
        """Delete every comic from the database."""
        try:
            self.db.drop()
        except Exception as exc:
            self.log.error("Failed to delete information about comics: %s", exc)
            raise