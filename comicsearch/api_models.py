"""Errors, models and service interfaces of the HTTP API gateway."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol


class BadArgumentsError(ValueError):
    """Arguments given to a service are not acceptable."""

    def __init__(self, message="arguments are not acceptable"):
        super().__init__(message)


class AlreadyExistsError(Exception):
    """A resource or task already exists."""

    def __init__(self, message="resource or task already exists"):
        super().__init__(message)


class NotFoundError(LookupError):
    """A resource is not found."""

    def __init__(self, message="resource is not found"):
        super().__init__(message)


class UnauthorizedError(Exception):
    """A user is not authorised."""

    def __init__(self, message="user is unauthorized"):
        super().__init__(message)


class StartingError(RuntimeError):
    """Something could not be started."""

    def __init__(self, message="error trying to start"):
        super().__init__(message)


class UpdateStatus(str, Enum):
    """State of the update service as seen by the gateway."""

    UNKNOWN = "unknown"
    IDLE = "idle"
    RUNNING = "running"


class SubmitStatus(str, Enum):
    """Outcome of handing a task to a limiter."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class UpdateStats:
    """Word and comic counters of the comics database."""

    words_total: int = 0
    words_unique: int = 0
    comics_fetched: int = 0
    comics_total: int = 0

    def to_dict(self):
        """Return the stats as a JSON-ready mapping."""
        return {
            "words_total": self.words_total,
            "words_unique": self.words_unique,
            "comics_fetched": self.comics_fetched,
            "comics_total": self.comics_total,
        }


@dataclass(frozen=True)
class Comic:
    """A comic found by a search."""

    id: int
    url: str

    def to_dict(self):
        """Return the comic as a JSON-ready mapping."""
        return {"id": self.id, "url": self.url}


class Normalizer(Protocol):
    def norm(self, phrase: str) -> list: ...


class Pinger(Protocol):
    def ping(self) -> None: ...


class Updater(Protocol):
    def update(self) -> None: ...

    def stats(self) -> UpdateStats: ...

    def status(self) -> UpdateStatus: ...

    def drop(self) -> None: ...


class Searcher(Protocol):
    def search(self, phrase: str, limit: int) -> list: ...

    def search_index(self, phrase: str, limit: int) -> list: ...


class Loginer(Protocol):
    def login(self, name: str, password: str) -> str: ...


class Limiter(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...

    def submit(self, func: Optional[Callable[[], None]]) -> SubmitStatus: ...