"""HTTP handlers of the API gateway.

Every handler is a callable taking a werkzeug Request and returning a Response.
"""

import json
import logging
import re

from werkzeug.wrappers import Response

from comicsearch.api_models import AlreadyExistsError, BadArgumentsError, UnauthorizedError

DEFAULT_SEARCH_LIMIT = 10

_INTEGER = re.compile(r"[+-]?[0-9]+")
_JSON_WHITESPACE = " \t\n\r"


def _logger(log):
    return log if log is not None else logging.getLogger(__name__)


def _error(message, status):
    response = Response(message + "\n", status=status, mimetype="text/plain")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def _text(message, status=200):
    return Response(message, status=status, mimetype="text/plain")


def _json(data):
    return Response(json.dumps(data) + "\n", status=200, mimetype="application/json")


def _is_error(exc, cls):
    """True for an instance of cls or an error carrying the same message."""
    return isinstance(exc, cls) or str(exc) == str(cls())


def ping_handler(log, pingers):
    """Report for every named service whether it answers a ping."""
    log = _logger(log)

    def handle(request):
        replies = {}
        for name, pinger in pingers.items():
            try:
                pinger.ping()
            except Exception:
                replies[name] = "unavailable"
                log.error("service is not available: %s", name)
                continue
            replies[name] = "ok"
        return _json({"replies": replies})

    return handle


def words_handler(log, normalizer):
    """Return the normalised words of the phrase query parameter."""
    log = _logger(log)

    def handle(request):
        phrase = request.args.get("phrase", "")
        if not phrase:
            log.error("phrase is empty")
            return _error("phrase is empty", 400)
        try:
            words = list(normalizer.norm(phrase))
        except Exception as exc:
            log.error("phrase %r cannot be normalized: %s", phrase, exc)
            if isinstance(exc, BadArgumentsError):
                return _error(str(exc), 400)
            return _error(str(exc), 500)
        return _json({"words": words, "total": len(words)})

    return handle


def update_handler(log, updater):
    """Run a database update; an update already in progress counts as accepted."""
    log = _logger(log)

    def handle(request):
        try:
            updater.update()
        except Exception as exc:
            if _is_error(exc, AlreadyExistsError):
                return _text("Request accepted for processing", 202)
            log.error("Failed to answer update rest request: %s", exc)
            return _error("Error in server" + str(exc), 500)
        return _text("Request accepted for processing", 200)

    return handle


def update_stats_handler(log, updater):
    """Return word and comic counters of the database."""
    log = _logger(log)

    def handle(request):
        try:
            stats = updater.stats()
        except Exception as exc:
            log.error("Failed to answer stats rest request: %s", exc)
            return _error("Error in server", 500)
        return _json(
            {
                "words_total": stats.words_total,
                "words_unique": stats.words_unique,
                "comics_fetched": stats.comics_fetched,
                "comics_total": stats.comics_total,
            }
        )

    return handle


def update_status_handler(log, updater):
    """Return whether an update is running."""
    log = _logger(log)

    def handle(request):
        try:
            status = updater.status()
        except Exception as exc:
            log.error("Status cannot be gotten: %s", exc)
            return _error(str(exc), 500)
        return _json({"status": str(getattr(status, "value", status))})

    return handle


def drop_handler(log, updater):
    """Delete every comic from the database."""
    log = _logger(log)

    def handle(request):
        try:
            updater.drop()
        except Exception as exc:
            log.error("Drop has failed: %s", exc)
            return _error(str(exc), 500)
        return _text("Command 'drop' has been successfully procceed", 200)

    return handle


def _search_handler(log, searcher, with_index):
    log = _logger(log)

    def handle(request):
        limit_raw = request.args.get("limit", "")
        if not limit_raw:
            limit = DEFAULT_SEARCH_LIMIT
        else:
            limit = int(limit_raw) if _INTEGER.fullmatch(limit_raw) else 0
            if limit <= 0:
                log.error("Wrong limit param from rest: %r", limit_raw)
                return _error("limit should be not negative integer", 400)

        phrase = request.args.get("phrase", "")
        if not phrase:
            log.error("Wrong phrase param from rest: phrase should be not empty")
            return _error("phrase should be not empty", 400)

        try:
            if with_index:
                comics = searcher.search_index(phrase, limit)
            else:
                comics = searcher.search(phrase, limit)
        except Exception as exc:
            log.error("Cannot answer search request in rest: %s", exc)
            return _error(str(exc), 500)

        comics = list(comics or [])
        return _json({"comics": [comic.to_dict() for comic in comics], "total": len(comics)})

    return handle


def search_handler(log, searcher):
    """Search comics in the database by the phrase and limit query parameters."""
    return _search_handler(log, searcher, with_index=False)


def search_index_handler(log, searcher):
    """Search comics in the word index by the phrase and limit query parameters."""
    return _search_handler(log, searcher, with_index=True)


def _reject_constant(name):
    raise ValueError(f"invalid JSON constant {name}")


def _read_credentials(body):
    """Return (name, password) from a JSON object; raise ValueError if malformed."""
    text = body.decode("utf-8", errors="replace").lstrip(_JSON_WHITESPACE)
    decoder = json.JSONDecoder(parse_constant=_reject_constant)
    data, _ = decoder.raw_decode(text)
    if data is None:
        return "", ""
    if not isinstance(data, dict):
        raise ValueError("credentials must be a JSON object")
    found = {"name": "", "password": ""}
    for key, value in data.items():
        folded = key.casefold()
        if folded not in found:
            continue
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValueError(f"field {key!r} must be a string")
        found[folded] = value
    return found["name"], found["password"]


def login_handler(log, loginer):
    """Exchange a JSON name and password for a token."""
    log = _logger(log)

    def handle(request):
        try:
            name, secret = _read_credentials(request.get_data())
        except ValueError:
            return _error("Invalid JSON: ", 401)
        if not name or not secret:
            return _error("Name and password are required", 401)
        try:
            issued = loginer.login(name, secret)
        except Exception as exc:
            if _is_error(exc, UnauthorizedError):
                return _error("wrong login or password", 401)
            log.error("Error with login: %s", exc)
            return _error("Unknown error", 500)
        return _text(issued, 200)

    return handle