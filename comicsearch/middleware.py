"""Wrappers adding authorisation and load limits to HTTP handlers."""

import threading

from werkzeug.wrappers import Response

from comicsearch.api_models import SubmitStatus, UnauthorizedError

_TOKEN_PREFIX = "Token "


def _error(message, status):
    response = Response(message + "\n", status=status, mimetype="text/plain")
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


def auth(handler, verifier):
    """Let a request through only with a valid "Token <token>" Authorization header."""

    def wrapped(request):
        header = request.headers.get("Authorization", "")
        if not header:
            return _error("Authorization header is required", 401)
        if not header.startswith(_TOKEN_PREFIX):
            return _error("Invalid authorization format", 401)
        token = header[len(_TOKEN_PREFIX):]
        try:
            verifier.verify(token)
        except UnauthorizedError:
            return _error("Authorization is not passed", 401)
        except Exception:
            return _error("Authorization has gone wrong", 500)
        return handler(request)

    return wrapped


def concurrency(handler, limiter):
    """Run the handler through a concurrency limiter; answer 503 when it is full."""

    def wrapped(request):
        done = threading.Event()
        outcome = {}

        def run():
            try:
                outcome["response"] = handler(request)
            except BaseException as exc:
                outcome["error"] = exc
            finally:
                done.set()

        if limiter.submit(run) == SubmitStatus.REJECTED:
            return _error("service unavailable", 503)
        done.wait()
        if "error" in outcome:
            raise outcome["error"]
        return outcome["response"]

    return wrapped


def rate(handler, limiter):
    """Run the handler once the rate limiter hands out a token."""

    def wrapped(request):
        responses = []
        limiter.submit(lambda: responses.append(handler(request)))
        # A rejected task leaves nothing written: an empty successful reply.
        return responses[0] if responses else Response(status=200)

    return wrapped