# comicsearch

comicsearch is a library of building blocks for keyword search over XKCD
comics:

- **Word normalisation** (`comicsearch.words`, `comicsearch.stemmer`).
  `split_words` splits text into runs of letters and decimal digits. `norm`
  reduces each word to its English (Porter2) stem with `stem`, drops a fixed
  set of stop words (`FORBIDDEN_WORDS`) and returns the unique stems in the
  order they were first seen. `norm_request` does the same but raises
  `PhraseTooLongError` for phrases larger than 4096 bytes in UTF-8.
- **Update service** (`comicsearch.update_service`). `UpdateService` fetches
  every comic its storage lacks, with a given number of worker threads. It
  normalises each comic's title, alt text, safe title and transcript, stores
  the result and, when anything was missing, tells a publisher that the
  database changed.
- **Search service** (`comicsearch.search_service`). `SearchService` either
  lets the storage back end rank comics (`search`) or ranks them itself from
  an in-memory inverted index (`search_index`).
- **XKCD client** (`comicsearch.xkcd`). `XKCDClient` reads one comic's
  description and the number of the newest comic from the XKCD JSON
  interface.
- **Limiters** (`comicsearch.concurrency`, `comicsearch.rate_limiter`).
- **HTTP handlers and middleware** (`comicsearch.rest`,
  `comicsearch.middleware`), built on werkzeug request and response objects.
- **Configuration** (`comicsearch.config`). YAML files, overridable by
  environment variables, with defaults for each service.

The test suite needs the `test` extra (pytest and responses).

## Normalising words

```python
from comicsearch.words import norm, norm_request, split_words
from comicsearch.stemmer import stem

split_words("hello-world test_phrase")
# ['hello', 'world', 'test', 'phrase']

sorted(norm("Running JUMPING swimmer"))
# ['jump', 'run', 'swimmer']

norm("the and or a")
# []

stem("running")
# 'run'
```

## Limiting concurrency and rate

`ConcurrencyLimiter(limit)` runs each submitted callable in a background
thread while fewer than `limit` are running, and rejects it otherwise.
`RateLimiter(rate)` hands out at most `rate` tokens per second (keeping at
most one in reserve) and runs each submitted callable in the calling thread
once a token is available. A limit or rate of zero or less becomes 1. Both
return `SubmitStatus.ACCEPTED` or `SubmitStatus.REJECTED` from `submit`,
reject `None`, and can be used as context managers that call `start()` and
`stop()`.

```python
from comicsearch.concurrency import ConcurrencyLimiter
from comicsearch.rate_limiter import RateLimiter

with ConcurrencyLimiter(2) as limiter:
    status = limiter.submit(lambda: print("working"))
    limiter.wait()          # blocks until running tasks finish

with RateLimiter(100) as rate:
    rate.submit(lambda: print("paced"))
    rate.wait(timeout=0.5)  # raises TimeoutError if no token arrives in time
```

A `ConcurrencyLimiter` rejects work after `stop()` until `start()` is called
again. A `RateLimiter` that is stopped lets every call through at once.

## Searching

`SearchService(db, words, log=None)` takes:

- a storage object with `find(words, limit)` returning a `SearchReply`,
  `find_all()` returning an `IndexInfo`, and `get_by_id(comic_id)` returning
  a `Comic`;
- a normaliser with a `norm(phrase)` method returning a list of words.

```python
from comicsearch.search_service import SearchRequest, SearchService

service = SearchService(storage, normalizer)
service.update_index()  # merge storage's word -> comic ids into the index
reply = service.search_index(SearchRequest(phrase="binary tree", limit=5))
[comic.url for comic in reply.comics]
```

`search_index` ranks comics by how many of the phrase's words they hold, with
ties going to the lower id. Comics that `get_by_id` fails on are skipped.

## Updating

`UpdateService(db, xkcd, words, publisher, concurrency, log=None)` takes a
storage back end (`add`, `stats`, `drop`, `ids`), an `XKCDClient` or anything
with `get` and `last_id`, a normaliser, a publisher with
`send_db_changed_event()`, and a worker count of at least 1 (otherwise
`BadArgumentsError` is raised).

- `update()` fetches every id from 1 to the newest that storage lacks. Comic
  404 is never requested; it is stored with a fixed "Not found" text. A
  second call while one is running raises `AlreadyExistsError`.
- `fetch_comic(comic_id)` downloads and normalises a single comic, sending
  the text to the normaliser in chunks of at most 4096 bytes
  (see `split_words_into_chunks`).
- `stats()` returns a `ServiceStats`: the storage counters plus the newest
  comic number as `comics_total`.
- `status()` returns `ServiceStatus.RUNNING` or `ServiceStatus.IDLE`.
- `drop()` clears storage.

```python
from comicsearch.xkcd import XKCDClient

xkcd = XKCDClient("http://localhost:8080", timeout=10)
xkcd.last_id()
xkcd.get(1)  # XKCDInfo; NotFoundError on 404, XKCDError on other failures
```

## HTTP handlers

Every function in `comicsearch.rest` returns a callable that takes a
`werkzeug.wrappers.Request` and returns a `werkzeug.wrappers.Response`:
`ping_handler`, `words_handler`, `update_handler`, `update_stats_handler`,
`update_status_handler`, `drop_handler`, `search_handler`,
`search_index_handler` and `login_handler`. Each takes a logger (or `None`)
and the service it calls. The search handlers read `phrase` and `limit`
(default 10) from the query string; `login_handler` reads a JSON body with
`name` and `password`.

`comicsearch.middleware` wraps such handlers:

- `auth(handler, verifier)` requires an `Authorization: Token <token>` header
  and calls `verifier.verify(token)`, answering 401 on `UnauthorizedError`;
- `concurrency(handler, limiter)` answers 503 when the limiter rejects the
  request;
- `rate(handler, limiter)` runs the handler once the limiter lets it through.

## Configuration

`load_api_config`, `load_search_config` and `load_update_config` read a YAML
file into `ApiConfig`, `SearchConfig` or `UpdateConfig`. Environment
variables such as `LOG_LEVEL`, `WORDS_ADDRESS`, `SEARCH_RATE` or `XKCD_URL`
override the file; missing values take defaults. Durations like `"5s"` or
`"1h30m"` are parsed by `parse_duration` into seconds. Unreadable or invalid
files raise `ConfigError`. `make_logger(level)` returns a stderr logger for
`DEBUG`, `INFO` or `ERROR` and raises `ValueError` for any other level.

## What this package does not do

- It has no commands and starts no servers: there is no routing, no
  listening HTTP server and no RPC service. You mount the handlers in your
  own WSGI application.
- It has no storage back end. The search and update services work with any
  object providing the methods listed above.
- It has no event broker client. The update service calls whatever publisher
  you give it, and rebuilding the search index on such an event is up to you.
- It issues and checks no tokens itself. Login and token verification are
  delegated to the objects passed to `login_handler` and `auth`.