"""Configuration of the API, search and update services, read from YAML and the environment."""

import logging
import os
import re
import sys
from dataclasses import dataclass, field, fields

import yaml

_DURATION = "duration"

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "\u00b5s": 1e-6,
    "\u03bcs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_PART = r"(\d+\.?\d*|\.\d+)(ns|us|\u00b5s|\u03bcs|ms|s|m|h)"
_PART_RE = re.compile(_PART)
_DURATION_RE = re.compile(rf"([-+]?)((?:{_PART})+)")

_LEVELS = {"DEBUG": logging.DEBUG, "INFO": logging.INFO, "ERROR": logging.ERROR}


class ConfigError(ValueError):
    """A configuration file or value cannot be used."""


def parse_duration(text):
    """Parse a duration such as "1h30m" or "500ms" into seconds."""
    if not isinstance(text, str):
        raise ConfigError(f"invalid duration {text!r}")
    text = text.strip()
    if text in ("0", "+0", "-0"):
        return 0.0
    match = _DURATION_RE.fullmatch(text)
    if match is None:
        raise ConfigError(f"invalid duration {text!r}")
    sign, body = match.group(1), match.group(2)
    seconds = sum(float(number) * _UNITS[unit] for number, unit in _PART_RE.findall(body))
    return -seconds if sign == "-" else seconds


def _setting(yaml_key, env, default, kind=str):
    return field(default=default, metadata={"yaml": yaml_key, "env": env, "kind": kind})


def _section(yaml_key, cls):
    return field(default_factory=cls, metadata={"yaml": yaml_key, "section": cls})


@dataclass(frozen=True)
class HTTPConfig:
    """Address and read timeout of the HTTP server."""

    address: str = _setting("address", "API_ADDRESS", "localhost:80")
    timeout: float = _setting("timeout", "API_TIMEOUT", 5.0, _DURATION)


@dataclass(frozen=True)
class ApiConfig:
    """Settings of the HTTP API gateway."""

    log_level: str = _setting("log_level", "LOG_LEVEL", "DEBUG")
    search_concurrency: int = _setting("search_concurrency", "SEARCH_CONCURRENCY", 1, int)
    search_rate: int = _setting("search_rate", "SEARCH_RATE", 1, int)
    http: HTTPConfig = _section("api_server", HTTPConfig)
    words_address: str = _setting("words_address", "WORDS_ADDRESS", "words:81")
    update_address: str = _setting("update_address", "UPDATE_ADDRESS", "update:82")
    search_address: str = _setting("search_address", "SEARCH_ADDRESS", "search:83")
    token_ttl: float = _setting("token_ttl", "TOKEN_TTL", 24 * 3600.0, _DURATION)


@dataclass(frozen=True)
class SearchConfig:
    """Settings of the search service."""

    log_level: str = _setting("log_level", "LOG_LEVEL", "DEBUG")
    address: str = _setting("search_address", "SEARCH_ADDRESS", "localhost:80")
    words_address: str = _setting("words_address", "WORDS_ADDRESS", "localhost:81")
    db_address: str = _setting("db_address", "DB_ADDRESS", "localhost:82")
    ttl_init: float = _setting("ttl_init", "INDEX_TTL", 20.0, _DURATION)
    broker_address: str = _setting("broker_address", "BROKER_ADDRESS", "nats://localhost:4222")


@dataclass(frozen=True)
class XKCDConfig:
    """Where and how the update service fetches comics."""

    url: str = _setting("url", "XKCD_URL", "xkcd.com")
    concurrency: int = _setting("concurrency", "XKCD_CONCURRENCY", 1, int)
    timeout: float = _setting("timeout", "XKCD_TIMEOUT", 10.0, _DURATION)
    check_period: float = _setting("check_period", "XKCD_CHECK_PERIOD", 3600.0, _DURATION)


@dataclass(frozen=True)
class UpdateConfig:
    """Settings of the update service."""

    log_level: str = _setting("log_level", "LOG_LEVEL", "DEBUG")
    address: str = _setting("update_address", "UPDATE_ADDRESS", "localhost:80")
    xkcd: XKCDConfig = _section("xkcd", XKCDConfig)
    db_address: str = _setting("db_address", "DB_ADDRESS", "localhost:82")
    words_address: str = _setting("words_address", "WORDS_ADDRESS", "localhost:81")
    broker_address: str = _setting("broker_address", "BROKER_ADDRESS", "nats://localhost:4222")


def _convert(value, kind, name):
    if kind is _DURATION:
        return parse_duration(value)
    if kind is int:
        if isinstance(value, bool):
            raise ConfigError(f"{name}: expected an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{name}: expected an integer, got {value!r}") from exc
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{name}: expected a string, got {value!r}")
    return str(value)


def _build(cls, data, environ):
    if not isinstance(data, dict):
        raise ConfigError(f"expected a mapping for {cls.__name__}, got {data!r}")
    values = {}
    for f in fields(cls):
        meta = f.metadata
        raw = data.get(meta["yaml"])
        if "section" in meta:
            values[f.name] = _build(meta["section"], raw if raw is not None else {}, environ)
            continue
        env_value = environ.get(meta["env"])
        if env_value is not None:
            raw = env_value
        if raw is not None:
            values[f.name] = _convert(raw, meta["kind"], meta["yaml"])
    return cls(**values)


def _load(cls, path):
    try:
        with open(path, encoding="utf-8") as stream:
            data = yaml.safe_load(stream)
    except OSError as exc:
        raise ConfigError(f"cannot read config {str(path)!r}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"cannot parse config {str(path)!r}: {exc}") from exc
    return _build(cls, data if data is not None else {}, os.environ)


def load_api_config(path):
    """Read the API gateway settings; environment variables override the file."""
    return _load(ApiConfig, path)


def load_search_config(path):
    """Read the search service settings; environment variables override the file."""
    return _load(SearchConfig, path)


def load_update_config(path):
    """Read the update service settings; environment variables override the file."""
    return _load(UpdateConfig, path)


def make_logger(level):
    """Return a logger writing to stderr at DEBUG, INFO or ERROR level."""
    try:
        numeric = _LEVELS[level]
    except KeyError:
        raise ValueError(f"unknown log level: {level}") from None
    logger = logging.getLogger("comicsearch")
    logger.setLevel(numeric)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("time=%(asctime)s level=%(levelname)s msg=%(message)s"))
    logger.addHandler(handler)
    return logger