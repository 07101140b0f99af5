"""HTTP client for the XKCD JSON interface."""

import logging

import requests

from comicsearch.api_models import NotFoundError
from comicsearch.update_service import XKCDInfo

_URL_END = "/info.0.json"


class XKCDError(Exception):
    """XKCD could not be reached or answered with something unusable."""


def _field(data, key, kind):
    value = data.get(key)
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise XKCDError(f"field {key!r} is missing or not a number")
        return int(value)
    if not isinstance(value, str):
        raise XKCDError(f"field {key!r} is missing or not a string")
    return value


class XKCDClient:
    """Fetches comic descriptions from an XKCD-compatible server."""

    def __init__(self, url, timeout=None, log=None):
        if not url:
            raise ValueError("empty base url specified")
        self.url = url
        self.timeout = timeout if timeout else None
        self.log = log if log is not None else logging.getLogger(__name__)
        self._session = requests.Session()

    def _fetch_json(self, url, what):
        self.log.info("Send request to url: %s", url)
        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            self.log.error("Request to url: %s failed: %s", url, exc)
            raise XKCDError(f"request to {url} failed: {exc}") from exc
        with response:
            if response.status_code == 404 and what is not None:
                raise NotFoundError()
            if response.status_code != 200:
                self.log.error("Got strange status code %d from %s", response.status_code, url)
                raise XKCDError(f"unknown status: {response.status_code}")
            try:
                data = response.json()
            except ValueError as exc:
                self.log.error("Failed to parse json from %s: %s", url, exc)
                raise XKCDError(f"cannot parse json from {url}: {exc}") from exc
        if not isinstance(data, dict):
            raise XKCDError(f"unexpected json document from {url}")
        return data

    def get(self, comic_id):
        """Return the description of one comic; raise NotFoundError if it is absent."""
        url = f"{self.url}/{comic_id}{_URL_END}"
        data = self._fetch_json(url, comic_id)
        info = XKCDInfo(
            id=_field(data, "num", int),
            url=_field(data, "img", str),
            title=_field(data, "title", str),
            description=_field(data, "alt", str),
            safe_title=_field(data, "safe_title", str),
            transcript=_field(data, "transcript", str),
        )
        self.log.info("All information about comics id: %d has been gotten", comic_id)
        return info

    def last_id(self):
        """Return the number of the newest comic."""
        data = self._fetch_json(self.url + _URL_END, None)
        last = _field(data, "num", int)
        self.log.info("Last id of comics has been gotten: %d", last)
        return last