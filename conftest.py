import json

import pytest
import requests

import providers


class FakeResponse:
    def __init__(self, url, status_code=200, content=b"", text=None, json_data=None, headers=None):
        self.url = url
        self.status_code = status_code
        self.content = content
        self.text = text if text is not None else content.decode("utf-8", "replace")
        self._json = json_data
        self.headers = headers if headers is not None else {"content-length": str(len(content))}
        self.closed = False

    def json(self):
        if self._json is None:
            return json.loads(self.text)
        return self._json

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}", response=self)


class FakeHTTP:
    """Stands in for requests.get; unknown URLs fail like an unreachable host."""

    def __init__(self):
        self.responses = {}
        self.calls = []

    def add(self, url, **kwargs):
        self.responses[url] = FakeResponse(url, **kwargs)

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if url not in self.responses:
            raise requests.ConnectionError(f"no fake response for {url}")
        return self.responses[url]


@pytest.fixture(autouse=True)
def http(monkeypatch):
    fake = FakeHTTP()
    monkeypatch.setattr(requests, "get", fake.get)
    return fake


@pytest.fixture(autouse=True)
def _fresh_providers(monkeypatch):
    # Zone indexes are cached on shared provider instances
    monkeypatch.setattr(providers, "_instances", {})


@pytest.fixture
def extract_dir(tmp_path):
    """Directory with one Geofabrik extract and its converted .gpkg."""
    (tmp_path / "geofabrik_italy-latest-update.osm.pbf").write_bytes(b"old pbf")
    (tmp_path / "geofabrik_italy.gpkg").write_bytes(b"old gpkg")
    return tmp_path
