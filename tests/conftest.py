"""Shared fixtures: in-memory coob archives and a fake download endpoint."""

import io
import zipfile

import pytest

from common.errors import HttpRequestError

MSBUILD_NS = "http://schemas.microsoft.com/developer/msbuild/2003"


def build_manifest(coob_id, version, dependencies=(), namespaced=True):
    """Render a coob.props document."""
    xmlns = f' xmlns="{MSBUILD_NS}"' if namespaced else ""
    refs = "".join(f'    <CoobReference Include="{d}" />\n' for d in dependencies)
    return (
        f'<?xml version="1.0" encoding="utf-8"?>\n'
        f"<Project{xmlns}>\n"
        f"  <PropertyGroup>\n"
        f"    <CoobId>{coob_id}</CoobId>\n"
        f"    <CoobVersion>{version}</CoobVersion>\n"
        f"  </PropertyGroup>\n"
        f"  <ItemGroup>\n{refs}  </ItemGroup>\n"
        f"</Project>\n"
    )


def build_coob(files):
    """Zip ``files`` (name -> str/bytes) into archive bytes."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


@pytest.fixture
def make_manifest():
    return build_manifest


@pytest.fixture
def make_coob():
    return build_coob


class FakeRepository:
    """Stands in for the archive download endpoint."""

    def __init__(self):
        self.archives = {}
        self.failures = set()
        self.calls = []

    def publish(self, url, payload):
        self.archives[url] = payload

    def fail(self, url):
        self.failures.add(url)

    def download_to_file(self, url, dest, *, context, timeout=None, log=None):
        self.calls.append(url)
        if url in self.failures or url not in self.archives:
            raise HttpRequestError(url, "unexpected status code 404")
        payload = self.archives[url]
        with open(dest, "wb") as fh:
            fh.write(payload)
        return len(payload)


@pytest.fixture
def fake_repo(monkeypatch):
    repo = FakeRepository()
    monkeypatch.setattr("registry.fetcher.download_to_file", repo.download_to_file)
    return repo
