import pytest
import requests

from ghinst.cli.client import ReleaseClient
from ghinst.kernel.contracts import Asset
from ghinst.kernel.errors import ReleaseNotFoundError, UpstreamError

API = "https://api.example.test"

RELEASE_JSON = {
    "tag_name": "v1.2.3",
    "name": "Release 1.2.3",
    "assets": [
        {
            "name": "tool_linux_amd64.tar.gz",
            "browser_download_url": "https://dl.example.test/tool_linux_amd64.tar.gz",
            "size": 1234,
            "content_type": "application/gzip",
        },
        {
            "name": "checksums.txt",
            "browser_download_url": "https://dl.example.test/checksums.txt",
            "size": 99,
        },
    ],
}


@pytest.fixture
def client():
    return ReleaseClient(api_url=API)


# --- Release lookup ---

def test_fetch_latest_release(client, requests_mock):
    requests_mock.get(f"{API}/repos/owner/repo/releases/latest", json=RELEASE_JSON)

    release = client.fetch_release("owner", "repo")

    assert release.tag_name == "v1.2.3"
    assert release.assets[0] == Asset(
        name="tool_linux_amd64.tar.gz",
        url="https://dl.example.test/tool_linux_amd64.tar.gz",
        size=1234,
    )
    assert release.asset_names == ["tool_linux_amd64.tar.gz", "checksums.txt"]


def test_fetch_release_by_tag(client, requests_mock):
    requests_mock.get(f"{API}/repos/owner/repo/releases/tags/v1.2.3", json=RELEASE_JSON)
    assert client.fetch_release("owner", "repo", "v1.2.3").tag_name == "v1.2.3"


def test_release_url_quotes_tag(client):
    assert client.release_url("owner", "repo", "cli/v1.0.0") == f"{API}/repos/owner/repo/releases/tags/cli%2Fv1.0.0"
    assert client.release_url("owner", "repo") == f"{API}/repos/owner/repo/releases/latest"


def test_fetch_release_by_tag_with_slash(client, requests_mock):
    requests_mock.get(f"{API}/repos/owner/repo/releases/tags/cli%2Fv1.0.0", json=RELEASE_JSON)
    assert client.fetch_release("owner", "repo", "cli/v1.0.0").tag_name == "v1.2.3"


def test_fetch_release_sends_github_headers(client, requests_mock):
    requests_mock.get(f"{API}/repos/owner/repo/releases/latest", json=RELEASE_JSON)
    client.fetch_release("owner", "repo")

    headers = requests_mock.last_request.headers
    assert headers["Accept"] == "application/vnd.github+json"
    assert headers["X-GitHub-Api-Version"] == "2022-11-28"
    assert "Authorization" not in headers


def test_fetch_release_with_token(requests_mock):
    requests_mock.get(f"{API}/repos/owner/repo/releases/latest", json=RELEASE_JSON)
    ReleaseClient(api_url=API, token="s3cret").fetch_release("owner", "repo")
    assert requests_mock.last_request.headers["Authorization"] == "Bearer s3cret"


def test_fetch_release_not_found(client, requests_mock):
    requests_mock.get(f"{API}/repos/owner/repo/releases/tags/v9", status_code=404)
    with pytest.raises(ReleaseNotFoundError, match="owner/repo@v9"):
        client.fetch_release("owner", "repo", "v9")


@pytest.mark.parametrize("status", [401, 403, 500, 502])
def test_fetch_release_upstream_error(client, requests_mock, status):
    requests_mock.get(f"{API}/repos/owner/repo/releases/latest", status_code=status)
    with pytest.raises(UpstreamError, match=str(status)):
        client.fetch_release("owner", "repo")


def test_fetch_release_connection_error(client, requests_mock):
    requests_mock.get(f"{API}/repos/owner/repo/releases/latest",
                      exc=requests.exceptions.ConnectionError("Network unreachable"))
    with pytest.raises(UpstreamError, match="Network unreachable"):
        client.fetch_release("owner", "repo")


@pytest.mark.parametrize("body", [
    {"text": "not json at all"},
    {"json": {"assets": []}},
    {"json": {"tag_name": "v1", "assets": [{"name": "x"}]}},
])
def test_fetch_release_malformed_body(client, requests_mock, body):
    requests_mock.get(f"{API}/repos/owner/repo/releases/latest", **body)
    with pytest.raises(UpstreamError, match="malformed release metadata"):
        client.fetch_release("owner", "repo")


# --- Downloads ---

def test_download(client, requests_mock):
    requests_mock.get("https://dl.example.test/tool.tar.gz", content=b"archive-bytes")
    assert client.download("https://dl.example.test/tool.tar.gz") == b"archive-bytes"


def test_download_with_token_has_no_api_headers(requests_mock):
    requests_mock.get("https://dl.example.test/tool.tar.gz", content=b"x")
    ReleaseClient(api_url=API, token="s3cret").download("https://dl.example.test/tool.tar.gz")

    headers = requests_mock.last_request.headers
    assert headers["Authorization"] == "Bearer s3cret"
    assert "X-GitHub-Api-Version" not in headers


def test_download_http_error(client, requests_mock):
    requests_mock.get("https://dl.example.test/tool.tar.gz", status_code=403)
    with pytest.raises(UpstreamError, match="HTTP 403"):
        client.download("https://dl.example.test/tool.tar.gz")


def test_download_connection_error(client, requests_mock):
    requests_mock.get("https://dl.example.test/tool.tar.gz", exc=requests.exceptions.ReadTimeout("timed out"))
    with pytest.raises(UpstreamError, match="timed out"):
        client.download("https://dl.example.test/tool.tar.gz")
