"""
Tests for the GitHub release feed client. The HTTP layer is mocked throughout.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from cmaketools.ls_exceptions import ReleaseFetchError
from cmaketools.release_feed import GithubReleaseOptions, latest_github_release

OPTIONS = GithubReleaseOptions(require_assets=True, pre_release=False)


def _release_json(tag: str, asset_names: list[str], prerelease: bool = False, draft: bool = False) -> dict:
    return {
        "tag_name": tag,
        "prerelease": prerelease,
        "draft": draft,
        "assets": [{"name": name, "browser_download_url": f"https://github.com/dl/{tag}/{name}"} for name in asset_names],
    }


def _response(status_code: int = 200, payload=None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = "error body"
    return response


class TestLatestGithubRelease:
    def test_returns_first_qualifying_release(self) -> None:
        payload = [
            _release_json("v0.9.0-rc1", ["neocmakelsp-x86_64-unknown-linux-gnu"], prerelease=True),
            _release_json("v0.8.13", []),
            _release_json("v0.8.12", ["neocmakelsp-x86_64-unknown-linux-gnu"]),
            _release_json("v0.8.11", ["neocmakelsp-x86_64-unknown-linux-gnu"]),
        ]
        with patch("cmaketools.release_feed.requests.get", return_value=_response(payload=payload)) as mock_get:
            release = latest_github_release("Decodetalkers/neocmakelsp", OPTIONS)

        assert release.version == "v0.8.12"
        assert release.find_asset("neocmakelsp-x86_64-unknown-linux-gnu").download_url == (
            "https://github.com/dl/v0.8.12/neocmakelsp-x86_64-unknown-linux-gnu"
        )
        assert mock_get.call_args.args[0] == "https://api.github.com/repos/Decodetalkers/neocmakelsp/releases"

    def test_pre_releases_qualify_when_requested(self) -> None:
        payload = [_release_json("v0.9.0-rc1", ["a"], prerelease=True), _release_json("v0.8.12", ["a"])]
        with patch("cmaketools.release_feed.requests.get", return_value=_response(payload=payload)):
            release = latest_github_release("owner/repo", GithubReleaseOptions(require_assets=True, pre_release=True))
        assert release.version == "v0.9.0-rc1"

    def test_drafts_are_skipped(self) -> None:
        payload = [_release_json("v0.9.0", ["a"], draft=True), _release_json("v0.8.12", ["a"])]
        with patch("cmaketools.release_feed.requests.get", return_value=_response(payload=payload)):
            assert latest_github_release("owner/repo", OPTIONS).version == "v0.8.12"

    def test_no_qualifying_release(self) -> None:
        payload = [_release_json("v0.9.0-rc1", ["a"], prerelease=True), _release_json("v0.8.13", [])]
        with patch("cmaketools.release_feed.requests.get", return_value=_response(payload=payload)):
            with pytest.raises(ReleaseFetchError, match="no release found"):
                latest_github_release("owner/repo", OPTIONS)

    def test_unreachable_feed(self) -> None:
        with patch("cmaketools.release_feed.requests.get", side_effect=requests.ConnectionError("name resolution failed")):
            with pytest.raises(ReleaseFetchError) as exc_info:
                latest_github_release("owner/repo", OPTIONS)
        assert "name resolution failed" in str(exc_info.value)

    def test_http_error_status(self) -> None:
        with patch("cmaketools.release_feed.requests.get", return_value=_response(status_code=403)):
            with pytest.raises(ReleaseFetchError, match="HTTP 403"):
                latest_github_release("owner/repo", OPTIONS)

    def test_malformed_payload(self) -> None:
        with patch("cmaketools.release_feed.requests.get", return_value=_response(payload={"message": "Not Found"})):
            with pytest.raises(ReleaseFetchError, match="invalid release feed payload"):
                latest_github_release("owner/repo", OPTIONS)

    def test_github_token_is_sent(self, monkeypatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "secret")
        payload = [_release_json("v0.8.12", ["a"])]
        with patch("cmaketools.release_feed.requests.get", return_value=_response(payload=payload)) as mock_get:
            latest_github_release("owner/repo", OPTIONS)
        assert mock_get.call_args.kwargs["headers"]["Authorization"] == "token secret"

    def test_timeout_is_passed_to_request(self) -> None:
        payload = [_release_json("v0.8.12", ["a"])]
        with patch("cmaketools.release_feed.requests.get", return_value=_response(payload=payload)) as mock_get:
            latest_github_release("owner/repo", OPTIONS, timeout=7)
        assert mock_get.call_args.kwargs["timeout"] == 7
