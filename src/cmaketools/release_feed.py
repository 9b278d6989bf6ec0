"""
Client for the GitHub release feed from which language server binaries are obtained.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

from cmaketools.constants import GITHUB_API_URL
from cmaketools.ls_exceptions import ReleaseFetchError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GithubReleaseOptions:
    require_assets: bool = True
    """whether releases without attached assets are skipped"""
    pre_release: bool = False
    """whether pre-releases qualify"""


@dataclass(frozen=True)
class GithubReleaseAsset:
    name: str
    download_url: str


@dataclass(frozen=True)
class GithubRelease:
    version: str
    """the release tag, e.g. "v0.8.12" """
    assets: tuple[GithubReleaseAsset, ...]

    def find_asset(self, name: str) -> GithubReleaseAsset | None:
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "GithubRelease":
        assets = tuple(
            GithubReleaseAsset(name=asset["name"], download_url=asset["browser_download_url"]) for asset in data.get("assets") or []
        )
        return cls(version=data["tag_name"], assets=assets)


def _request_headers() -> dict[str, str]:
    headers = {"Accept": "application/vnd.github+json", "User-Agent": "cmaketools"}
    # Support GITHUB_TOKEN for CI environments with rate limits
    github_token = os.environ.get("GITHUB_TOKEN")
    if github_token:
        headers["Authorization"] = f"token {github_token}"
    return headers


def _is_qualifying(release: dict[str, Any], options: GithubReleaseOptions) -> bool:
    if release.get("draft"):
        return False
    if release.get("prerelease") and not options.pre_release:
        return False
    if options.require_assets and not release.get("assets"):
        return False
    return True


def latest_github_release(repo: str, options: GithubReleaseOptions, timeout: float = 30) -> GithubRelease:
    """
    Returns the most recent release of the given repository that satisfies the given options.

    :param repo: the repository identifier in the form "owner/name"
    :param options: the filter applied to the releases
    :param timeout: the request timeout in seconds
    :raises ReleaseFetchError: if the feed cannot be queried or contains no qualifying release
    """
    url = f"{GITHUB_API_URL}/repos/{repo}/releases"
    log.debug(f"Querying releases of {repo} from {url}")
    try:
        response = requests.get(url, headers=_request_headers(), timeout=timeout)
    except requests.RequestException as e:
        raise ReleaseFetchError(f"failed to query releases of {repo}", cause=e) from e
    if response.status_code != 200:
        raise ReleaseFetchError(f"failed to query releases of {repo}: HTTP {response.status_code} {response.text}")

    try:
        releases = response.json()
    except ValueError as e:
        raise ReleaseFetchError(f"invalid release feed payload for {repo}", cause=e) from e
    if not isinstance(releases, list):
        raise ReleaseFetchError(f"invalid release feed payload for {repo}: expected a list of releases")

    for release in releases:
        if not isinstance(release, dict) or not _is_qualifying(release, options):
            continue
        try:
            return GithubRelease.from_json(release)
        except (KeyError, TypeError) as e:
            raise ReleaseFetchError(f"invalid release entry in feed of {repo}", cause=e) from e

    raise ReleaseFetchError(f"no release found for {repo} matching {options}")
