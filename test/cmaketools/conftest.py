from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from cmaketools.ls_config import Architecture, HostPlatform, Os
from cmaketools.release_feed import GithubRelease, GithubReleaseAsset


@pytest.fixture
def linux_x64() -> HostPlatform:
    return HostPlatform(os=Os.LINUX, arch=Architecture.X86_64)


@pytest.fixture
def make_release() -> Callable[..., GithubRelease]:
    """
    Returns a factory for releases with the given version and asset names.
    """

    def factory(version: str, *asset_names: str) -> GithubRelease:
        assets = tuple(
            GithubReleaseAsset(name=name, download_url=f"https://example.invalid/{version}/{name}") for name in asset_names
        )
        return GithubRelease(version=version, assets=assets)

    return factory


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "neocmakelsp"
    path.mkdir()
    return path


@pytest.fixture
def fake_download() -> Iterator[MagicMock]:
    """
    Replaces the download with a function writing a small file to the target path.
    """

    def write_file(url: str, target_path: str, file_type, timeout: float = 120) -> None:
        with open(target_path, "wb") as f:
            f.write(b"#!/bin/sh\n")

    with patch("cmaketools.provisioner.FileUtils.download_file", side_effect=write_file) as mock_download:
        yield mock_download
