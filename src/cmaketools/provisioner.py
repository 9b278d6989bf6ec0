"""
Provisioning of the neocmakelsp binary from the GitHub release feed.

The provisioner runs the following steps, each of which may fail with a dedicated exception:

1. signal that an update check is in progress
2. determine the asset name for the host platform (:class:`UnsupportedPlatformError`)
3. fetch the latest non-pre-release with assets (:class:`ReleaseFetchError`)
4. find the asset in the release (:class:`AssetNotFoundError`)
5. download the asset to ``neocmakelsp-<version>`` unless that file already exists (:class:`DownloadError`)
6. remove every other entry of the working directory (:class:`DirectoryListError`, :class:`EntryReadError`)
7. mark the binary executable (:class:`MakeExecutableError`)

There are no retries and no rollback: a partially written download stays in place until a
later successful provisioning cycle for a different version removes it.
"""

import logging
import os
import shutil
from collections.abc import Callable
from enum import Enum

from cmaketools.constants import NEOCMAKELSP_BINARY_NAME, NEOCMAKELSP_REPO
from cmaketools.ls_config import Architecture, CMakeToolsConfig, HostPlatform, Os
from cmaketools.ls_exceptions import AssetNotFoundError, DirectoryListError, EntryReadError, ReleaseFetchError, UnsupportedPlatformError
from cmaketools.ls_utils import DownloadedFileType, FileUtils, PlatformUtils
from cmaketools.release_feed import GithubReleaseOptions, latest_github_release

log = logging.getLogger(__name__)


class LanguageServerInstallationStatus(str, Enum):
    CHECKING_FOR_UPDATE = "checking_for_update"
    DOWNLOADING = "downloading"


InstallationStatusSink = Callable[[LanguageServerInstallationStatus], None]

OS_ASSET_TOKENS: dict[Os, str] = {
    Os.MAC: "apple-darwin",
    Os.LINUX: "unknown-linux-gnu",  # GNU rather than musl
    Os.WINDOWS: "pc-windows-msvc.exe",
}

ARCH_ASSET_TOKENS: dict[Architecture, str] = {
    Architecture.AARCH64: "aarch64",
    Architecture.X86_64: "x86_64",
}
"""architectures without an entry (32-bit x86) are unsupported on every OS"""

UNSUPPORTED_PLATFORMS: frozenset[HostPlatform] = frozenset({HostPlatform(os=Os.WINDOWS, arch=Architecture.AARCH64)})


def asset_name_for_platform(host_platform: HostPlatform) -> str:
    """
    :param host_platform: the platform to compute the asset name for
    :return: the name of the release asset for the given platform, e.g. "neocmakelsp-x86_64-unknown-linux-gnu"
    :raises UnsupportedPlatformError: if no asset exists for the platform
    """
    arch_token = ARCH_ASSET_TOKENS.get(host_platform.arch)
    if arch_token is None or host_platform in UNSUPPORTED_PLATFORMS:
        raise UnsupportedPlatformError(host_platform)
    return f"{NEOCMAKELSP_BINARY_NAME}-{arch_token}-{OS_ASSET_TOKENS[host_platform.os]}"


def install_name_for_version(version: str) -> str:
    """
    :raises ReleaseFetchError: if the version cannot be used as a file name within the working directory
    """
    if not version or version in (".", "..") or "/" in version or "\\" in version:
        raise ReleaseFetchError(f"release version {version!r} cannot be used as a file name")
    return f"{NEOCMAKELSP_BINARY_NAME}-{version}"


class NeoCMakeLSPProvisioner:
    """
    Downloads the latest neocmakelsp release into a working directory which it owns exclusively.
    """

    RELEASE_OPTIONS = GithubReleaseOptions(require_assets=True, pre_release=False)

    def __init__(self, work_dir: str, host_platform: HostPlatform | None = None, config: CMakeToolsConfig | None = None) -> None:
        """
        :param work_dir: the working directory; all entries in it other than the current binary are deleted
        :param host_platform: the platform to provision for; detected if None
        :param config: the configuration to apply; defaults are used if None
        """
        self.work_dir = work_dir
        self._host_platform = host_platform
        self.config = config if config is not None else CMakeToolsConfig()

    @property
    def host_platform(self) -> HostPlatform:
        if self._host_platform is None:
            self._host_platform = PlatformUtils.get_host_platform()
        return self._host_platform

    def provision(self, status_sink: InstallationStatusSink) -> str:
        """
        Makes sure the binary of the latest release is installed in the working directory.

        :param status_sink: receives the installation status changes
        :return: the path of the installed, executable binary
        """
        status_sink(LanguageServerInstallationStatus.CHECKING_FOR_UPDATE)
        asset_name = asset_name_for_platform(self.host_platform)

        release = latest_github_release(NEOCMAKELSP_REPO, self.RELEASE_OPTIONS, timeout=self.config.request_timeout)
        log.info(f"Latest {NEOCMAKELSP_BINARY_NAME} release is {release.version}")
        asset = release.find_asset(asset_name)
        if asset is None:
            raise AssetNotFoundError(asset_name)

        install_name = install_name_for_version(release.version)
        binary_path = os.path.join(self.work_dir, install_name)
        if not os.path.isfile(binary_path):
            status_sink(LanguageServerInstallationStatus.DOWNLOADING)
            log.info(f"Downloading {asset.name} from {asset.download_url} to {binary_path}")
            FileUtils.download_file(
                asset.download_url, binary_path, DownloadedFileType.UNCOMPRESSED, timeout=self.config.download_timeout
            )
        else:
            log.info(f"{binary_path} is already installed, skipping download")

        self.remove_stale_versions(install_name)
        FileUtils.make_file_executable(binary_path)
        return binary_path

    def _list_entry_names(self) -> list[str]:
        try:
            entries = os.scandir(self.work_dir)
        except OSError as e:
            raise DirectoryListError(f"failed to list working directory {self.work_dir}", cause=e) from e
        names = []
        with entries:
            while True:
                try:
                    entry = next(entries)
                except StopIteration:
                    break
                except OSError as e:
                    raise EntryReadError(f"failed to load directory entry in {self.work_dir}", cause=e) from e
                names.append(entry.name)
        return names

    def remove_stale_versions(self, install_name: str) -> None:
        """
        Removes every entry of the working directory except the one with the given name.
        Failures to remove individual entries are ignored.
        """
        for name in self._list_entry_names():
            if name == install_name:
                continue
            path = os.path.join(self.work_dir, name)
            log.info(f"Removing stale entry {path}")
            if os.path.isdir(path) and not os.path.islink(path):
                shutil.rmtree(path, ignore_errors=True)
            else:
                try:
                    os.remove(path)
                except OSError as e:
                    log.debug(f"Ignoring failure to remove {path}: {e}")
