"""
This file contains utility functions for platform detection and file operations.
"""

import gzip
import io
import logging
import os
import platform
import shutil
import stat
import tarfile
import zipfile
from enum import Enum

import requests
from sensai.util.logging import LogTime

from cmaketools.ls_config import Architecture, HostPlatform, Os
from cmaketools.ls_exceptions import CMakeToolsException, DownloadError, MakeExecutableError

log = logging.getLogger(__name__)


class DownloadedFileType(str, Enum):
    """
    The format of a downloaded file, determining how it is written to the target path.
    """

    UNCOMPRESSED = "uncompressed"
    """the file is written to the target path as-is"""
    GZIP = "gzip"
    """a single gzip-compressed file, decompressed to the target path"""
    GZIP_TAR = "gzip_tar"
    """a gzip-compressed tarball, extracted into the target directory"""
    ZIP = "zip"
    """a zip archive, extracted into the target directory"""


class PlatformUtils:
    """
    This class provides utilities for platform detection.
    """

    _SYSTEM_MAP = {"Darwin": Os.MAC, "Linux": Os.LINUX, "Windows": Os.WINDOWS}
    _MACHINE_MAP = {
        "x86_64": Architecture.X86_64,
        "amd64": Architecture.X86_64,
        "i386": Architecture.X86,
        "i686": Architecture.X86,
        "x86": Architecture.X86,
        "aarch64": Architecture.AARCH64,
        "arm64": Architecture.AARCH64,
    }

    @classmethod
    def get_host_platform(cls) -> HostPlatform:
        """
        Returns the (OS, architecture) pair of the current system
        """
        system = platform.system()
        machine = platform.machine().lower()
        if system in cls._SYSTEM_MAP and machine in cls._MACHINE_MAP:
            return HostPlatform(os=cls._SYSTEM_MAP[system], arch=cls._MACHINE_MAP[machine])
        raise CMakeToolsException(f"Unknown platform: {system=}, {machine=}")


class FileUtils:
    """
    Utility functions for file operations.
    """

    @staticmethod
    def download_file(url: str, target_path: str, file_type: DownloadedFileType, timeout: float = 120) -> None:
        """
        Downloads the file from the given URL to the given target path.
        For archive types, the target path is the directory into which the archive is extracted.

        :raises DownloadError: if the transfer or writing the file fails
        """
        try:
            parent_dir = os.path.dirname(target_path)
            if parent_dir:
                os.makedirs(parent_dir, exist_ok=True)
            with LogTime(f"Download of {url}", logger=log):
                response = requests.get(url, stream=True, timeout=timeout)
                with response:
                    if response.status_code != 200:
                        raise CMakeToolsException(f"unexpected HTTP status {response.status_code} for {url}")
                    response.raw.decode_content = True
                    match file_type:
                        case DownloadedFileType.UNCOMPRESSED:
                            with open(target_path, "wb") as f:
                                shutil.copyfileobj(response.raw, f)
                        case DownloadedFileType.GZIP:
                            with gzip.open(response.raw, "rb") as f_in, open(target_path, "wb") as f_out:
                                shutil.copyfileobj(f_in, f_out)
                        case DownloadedFileType.GZIP_TAR:
                            os.makedirs(target_path, exist_ok=True)
                            with tarfile.open(fileobj=response.raw, mode="r|gz") as tar:
                                tar.extractall(target_path, filter="data")
                        case DownloadedFileType.ZIP:
                            FileUtils._extract_zip(response.content, target_path)
                        case _:
                            raise CMakeToolsException(f"Unhandled file type '{file_type}'")
        except Exception as exc:
            log.error(f"Error downloading file '{url}': {exc}")
            raise DownloadError(f"failed to download file: {url}", cause=exc) from exc

    @staticmethod
    def _extract_zip(content: bytes, target_dir: str) -> None:
        os.makedirs(target_dir, exist_ok=True)
        normalized_target = os.path.normpath(os.path.abspath(target_dir))
        with zipfile.ZipFile(io.BytesIO(content)) as zip_ref:
            for member in zip_ref.namelist():
                member_path = os.path.normpath(os.path.join(normalized_target, member))
                if os.path.commonpath([normalized_target, member_path]) != normalized_target:
                    raise CMakeToolsException(f"Zip slip detected: {member} attempts to escape {target_dir}")
            zip_ref.extractall(target_dir)

    @staticmethod
    def make_file_executable(path: str) -> None:
        """
        Adds the executable bits (user, group, other) to the file's permissions.

        :raises MakeExecutableError: if the permissions cannot be changed
        """
        try:
            mode = os.stat(path).st_mode
            os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as exc:
            raise MakeExecutableError(f"failed to make {path} executable", cause=exc) from exc
