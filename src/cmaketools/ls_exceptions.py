"""
This module contains the exceptions raised while resolving and provisioning the language server.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cmaketools.ls_config import HostPlatform


class CMakeToolsException(Exception):
    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """
        Initializes the exception with the given message.

        :param message: the message describing the exception
        :param cause: the original exception that caused this exception, if any
        """
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        """
        Returns a string representation of the exception.
        """
        s = super().__str__()
        if self.cause:
            if "\n" in s:
                s += "\n"
            else:
                s += " "
            s += f"(caused by {self.cause})"
        return s


class UnsupportedPlatformError(CMakeToolsException):
    """
    Raised when no release asset is defined for the (OS, architecture) combination of the host.
    """

    def __init__(self, host_platform: "HostPlatform", message: str | None = None) -> None:
        self.host_platform = host_platform
        if message is None:
            message = f"unsupported platform {host_platform.arch.value} on {host_platform.os.value}"
        super().__init__(message)


class ReleaseFetchError(CMakeToolsException):
    """
    Raised when the release feed cannot be reached or contains no qualifying release.
    """


class AssetNotFoundError(CMakeToolsException):
    def __init__(self, asset_name: str) -> None:
        self.asset_name = asset_name
        super().__init__(f"no asset found matching {asset_name!r}")


class DownloadError(CMakeToolsException):
    pass


class DirectoryListError(CMakeToolsException):
    pass


class EntryReadError(CMakeToolsException):
    pass


class MakeExecutableError(CMakeToolsException):
    """
    Raised when the installed binary cannot be marked as executable.
    """
