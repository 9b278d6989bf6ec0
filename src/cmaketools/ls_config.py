"""
Configuration objects: host platform description, user paths and the settings file
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sensai.util.string import ToStringMixin

from cmaketools.constants import DEFAULT_CMAKETOOLS_HOME, NEOCMAKELSP_BINARY_NAME
from cmaketools.util.yaml import load_yaml

log = logging.getLogger(__name__)


class Os(str, Enum):
    MAC = "mac"
    LINUX = "linux"
    WINDOWS = "windows"


class Architecture(str, Enum):
    AARCH64 = "aarch64"
    """64-bit ARM"""
    X86_64 = "x86_64"
    """64-bit x86"""
    X86 = "x86"
    """32-bit x86"""


@dataclass(frozen=True)
class HostPlatform:
    os: Os
    arch: Architecture

    def __str__(self) -> str:
        return f"{self.os.value}-{self.arch.value}"


_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


def _convert_config_value(field_type: Any, value: Any) -> Any:
    """
    Converts a value loaded from the configuration file to the type of the dataclass field.
    YAML 1.2 loads yes/no and on/off as strings, so these are accepted for booleans.
    """
    if field_type is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS:
            return value.strip().lower() in _TRUE_STRINGS
        raise ValueError(f"expected a boolean, got {value!r}")
    if field_type is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            # log levels may be given by name, e.g. DEBUG
            level = logging.getLevelName(value.strip().upper())
            if isinstance(level, int):
                return level
        raise ValueError(f"expected an integer, got {value!r}")
    if field_type is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise ValueError(f"expected a number, got {value!r}")
    return value


class CMakeToolsPaths:
    """
    Provides paths to the directories and files used by cmaketools.
    """

    def __init__(self) -> None:
        home_dir = os.getenv("CMAKETOOLS_HOME")
        if home_dir is None or home_dir.strip() == "":
            home_dir = DEFAULT_CMAKETOOLS_HOME
        else:
            home_dir = home_dir.strip()
        self.cmaketools_home_dir: str = home_dir
        """
        the directory holding the user's configuration and downloaded language servers.
        This is ~/.cmaketools by default, but it can be overridden via the CMAKETOOLS_HOME environment variable.
        """
        self.ls_resources_dir: str = os.path.join(self.cmaketools_home_dir, "language_servers", NEOCMAKELSP_BINARY_NAME)
        """
        the working directory of the provisioner. It is owned exclusively by the provisioner:
        every entry other than the currently installed binary is deleted after provisioning.
        """
        self.config_file_path: str = os.path.join(self.cmaketools_home_dir, CMakeToolsConfig.CONFIG_FILE)


@dataclass(kw_only=True)
class CMakeToolsConfig(ToStringMixin):
    """
    Settings for resolving and provisioning the language server, typically loaded from
    a YAML file via :meth:`from_config_file`. For testing purposes it can be instantiated directly.
    """

    # *** fields mapped to/from the configuration file ***

    log_level: int = logging.INFO
    use_system_binary: bool = True
    """
    whether a neocmakelsp found on the PATH takes precedence over provisioning.
    Such a binary is used as-is, without any version check or cleanup.
    """
    request_timeout: float = 30
    """timeout in seconds for release feed queries"""
    download_timeout: float = 120
    """timeout in seconds for downloading a release asset"""

    # *** static members ***

    CONFIG_FILE = "cmaketools_config.yml"

    @classmethod
    def from_config_file(cls, config_file_path: str | None = None) -> "CMakeToolsConfig":
        """
        Creates the configuration from the given YAML file (defaults to the file in the cmaketools home directory).
        Missing files and missing keys fall back to the defaults.
        """
        if config_file_path is None:
            config_file_path = CMakeToolsPaths().config_file_path
        if not os.path.exists(config_file_path):
            log.debug(f"No configuration file found at {config_file_path}, using defaults")
            return cls()

        log.info(f"Loading cmaketools configuration from {config_file_path}")
        try:
            loaded_yaml = load_yaml(config_file_path)
        except Exception as e:
            raise ValueError(f"Error loading cmaketools configuration from {config_file_path}: {e}") from e

        field_types = {f.name: f.type for f in dataclasses.fields(cls)}
        values: dict[str, Any] = {}
        for key, value in loaded_yaml.items():
            if key not in field_types:
                log.warning(f"Ignoring unknown configuration key '{key}' in {config_file_path}")
                continue
            try:
                values[key] = _convert_config_value(field_types[key], value)
            except ValueError as e:
                raise ValueError(f"Invalid value for '{key}' in {config_file_path}: {e}") from e
        return cls(**values)
