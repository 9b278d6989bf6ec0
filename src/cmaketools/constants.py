from pathlib import Path

CMAKETOOLS_MANAGED_DIR_NAME = ".cmaketools"
DEFAULT_CMAKETOOLS_HOME = str(Path.home() / CMAKETOOLS_MANAGED_DIR_NAME)

CMAKETOOLS_FILE_ENCODING = "utf-8"
"""The encoding used for the package's own files, such as the configuration file."""

NEOCMAKELSP_REPO = "Decodetalkers/neocmakelsp"
"""The GitHub repository whose releases provide the language server binaries."""
NEOCMAKELSP_BINARY_NAME = "neocmakelsp"
"""The name of the binary, used both for the PATH lookup and as prefix of asset and install names."""
NEOCMAKELSP_LAUNCH_ARGS = ("stdio",)

GITHUB_API_URL = "https://api.github.com"

CMAKETOOLS_LOG_FORMAT = "%(levelname)-5s %(asctime)-15s [%(threadName)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s"
