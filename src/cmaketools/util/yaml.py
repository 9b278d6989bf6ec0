import logging
from typing import Any

from ruamel.yaml import YAML

from cmaketools.constants import CMAKETOOLS_FILE_ENCODING

log = logging.getLogger(__name__)


def _create_yaml() -> YAML:
    return YAML(typ="safe")


def load_yaml(path: str) -> dict[str, Any]:
    """
    :param path: the path to the YAML file to load
    :return: the loaded mapping; an empty document yields an empty dict
    """
    with open(path, encoding=CMAKETOOLS_FILE_ENCODING) as f:
        data = _create_yaml().load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top level of {path}, got {type(data).__name__}")
    return data
