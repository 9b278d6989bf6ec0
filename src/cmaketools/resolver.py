"""
Resolution of the language server binary: session cache, then PATH, then provisioning.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Protocol

from cmaketools.constants import NEOCMAKELSP_BINARY_NAME
from cmaketools.provisioner import InstallationStatusSink, NeoCMakeLSPProvisioner

log = logging.getLogger(__name__)


class Worktree(Protocol):
    """
    The host's view of the project, used to search for executables.
    """

    def which(self, binary_name: str) -> str | None: ...


class SystemWorktree:
    """
    Looks up executables on the PATH of the current process.
    """

    def which(self, binary_name: str) -> str | None:
        return shutil.which(binary_name)


@dataclass
class LanguageServerSession:
    resolved_path: str | None = None
    """
    the binary returned by the first successful resolution; None until then.
    Only valid for the lifetime of the plugin instance.
    """


class LanguageServerResolver:
    def __init__(self, provisioner: NeoCMakeLSPProvisioner, use_system_binary: bool = True) -> None:
        """
        :param provisioner: the provisioner to fall back to if neither the session nor the PATH provide a binary
        :param use_system_binary: whether a binary on the PATH is used in preference to provisioning
        """
        self.provisioner = provisioner
        self.use_system_binary = use_system_binary

    def resolve(self, session: LanguageServerSession, worktree: Worktree, status_sink: InstallationStatusSink) -> str:
        """
        Determines the binary to launch, in this order:

        1. the path cached in the session, if it still is an existing file (no version or permission checks)
        2. a binary named neocmakelsp on the worktree's search path, used as-is
        3. the binary installed by the provisioner

        :return: the path to the binary, which is also stored in the session
        """
        if session.resolved_path is not None and os.path.isfile(session.resolved_path):
            return session.resolved_path

        if self.use_system_binary:
            system_path = worktree.which(NEOCMAKELSP_BINARY_NAME)
            if system_path:
                log.info(f"Using {NEOCMAKELSP_BINARY_NAME} found on the PATH: {system_path}")
                session.resolved_path = system_path
                return system_path

        binary_path = self.provisioner.provision(status_sink)
        log.info(f"Using provisioned {NEOCMAKELSP_BINARY_NAME} at {binary_path}")
        session.resolved_path = binary_path
        return binary_path
