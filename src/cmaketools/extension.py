"""
The CMake editor plugin: provides the command for launching neocmakelsp.
"""

import logging
from collections.abc import Callable

from overrides import override

from cmaketools.constants import NEOCMAKELSP_LAUNCH_ARGS
from cmaketools.ls import LanguageServerDependencyProviderSinglePath, LaunchCommand
from cmaketools.ls_config import CMakeToolsConfig, CMakeToolsPaths, HostPlatform
from cmaketools.provisioner import InstallationStatusSink, LanguageServerInstallationStatus, NeoCMakeLSPProvisioner
from cmaketools.resolver import LanguageServerResolver, LanguageServerSession, Worktree

log = logging.getLogger(__name__)

InstallationStatusCallback = Callable[[str, LanguageServerInstallationStatus], None]
"""receives the language server id and the new installation status"""


def _log_installation_status(language_server_id: str, status: LanguageServerInstallationStatus) -> None:
    log.info(f"{language_server_id}: {status.value}")


class CMakeTools:
    """
    A plugin instance. The resolved binary is cached for the lifetime of the instance.
    """

    def __init__(
        self,
        work_dir: str | None = None,
        config: CMakeToolsConfig | None = None,
        host_platform: HostPlatform | None = None,
        status_callback: InstallationStatusCallback = _log_installation_status,
    ) -> None:
        """
        :param work_dir: the directory the binary is installed to; defaults to the language server
            resources directory in the cmaketools home directory. It must not be shared with other data,
            as provisioning deletes all other entries in it.
        :param config: the configuration; loaded from the configuration file if None
        :param host_platform: the platform to provision for; detected if None
        :param status_callback: receives installation status updates
        """
        self.config = config if config is not None else CMakeToolsConfig.from_config_file()
        self.work_dir = work_dir if work_dir is not None else CMakeToolsPaths().ls_resources_dir
        self.session = LanguageServerSession()
        self._status_callback = status_callback
        provisioner = NeoCMakeLSPProvisioner(self.work_dir, host_platform=host_platform, config=self.config)
        self._resolver = LanguageServerResolver(provisioner, use_system_binary=self.config.use_system_binary)

    class DependencyProvider(LanguageServerDependencyProviderSinglePath):
        def __init__(
            self,
            resolver: LanguageServerResolver,
            session: LanguageServerSession,
            worktree: Worktree,
            status_sink: InstallationStatusSink,
        ) -> None:
            self._resolver = resolver
            self._session = session
            self._worktree = worktree
            self._status_sink = status_sink

        @override
        def _get_or_install_core_dependency(self) -> str:
            return self._resolver.resolve(self._session, self._worktree, self._status_sink)

        @override
        def _create_launch_command(self, core_path: str) -> list[str]:
            return [core_path, *NEOCMAKELSP_LAUNCH_ARGS]

    def language_server_command(self, language_server_id: str, worktree: Worktree) -> LaunchCommand:
        """
        :param language_server_id: the host's identifier of the language server, passed on with status updates
        :param worktree: the worktree whose search path is consulted for a system-wide binary
        :return: the command for launching the language server in stdio mode
        """

        def status_sink(status: LanguageServerInstallationStatus) -> None:
            self._status_callback(language_server_id, status)

        provider = self.DependencyProvider(self._resolver, self.session, worktree, status_sink)
        return provider.create_launch_command()
