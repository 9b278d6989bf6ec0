"""
Base classes for providing the launch command of a language server.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class LaunchCommand:
    """
    The command the host runs to spawn the language server process.
    """

    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    """environment variables to set in addition to the host's environment"""

    def to_argv(self) -> list[str]:
        return [self.command, *self.args]


class LanguageServerDependencyProvider(ABC):
    """
    Prepares the dependencies of a language server and provides the command to launch it.
    """

    @abstractmethod
    def create_launch_command(self) -> LaunchCommand:
        pass


class LanguageServerDependencyProviderSinglePath(LanguageServerDependencyProvider, ABC):
    """
    Special case of a dependency provider where the language server is a single executable
    which is located or installed first and then launched with fixed arguments.
    """

    @abstractmethod
    def _get_or_install_core_dependency(self) -> str:
        """
        :return: the path to the language server executable
        """

    @abstractmethod
    def _create_launch_command(self, core_path: str) -> list[str]:
        """
        :param core_path: the path returned by :meth:`_get_or_install_core_dependency`
        :return: the full command line, starting with the executable
        """

    def _create_launch_env(self) -> dict[str, str]:
        return {}

    def create_launch_command(self) -> LaunchCommand:
        core_path = self._get_or_install_core_dependency()
        cmd = self._create_launch_command(core_path)
        return LaunchCommand(command=cmd[0], args=cmd[1:], env=self._create_launch_env())
