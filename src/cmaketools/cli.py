import json
import logging
import sys

import click
from sensai.util.logging import configure

from cmaketools.constants import CMAKETOOLS_LOG_FORMAT
from cmaketools.extension import CMakeTools
from cmaketools.ls_config import Architecture, CMakeToolsConfig, HostPlatform, Os
from cmaketools.ls_exceptions import CMakeToolsException
from cmaketools.ls_utils import PlatformUtils
from cmaketools.provisioner import asset_name_for_platform
from cmaketools.resolver import SystemWorktree

log = logging.getLogger(__name__)


def _configure_logging(level: int) -> None:
    configure(level=level, format=CMAKETOOLS_LOG_FORMAT)
    # stdout is reserved for the command output
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stdout:
            handler.setStream(sys.stderr)


class TopLevelCommands:
    @staticmethod
    @click.command("command", help="Resolve neocmakelsp (downloading it if necessary) and print the launch command as JSON.")
    @click.option("--work-dir", type=click.Path(file_okay=False), default=None, help="Directory to install the binary to. All other entries in it are deleted.")
    @click.option("--no-system-binary", is_flag=True, default=False, help="Ignore a neocmakelsp found on the PATH.")
    def command(work_dir: str | None, no_system_binary: bool) -> None:
        try:
            config = CMakeToolsConfig.from_config_file()
        except ValueError as e:
            raise click.ClickException(str(e)) from e
        _configure_logging(config.log_level)
        if no_system_binary:
            config.use_system_binary = False
        try:
            launch_command = CMakeTools(work_dir=work_dir, config=config).language_server_command("neocmakelsp", SystemWorktree())
        except CMakeToolsException as e:
            raise click.ClickException(str(e)) from e
        click.echo(json.dumps({"command": launch_command.command, "args": launch_command.args, "env": launch_command.env}))

    @staticmethod
    @click.command("asset-name", help="Print the name of the release asset for a platform (default: the current one).")
    @click.option("--os", "os_name", type=click.Choice([o.value for o in Os]), default=None)
    @click.option("--arch", type=click.Choice([a.value for a in Architecture]), default=None)
    def asset_name(os_name: str | None, arch: str | None) -> None:
        try:
            current = PlatformUtils.get_host_platform() if os_name is None or arch is None else None
            host_platform = HostPlatform(
                os=Os(os_name) if os_name is not None else current.os,  # type: ignore[union-attr]
                arch=Architecture(arch) if arch is not None else current.arch,  # type: ignore[union-attr]
            )
            click.echo(asset_name_for_platform(host_platform))
        except CMakeToolsException as e:
            raise click.ClickException(str(e)) from e


@click.group(help="Resolve and provision the neocmakelsp language server.")
def top_level() -> None:
    pass


top_level.add_command(TopLevelCommands.command)
top_level.add_command(TopLevelCommands.asset_name)
