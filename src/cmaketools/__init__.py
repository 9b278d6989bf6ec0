from .extension import CMakeTools
from .ls import LaunchCommand
from .ls_config import Architecture, CMakeToolsConfig, HostPlatform, Os
from .provisioner import LanguageServerInstallationStatus, NeoCMakeLSPProvisioner, asset_name_for_platform
from .resolver import LanguageServerResolver, LanguageServerSession, SystemWorktree

__version__ = "0.1.0"
