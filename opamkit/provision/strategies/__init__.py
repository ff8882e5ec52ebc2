"""
Acquisition strategies package.

One strategy per PlatformKind. The provisioner selects exactly one of them
from the host platform; UnsupportedStrategy covers every other host.
"""

from opamkit.provision.strategies.darwin import DarwinStrategy
from opamkit.provision.strategies.linux import LinuxStrategy
from opamkit.provision.strategies.unsupported import UnsupportedStrategy
from opamkit.provision.strategies.windows import WindowsStrategy

__all__ = ["DarwinStrategy", "LinuxStrategy", "UnsupportedStrategy", "WindowsStrategy"]
