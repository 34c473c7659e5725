"""Host system utilities for minio-deploy.

This module provides the Host class for detecting the machine's network
identity and checking which external tools are installed.
"""

import grp
import os
import platform
import shutil
import socket

from icecream import ic

from minio_deploy.exceptions import PrerequisiteError

_LOOPBACK_IP = "127.0.0.1"

# Any routable address works, the UDP connect never sends a packet
_PROBE_ADDRESS = ("8.8.8.8", 80)

INSTALL_HINT = """Please install the missing commands:
  sudo apt update
  sudo apt install -y docker.io docker-compose-plugin
  sudo systemctl enable docker
  sudo systemctl start docker
  sudo usermod -aG docker $USER

After installation, log out and log back in, then run this command again."""


def get_hostname() -> str:
    """Return the system hostname."""
    return socket.gethostname()


def get_local_ip() -> str:
    """Return the primary local IPv4 address.

    Uses the same address ``hostname -I`` would list first: the local side
    of a UDP socket connected towards a public address. Falls back to
    resolving the hostname, then to the loopback address.

    Returns:
        The detected IPv4 address as a string.

    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(_PROBE_ADDRESS)
            ip: str = sock.getsockname()[0]
            return ip
    except OSError as err:
        ic(err)

    try:
        return socket.gethostbyname(get_hostname())
    except OSError as err:
        ic(err)

    return _LOOPBACK_IP


class Host:
    """Identity and tooling of the machine running the deployment.

    Attributes:
        system: Operating system name as reported by platform.system().
        hostname: The machine hostname.
        local_ip: The primary local IPv4 address.

    """

    def __init__(self) -> None:
        """Initialize Host by detecting platform and network identity."""
        self.system: str = platform.system()
        self.hostname: str = get_hostname()
        self.local_ip: str = get_local_ip()
        ic(self)

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Host(system={self.system!r}, hostname={self.hostname!r}, local_ip={self.local_ip!r})"

    @property
    def is_linux(self) -> bool:
        return self.system == "Linux"

    @property
    def is_macos(self) -> bool:
        return self.system == "Darwin"

    @staticmethod
    def missing_commands(commands: list[str]) -> list[str]:
        """Return the commands from the list that are not on PATH.

        Args:
            commands: Executable names to look up.

        Returns:
            The subset of commands that could not be found, in input order.

        """
        return [cmd for cmd in commands if shutil.which(cmd) is None]

    def ensure_commands(self, commands: list[str]) -> None:
        """Ensure every command in the list is installed.

        Args:
            commands: Executable names to look up.

        Raises:
            PrerequisiteError: If any of the commands is missing.

        """
        missing = self.missing_commands(commands)
        if missing:
            raise PrerequisiteError(f"Missing required commands: {', '.join(missing)}")

    @staticmethod
    def in_docker_group() -> bool:
        """Check whether the current user belongs to the docker group.

        Returns:
            True if the docker group exists and is one of the process groups.

        """
        try:
            docker_gid = grp.getgrnam("docker").gr_gid
        except KeyError:
            return False
        return docker_gid in os.getgroups()
