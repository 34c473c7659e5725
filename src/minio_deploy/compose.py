"""Docker compose orchestration driver.

This module detects which form of the compose command is installed and
wraps every call minio-deploy makes against the MinIO compose stack.
It also reads the service name and published ports from the compose
descriptor so the rest of the program never hard-codes them.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from icecream import ic

from minio_deploy.exceptions import ConfigurationError, OrchestrationError, PrerequisiteError
from minio_deploy.models import ComposeVariant, ServiceDescriptor

COMPOSE_FILE_NAME = "docker-compose.yml"

DEFAULT_SERVICE = ServiceDescriptor(name="minio", api_port=9000, console_port=9001)

# Container ports MinIO listens on, see the server command in docker-compose.yml
_API_CONTAINER_PORT = 9000
_CONSOLE_CONTAINER_PORT = 9001

# Probe order: the plugin form first, the standalone binary second
_PROBE_ORDER = (ComposeVariant.MODERN, ComposeVariant.LEGACY)


def detect_compose_variant() -> ComposeVariant:
    """Detect the usable compose command form.

    Each form is probed with ``version``; the first one that exits
    successfully is returned.

    Returns:
        The detected variant.

    Raises:
        PrerequisiteError: If neither form works.

    """
    for variant in _PROBE_ORDER:
        cmd = [*variant.argv, "version"]
        ic(cmd)
        try:
            result = subprocess.run(cmd, capture_output=True, check=False)
        except FileNotFoundError:
            continue
        if result.returncode == 0:
            return variant

    raise PrerequisiteError("Missing required commands: docker compose")


def _published_port(ports: list[Any], container_port: int, default: int) -> int:
    """Find the host port published for a container port.

    Handles the short ``"host:container"`` string syntax and the long
    mapping syntax with ``target`` and ``published`` keys.
    """
    for entry in ports:
        if isinstance(entry, dict):
            if int(entry.get("target", 0)) == container_port and entry.get("published"):
                return int(entry["published"])
            continue

        # "9000:9000", "0.0.0.0:9000:9000", "9000:9000/tcp"
        parts = str(entry).split("/")[0].split(":")
        if len(parts) >= 2 and parts[-1].isdigit() and int(parts[-1]) == container_port and parts[-2].isdigit():
            return int(parts[-2])
    return default


def load_service_descriptor(compose_file: Path) -> ServiceDescriptor:
    """Read the MinIO service name and published ports from a compose file.

    The first service whose image mentions ``minio`` is used, falling back
    to the first service declared.

    Args:
        compose_file: Path to docker-compose.yml.

    Returns:
        The service descriptor, with defaults for anything not declared.

    Raises:
        ConfigurationError: If the file is missing or is not valid YAML.

    """
    try:
        with compose_file.open() as stream:
            document = yaml.safe_load(stream)
    except FileNotFoundError as err:
        raise ConfigurationError(f"{compose_file.name} not found in {compose_file.parent}") from err
    except yaml.YAMLError as err:
        raise ConfigurationError(f"{compose_file} contains malformed YAML: {err}") from err

    services = (document or {}).get("services") or {}
    if not isinstance(services, dict) or not services:
        return DEFAULT_SERVICE

    name = next(
        (key for key, svc in services.items() if "minio" in str((svc or {}).get("image", ""))),
        next(iter(services)),
    )
    ports = (services[name] or {}).get("ports") or []

    descriptor = ServiceDescriptor(
        name=name,
        api_port=_published_port(ports, _API_CONTAINER_PORT, DEFAULT_SERVICE.api_port),
        console_port=_published_port(ports, _CONSOLE_CONTAINER_PORT, DEFAULT_SERVICE.console_port),
    )
    ic(descriptor)
    return descriptor


class ComposeDriver:
    """Runs compose commands against one compose file.

    Attributes:
        variant: The compose command form, resolved once per run.
        compose_file: Path to docker-compose.yml.
        env_file: Path to the .env file passed with ``--env-file``.

    """

    def __init__(self, variant: ComposeVariant, compose_file: Path, env_file: Path | None = None) -> None:
        self.variant = variant
        self.compose_file = compose_file
        self.env_file = env_file

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return (
            f"ComposeDriver(variant={self.variant.name}, compose_file={self.compose_file!r}, "
            f"env_file={self.env_file!r})"
        )

    def _build_cmd(self, args: Sequence[str]) -> list[str]:
        """Build a compose command with the common file flags.

        Args:
            args: The compose subcommand and its arguments.

        Returns:
            List of command arguments ready for subprocess execution.

        """
        cmd: list[str] = [*self.variant.argv, "-f", str(self.compose_file)]
        if self.env_file is not None:
            cmd.extend(["--env-file", str(self.env_file)])
        cmd.extend(args)
        return cmd

    def _run(self, args: Sequence[str], *, capture: bool = True) -> subprocess.CompletedProcess:
        cmd = self._build_cmd(args)
        ic(cmd)
        try:
            return subprocess.run(cmd, capture_output=capture, text=True, check=True)
        except FileNotFoundError as err:
            raise PrerequisiteError(f"{self.variant.display} not found on PATH") from err
        except subprocess.CalledProcessError as err:
            stderr_msg = err.stderr.strip() if err.stderr else ""
            details = f" - {stderr_msg}" if stderr_msg else ""
            raise OrchestrationError(
                f"'{self.variant.display} {' '.join(args)}' failed (exit code {err.returncode}){details}"
            ) from err

    def command_line(self, *args: str) -> str:
        """Return a compose invocation as a copy-pasteable string."""
        return " ".join([*self.variant.argv, "-f", str(self.compose_file), *args])

    def up(self) -> None:
        """Start the stack in the background."""
        self._run(["up", "-d"])

    def down(self) -> None:
        """Stop and remove the stack containers."""
        self._run(["down"])

    def ps(self) -> str:
        """Return the ``ps`` listing of the stack."""
        return self._run(["ps"]).stdout

    def is_running(self, service: str) -> bool:
        """Check whether the ``ps`` listing mentions the service."""
        return service in self.ps()

    def container_id(self, service: str) -> str:
        """Return the container ID of a service, empty if it has none."""
        return self._run(["ps", "-q", service]).stdout.strip()

    def logs(self, service: str, tail: int | None = None) -> str:
        """Return recent log output of a service.

        Args:
            service: Compose service name.
            tail: Number of lines from the end, all lines if None.

        """
        args = ["logs"]
        if tail is not None:
            args.extend(["--tail", str(tail)])
        args.append(service)
        return self._run(args).stdout

    @staticmethod
    def container_health(container_id: str) -> str:
        """Return the Docker health status of a container.

        Returns:
            ``healthy``, ``starting``, ``unhealthy``, or ``unknown`` when the
            container has no health check or cannot be inspected.

        """
        cmd = ["docker", "inspect", "--format", "{{.State.Health.Status}}", container_id]
        ic(cmd)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except (FileNotFoundError, subprocess.CalledProcessError) as err:
            ic(err)
            return "unknown"
        return result.stdout.strip() or "unknown"
