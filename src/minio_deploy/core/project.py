"""Shared state of a MinIO project directory.

A project directory holds docker-compose.yml, env.template, .env and the
certs/ directory. Both deployment and verification work on one.
"""

from pathlib import Path

from minio_deploy import console
from minio_deploy.compose import COMPOSE_FILE_NAME, ComposeDriver, detect_compose_variant, load_service_descriptor
from minio_deploy.config import ENV_FILE_NAME
from minio_deploy.exceptions import DeployError
from minio_deploy.host import Host
from minio_deploy.models import ComposeVariant, DeployConfig, ServiceDescriptor

CERTS_DIR_NAME = "certs"


class Project:
    """Paths, host identity and lazily resolved compose state of a project.

    The compose variant and service descriptor are resolved on first use
    and kept for the rest of the run.

    Attributes:
        project_dir: Directory holding the compose file and .env.
        compose_file: Path to docker-compose.yml.
        env_file: Path to .env.
        cert_dir: Directory holding private.key and public.crt.
        host: Identity of the machine running the tool.
        config: The validated configuration, None until loaded.

    """

    def __init__(self, project_dir: Path, *, host: Host | None = None) -> None:
        self.project_dir: Path = project_dir.resolve()
        self.compose_file: Path = self.project_dir / COMPOSE_FILE_NAME
        self.env_file: Path = self.project_dir / ENV_FILE_NAME
        self.cert_dir: Path = self.project_dir / CERTS_DIR_NAME
        self.host: Host = host or Host()
        self.config: DeployConfig | None = None
        self._variant: ComposeVariant | None = None
        self._service: ServiceDescriptor | None = None

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"{type(self).__name__}(project_dir={self.project_dir!r}, variant={self._variant!r})"

    @property
    def variant(self) -> ComposeVariant:
        """The compose command form, detected on first access."""
        if self._variant is None:
            self._variant = detect_compose_variant()
        return self._variant

    @variant.setter
    def variant(self, value: ComposeVariant) -> None:
        self._variant = value

    @property
    def driver(self) -> ComposeDriver:
        env_file = self.env_file if self.env_file.is_file() else None
        return ComposeDriver(self.variant, self.compose_file, env_file)

    @property
    def service(self) -> ServiceDescriptor:
        """The MinIO service as declared in the compose file."""
        if self._service is None:
            self._service = load_service_descriptor(self.compose_file)
        return self._service

    def require_config(self) -> DeployConfig:
        if self.config is None:
            raise RuntimeError("configuration has not been loaded")
        return self.config

    def dump_logs(self, tail: int | None = None) -> None:
        """Print service logs for diagnostics, never raising."""
        try:
            output = self.driver.logs(self.service.name, tail=tail)
        except DeployError as err:
            console.warning(f"Could not read container logs: {err}")
            return
        console.plain("Container logs:")
        console.console.print(output, markup=False, highlight=False)
