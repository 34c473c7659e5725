"""Shared test fixtures for minio-deploy tests."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from minio_deploy.core.project import Project
from minio_deploy.host import Host
from minio_deploy.models import DeployConfig

COMPOSE_YAML = """services:
  minio:
    image: quay.io/minio/minio:latest
    container_name: minio
    command: server --console-address ":9001" --certs-dir /certs /data
    ports:
      - "9000:9000"
      - "9001:9001"
"""

TEMPLATE_ENV = """MINIO_ROOT_USER=CHANGE_THIS_USERNAME
MINIO_ROOT_PASSWORD=CHANGE_THIS_PASSWORD_BEFORE_DEPLOYMENT
LOCAL_MOUNT=/mnt/minio/data
"""


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project directory with a compose file and an env template."""
    directory = tmp_path / "project"
    directory.mkdir()
    (directory / "docker-compose.yml").write_text(COMPOSE_YAML)
    (directory / "env.template").write_text(TEMPLATE_ENV)
    return directory


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Path used as LOCAL_MOUNT, not created yet."""
    return tmp_path / "minio-data"


@pytest.fixture
def env_file(project_dir: Path, data_dir: Path) -> Path:
    """A valid .env file in the project directory."""
    path = project_dir / ".env"
    path.write_text(
        "MINIO_ROOT_USER=admin\n"
        "MINIO_ROOT_PASSWORD=s3cret-passw0rd\n"
        f"LOCAL_MOUNT={data_dir}\n"
    )
    return path


@pytest.fixture
def deploy_config(env_file: Path, data_dir: Path) -> DeployConfig:
    """A validated configuration matching env_file."""
    return DeployConfig(
        root_user="admin",
        root_password="s3cret-passw0rd",
        local_mount=data_dir,
        env_file=env_file,
    )


@pytest.fixture
def fake_host():
    """A Host with fixed identity and no platform or network lookups."""
    host = MagicMock(spec=Host)
    host.system = "Linux"
    host.hostname = "raspberrypi"
    host.local_ip = "192.168.1.50"
    host.is_linux = True
    host.is_macos = False
    host.in_docker_group.return_value = True
    return host


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for command execution."""
    with patch("subprocess.run") as mock:
        mock.return_value = MagicMock(returncode=0, stdout="", stderr="")
        yield mock


@pytest.fixture
def mock_driver():
    """Mock ComposeDriver returned by Project.driver."""
    driver = MagicMock()
    driver.is_running.return_value = False
    driver.command_line.side_effect = lambda *args: " ".join(["docker", "compose", "-f", "docker-compose.yml", *args])
    with patch.object(Project, "driver", new=property(lambda self: driver)):
        yield driver
