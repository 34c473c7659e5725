"""Tests for compose.py module."""

import subprocess
from unittest.mock import MagicMock

import pytest

from minio_deploy.compose import ComposeDriver, detect_compose_variant, load_service_descriptor
from minio_deploy.exceptions import ConfigurationError, OrchestrationError, PrerequisiteError
from minio_deploy.models import ComposeVariant, ServiceDescriptor


class TestDetectComposeVariant:
    """Tests for compose command detection."""

    def test_modern_preferred(self, mock_subprocess):
        """Test that 'docker compose' wins when it works."""
        assert detect_compose_variant() is ComposeVariant.MODERN
        mock_subprocess.assert_called_once()
        assert mock_subprocess.call_args[0][0] == ["docker", "compose", "version"]

    def test_legacy_fallback(self, mock_subprocess):
        """Test that 'docker-compose' is used when the plugin fails."""
        mock_subprocess.side_effect = [MagicMock(returncode=1), MagicMock(returncode=0)]

        assert detect_compose_variant() is ComposeVariant.LEGACY
        assert mock_subprocess.call_args[0][0] == ["docker-compose", "version"]

    def test_legacy_when_docker_missing(self, mock_subprocess):
        """Test that a missing docker binary falls through to the next probe."""
        mock_subprocess.side_effect = [FileNotFoundError("docker"), MagicMock(returncode=0)]

        assert detect_compose_variant() is ComposeVariant.LEGACY

    def test_neither_available(self, mock_subprocess):
        """Test that a missing compose raises a prerequisite error."""
        mock_subprocess.side_effect = [MagicMock(returncode=1), FileNotFoundError("docker-compose")]

        with pytest.raises(PrerequisiteError) as exc_info:
            detect_compose_variant()
        assert "docker compose" in str(exc_info.value)


class TestComposeDriver:
    """Tests for compose command execution."""

    def test_up_command(self, mock_subprocess, tmp_path):
        """Test that up runs detached with file flags."""
        compose_file = tmp_path / "docker-compose.yml"
        env_file = tmp_path / ".env"
        driver = ComposeDriver(ComposeVariant.MODERN, compose_file, env_file)

        driver.up()

        cmd = mock_subprocess.call_args[0][0]
        assert cmd == ["docker", "compose", "-f", str(compose_file), "--env-file", str(env_file), "up", "-d"]

    def test_legacy_down_command(self, mock_subprocess, tmp_path):
        """Test that the legacy form is used for every call."""
        compose_file = tmp_path / "docker-compose.yml"
        driver = ComposeDriver(ComposeVariant.LEGACY, compose_file)

        driver.down()

        assert mock_subprocess.call_args[0][0] == ["docker-compose", "-f", str(compose_file), "down"]

    def test_failure_raises_orchestration_error(self, mock_subprocess, tmp_path):
        """Test that a failing compose call raises with stderr details."""
        mock_subprocess.side_effect = subprocess.CalledProcessError(1, "docker", stderr="port is already allocated")
        driver = ComposeDriver(ComposeVariant.MODERN, tmp_path / "docker-compose.yml")

        with pytest.raises(OrchestrationError) as exc_info:
            driver.up()
        assert "port is already allocated" in str(exc_info.value)
        assert "exit code 1" in str(exc_info.value)

    def test_missing_binary_raises_prerequisite_error(self, mock_subprocess, tmp_path):
        """Test that a vanished binary is reported as a prerequisite error."""
        mock_subprocess.side_effect = FileNotFoundError("docker")
        driver = ComposeDriver(ComposeVariant.MODERN, tmp_path / "docker-compose.yml")

        with pytest.raises(PrerequisiteError):
            driver.ps()

    def test_is_running(self, mock_subprocess, tmp_path):
        """Test that the ps listing is searched for the service."""
        driver = ComposeDriver(ComposeVariant.MODERN, tmp_path / "docker-compose.yml")

        mock_subprocess.return_value = MagicMock(stdout="NAME   IMAGE\nminio  quay.io/minio/minio   Up 2 minutes\n")
        assert driver.is_running("minio") is True

        mock_subprocess.return_value = MagicMock(stdout="NAME   IMAGE\n")
        assert driver.is_running("minio") is False

    def test_container_id(self, mock_subprocess, tmp_path):
        """Test that the container ID is stripped."""
        mock_subprocess.return_value = MagicMock(stdout="abc123\n")
        driver = ComposeDriver(ComposeVariant.MODERN, tmp_path / "docker-compose.yml")

        assert driver.container_id("minio") == "abc123"
        assert mock_subprocess.call_args[0][0][-3:] == ["ps", "-q", "minio"]

    def test_logs_tail(self, mock_subprocess, tmp_path):
        """Test that tail is passed before the service name."""
        driver = ComposeDriver(ComposeVariant.MODERN, tmp_path / "docker-compose.yml")

        driver.logs("minio", tail=20)

        assert mock_subprocess.call_args[0][0][-4:] == ["logs", "--tail", "20", "minio"]

    def test_container_health(self, mock_subprocess):
        """Test that docker inspect output is returned."""
        mock_subprocess.return_value = MagicMock(stdout="healthy\n")

        assert ComposeDriver.container_health("abc123") == "healthy"
        assert mock_subprocess.call_args[0][0][:2] == ["docker", "inspect"]

    def test_container_health_unknown(self, mock_subprocess):
        """Test that inspect failures map to unknown."""
        mock_subprocess.side_effect = subprocess.CalledProcessError(1, "docker")

        assert ComposeDriver.container_health("abc123") == "unknown"

    def test_command_line(self, tmp_path):
        """Test that hint commands omit the env file."""
        compose_file = tmp_path / "docker-compose.yml"
        driver = ComposeDriver(ComposeVariant.LEGACY, compose_file, tmp_path / ".env")

        assert driver.command_line("logs") == f"docker-compose -f {compose_file} logs"


class TestLoadServiceDescriptor:
    """Tests for compose file parsing."""

    def test_project_compose_file(self, project_dir):
        """Test the descriptor of the shipped compose layout."""
        descriptor = load_service_descriptor(project_dir / "docker-compose.yml")
        assert descriptor == ServiceDescriptor(name="minio", api_port=9000, console_port=9001)

    def test_remapped_ports(self, tmp_path):
        """Test that host ports are read from the short syntax."""
        compose_file = tmp_path / "docker-compose.yml"
        compose_file.write_text(
            "services:\n"
            "  proxy:\n"
            "    image: nginx\n"
            "  storage:\n"
            "    image: quay.io/minio/minio:latest\n"
            "    ports:\n"
            '      - "0.0.0.0:19000:9000"\n'
            '      - "19001:9001/tcp"\n'
        )

        assert load_service_descriptor(compose_file) == ServiceDescriptor("storage", 19000, 19001)

    def test_long_port_syntax(self, tmp_path):
        """Test that the long port mapping syntax is understood."""
        compose_file = tmp_path / "docker-compose.yml"
        compose_file.write_text(
            "services:\n"
            "  minio:\n"
            "    image: minio/minio\n"
            "    ports:\n"
            "      - target: 9000\n"
            "        published: 8443\n"
        )

        assert load_service_descriptor(compose_file) == ServiceDescriptor("minio", 8443, 9001)

    def test_no_services(self, tmp_path):
        """Test that an empty compose file yields the defaults."""
        compose_file = tmp_path / "docker-compose.yml"
        compose_file.write_text("")

        assert load_service_descriptor(compose_file) == ServiceDescriptor("minio", 9000, 9001)

    def test_missing_file(self, tmp_path):
        """Test that a missing compose file raises."""
        with pytest.raises(ConfigurationError):
            load_service_descriptor(tmp_path / "docker-compose.yml")

    def test_malformed_yaml(self, tmp_path):
        """Test that invalid YAML raises."""
        compose_file = tmp_path / "docker-compose.yml"
        compose_file.write_text("services: [unclosed\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_service_descriptor(compose_file)
        assert "malformed YAML" in str(exc_info.value)
