"""Tests for host.py module."""

import socket
from unittest.mock import MagicMock, patch

import pytest

from minio_deploy.exceptions import PrerequisiteError
from minio_deploy.host import Host, get_local_ip


class TestGetLocalIp:
    """Tests for primary address detection."""

    def test_udp_socket_address(self):
        """Test that the local side of the UDP socket is used."""
        sock = MagicMock()
        sock.__enter__.return_value = sock
        sock.getsockname.return_value = ("192.168.1.50", 54321)
        with patch("minio_deploy.host.socket.socket", return_value=sock):
            assert get_local_ip() == "192.168.1.50"

    def test_hostname_fallback(self):
        """Test fallback to resolving the hostname without a route."""
        with (
            patch("minio_deploy.host.socket.socket", side_effect=OSError("Network is unreachable")),
            patch("minio_deploy.host.socket.gethostname", return_value="raspberrypi"),
            patch("minio_deploy.host.socket.gethostbyname", return_value="10.0.0.5") as mock_resolve,
        ):
            assert get_local_ip() == "10.0.0.5"
            mock_resolve.assert_called_once_with("raspberrypi")

    def test_loopback_fallback(self):
        """Test fallback to loopback when nothing resolves."""
        with (
            patch("minio_deploy.host.socket.socket", side_effect=OSError("Network is unreachable")),
            patch("minio_deploy.host.socket.gethostbyname", side_effect=socket.gaierror("unknown host")),
        ):
            assert get_local_ip() == "127.0.0.1"


class TestHostInit:
    """Tests for Host initialization."""

    def test_init_sets_identity(self):
        """Test that Host records system, hostname and address."""
        with (
            patch("minio_deploy.host.platform.system", return_value="Linux"),
            patch("minio_deploy.host.get_hostname", return_value="raspberrypi"),
            patch("minio_deploy.host.get_local_ip", return_value="192.168.1.50"),
        ):
            host = Host()

        assert host.hostname == "raspberrypi"
        assert host.local_ip == "192.168.1.50"
        assert host.is_linux is True
        assert host.is_macos is False
        assert "raspberrypi" in repr(host)

    def test_macos(self):
        """Test macOS detection."""
        with (
            patch("minio_deploy.host.platform.system", return_value="Darwin"),
            patch("minio_deploy.host.get_local_ip", return_value="127.0.0.1"),
        ):
            host = Host()

        assert host.is_macos is True
        assert host.is_linux is False


class TestCommands:
    """Tests for installed command checks."""

    def test_missing_commands(self):
        """Test that only missing commands are returned, in order."""
        def which(cmd: str) -> str | None:
            return "/usr/bin/docker" if cmd == "docker" else None

        with patch("minio_deploy.host.shutil.which", side_effect=which):
            assert Host.missing_commands(["docker", "openssl", "curl"]) == ["openssl", "curl"]

    def test_ensure_commands_raises(self):
        """Test that a missing command raises PrerequisiteError."""
        with (
            patch("minio_deploy.host.get_local_ip", return_value="127.0.0.1"),
            patch("minio_deploy.host.shutil.which", return_value=None),
        ):
            host = Host()
            with pytest.raises(PrerequisiteError) as exc_info:
                host.ensure_commands(["docker"])
        assert "docker" in str(exc_info.value)

    def test_ensure_commands_passes(self):
        """Test that installed commands pass."""
        with (
            patch("minio_deploy.host.get_local_ip", return_value="127.0.0.1"),
            patch("minio_deploy.host.shutil.which", return_value="/usr/bin/docker"),
        ):
            Host().ensure_commands(["docker"])


class TestDockerGroup:
    """Tests for docker group membership."""

    def test_member(self):
        """Test membership through the process groups."""
        with (
            patch("minio_deploy.host.grp.getgrnam", return_value=MagicMock(gr_gid=999)),
            patch("minio_deploy.host.os.getgroups", return_value=[4, 27, 999]),
        ):
            assert Host.in_docker_group() is True

    def test_not_member(self):
        """Test a user outside the docker group."""
        with (
            patch("minio_deploy.host.grp.getgrnam", return_value=MagicMock(gr_gid=999)),
            patch("minio_deploy.host.os.getgroups", return_value=[4, 27]),
        ):
            assert Host.in_docker_group() is False

    def test_no_group(self):
        """Test a system without a docker group."""
        with patch("minio_deploy.host.grp.getgrnam", side_effect=KeyError("docker")):
            assert Host.in_docker_group() is False
