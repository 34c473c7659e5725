"""Verification of a running MinIO deployment.

Inspects the configuration, certificates, data directory, container and
HTTP endpoints of an existing deployment without changing anything.
"""

import os

from minio_deploy import console
from minio_deploy.certs.generation import (
    cert_path,
    certificates_exist,
    describe_certificate,
    expires_within,
    load_certificate,
)
from minio_deploy.config import load_config
from minio_deploy.core.pipeline import Step
from minio_deploy.core.project import Project
from minio_deploy.exceptions import CertificateError, ConfigurationError, OrchestrationError, ReadinessError
from minio_deploy.health import check_endpoint, health_url
from minio_deploy.report import display_verification_info

# Minimum remaining certificate lifetime before a warning
EXPIRY_MARGIN_SECONDS = 86400

UNHEALTHY_LOG_LINES = 20


class Verification(Project):
    """Runs the read-only checks of an existing deployment."""

    def check_configuration(self) -> None:
        """Check the compose file and the required .env keys.

        Raises:
            ConfigurationError: If either file is missing or a key is unset.

        """
        console.section("Checking Configuration Files")

        if not self.compose_file.is_file():
            raise ConfigurationError(
                f"{self.compose_file.name} not found. Please run this command from the project directory."
            )
        console.success(f"{self.compose_file.name} found")

        if not self.env_file.is_file():
            raise ConfigurationError(".env file not found")
        console.success(".env file exists")

        self.config = load_config(self.env_file, allow_placeholders=True)
        console.success("Required environment variables are set")

    def check_certificates(self) -> None:
        """Check that certificates exist and stay valid for another day.

        Raises:
            CertificateError: If the files are missing or unreadable.

        """
        console.section("Checking TLS Certificates")

        if not certificates_exist(self.cert_dir):
            raise CertificateError("TLS certificates not found")
        console.success("TLS certificates exist")

        certificate = load_certificate(cert_path(self.cert_dir))
        if expires_within(certificate, EXPIRY_MARGIN_SECONDS):
            console.warning("Certificate expires within 24 hours")
        else:
            console.success("Certificate is valid for at least 24 hours")

        console.summary_panel("Certificate Details", describe_certificate(certificate))

    def check_data_directory(self) -> None:
        """Check that the data directory exists and is writable.

        Raises:
            ConfigurationError: If the directory does not exist.

        """
        console.section("Checking Data Directory")
        data_dir = self.require_config().local_mount

        if not data_dir.is_dir():
            raise ConfigurationError(f"Data directory not found: {data_dir}")
        console.success(f"Data directory exists: {console.highlight(str(data_dir))}")

        if os.access(data_dir, os.W_OK):
            console.success("Data directory is writable")
        else:
            console.warning("Data directory may not be writable")

    def check_container(self) -> None:
        """Check that the MinIO container runs and is not unhealthy.

        Raises:
            OrchestrationError: If the container is missing or unhealthy;
                recent logs are printed for the unhealthy case.

        """
        console.section("Checking Docker Containers")
        driver = self.driver
        service = self.service.name

        listing = driver.ps()
        if service not in listing:
            raise OrchestrationError(f"MinIO container is not running\nTry running: {driver.command_line('up', '-d')}")
        console.success("MinIO container is running")

        container_id = driver.container_id(service)
        if not container_id:
            raise OrchestrationError("Could not get container ID")

        match driver.container_health(container_id):
            case "healthy":
                console.success("Container is healthy")
            case "starting":
                console.warning("Container is still starting up")
            case "unhealthy":
                console.error("Container is unhealthy")
                self.dump_logs(tail=UNHEALTHY_LOG_LINES)
                raise OrchestrationError("MinIO container is unhealthy")
            case _:
                if "Up" in listing:
                    console.success("Container is running (no health check configured)")
                else:
                    console.warning("Container may not be healthy")

    def check_health_endpoint(self) -> None:
        """Check the liveness endpoint once.

        Raises:
            ReadinessError: If the endpoint does not answer successfully.

        """
        console.section("Checking MinIO Health")

        if not check_endpoint(health_url("localhost", self.service.api_port)):
            raise ReadinessError(
                "MinIO health endpoint is not responding\n"
                "MinIO may still be starting up. Wait a few moments and try again."
            )
        console.success("MinIO health endpoint is responding")

    def check_web_console(self) -> None:
        console.section("Checking Web Console")

        if check_endpoint(f"https://localhost:{self.service.console_port}"):
            console.success("Web console is accessible")
        else:
            console.warning("Web console may not be fully ready")

    def display_info(self) -> None:
        display_verification_info(self.require_config(), self.host.local_ip, self.service)


def verification_steps(verification: Verification) -> list[Step]:
    """Build the verification pipeline."""
    return [
        Step("check configuration", verification.check_configuration),
        Step("check certificates", verification.check_certificates),
        Step("check data directory", verification.check_data_directory),
        Step("check container", verification.check_container),
        Step("check health endpoint", verification.check_health_endpoint),
        Step("check web console", verification.check_web_console),
        Step("display information", verification.display_info),
    ]
