"""Deployment facade.

This module provides the Deployment class, which implements each stage of
a MinIO deployment, and the functions that arrange those stages into the
pipelines the CLI runs.
"""

import os

from minio_deploy import console
from minio_deploy.certs.generation import certificates_exist, generate_self_signed_cert
from minio_deploy.certs.prompts import confirm_env_edited, confirm_regenerate, prompt_extra_sans
from minio_deploy.certs.san import build_certificate_request
from minio_deploy.config import TEMPLATE_EDIT_HINT, create_from_template, load_config, read_extra_sans
from minio_deploy.core.pipeline import Step
from minio_deploy.core.project import Project
from minio_deploy.exceptions import ConfigurationError, OrchestrationError, ReadinessError
from minio_deploy.health import DELAY_SECONDS, MAX_ATTEMPTS, health_url, poll_health
from minio_deploy.models import PollResult
from minio_deploy.report import display_deployment_info

DATA_DIR_MODE = 0o750

REQUIRED_COMMANDS = ["docker"]


class Deployment(Project):
    """Runs the stages of a MinIO deployment in one project directory.

    Each public method is one pipeline stage. Stages raise a DeployError
    subclass on unrecoverable failure and leave everything they already
    did in place.
    """

    def check_requirements(self) -> None:
        """Check the host OS, docker, the compose variant and docker group.

        Raises:
            PrerequisiteError: If docker or compose is not installed.

        """
        console.section("Checking System Requirements")

        if not self.host.is_linux:
            console.warning("minio-deploy is designed for Linux (Raspberry Pi). Continuing anyway...")

        self.host.ensure_commands(REQUIRED_COMMANDS)
        for cmd in REQUIRED_COMMANDS:
            console.success(f"{cmd} is installed")

        console.success(f"{self.variant.display} is available")

        if not self.host.in_docker_group():
            console.warning("User is not in the docker group. You may need to run docker commands with sudo.")
            console.step("To fix this, run: sudo usermod -aG docker $USER, then log out and back in.")

    def setup_environment(self) -> None:
        """Load and validate .env, creating it from env.template if missing.

        Raises:
            ConfigurationError: If the configuration is missing or invalid, or
                the user declined to continue after the template was copied.

        """
        console.section("Setting Up Environment")

        if not self.env_file.is_file():
            console.warning(".env file not found. Creating from template...")
            create_from_template(self.project_dir)
            console.success("Created .env file from template")
            console.newline()
            console.plain(f"[warning]IMPORTANT:[/warning] {TEMPLATE_EDIT_HINT}")
            if not confirm_env_edited():
                raise ConfigurationError(f"Edit {self.env_file} and run the deployment again")
        else:
            console.success(".env file found")

        self.config = load_config(self.env_file)
        console.success("Environment configuration validated")

    def create_data_directory(self) -> None:
        """Create the host data directory and restrict its permissions.

        Existing contents are never touched.

        Raises:
            ConfigurationError: If the directory cannot be created or chmod-ed.

        """
        console.section("Creating Data Directory")
        data_dir = self.require_config().local_mount

        try:
            if not data_dir.is_dir():
                console.action(f"Creating data directory: {console.highlight(str(data_dir))}")
                data_dir.mkdir(parents=True, exist_ok=True)
                console.success("Data directory created")
            else:
                console.success("Data directory already exists")

            os.chmod(data_dir, DATA_DIR_MODE)
        except OSError as err:
            raise ConfigurationError(f"Cannot prepare data directory {data_dir}: {err.strerror}") from err

        console.success(f"Data directory permissions set ({DATA_DIR_MODE:o})")

    def _extra_sans(self) -> str:
        if self.config is not None:
            extra = self.config.extra_sans
        else:
            extra = read_extra_sans(self.env_file)

        if extra is None:
            return prompt_extra_sans()
        console.info(f"Using additional names from .env: {console.highlight(extra)}")
        return extra

    def generate_certificates(self) -> None:
        """Generate a self-signed certificate, or keep the existing one.

        Raises:
            CertificateError: If the certificate cannot be generated.

        """
        console.section("Generating TLS Certificates")

        if certificates_exist(self.cert_dir) and not confirm_regenerate():
            console.success("Using existing certificates")
            return

        console.info(f"Detected local IP: {console.highlight(self.host.local_ip)}")
        console.info(f"Detected hostname: {console.highlight(self.host.hostname)}")

        request = build_certificate_request(self.host.local_ip, self.host.hostname, self._extra_sans())
        key_file, cert_file = generate_self_signed_cert(request, self.cert_dir)

        console.success("Certificates generated successfully!")
        console.step(f"Private key: {key_file}")
        console.step(f"Public certificate: {cert_file}")
        console.warning(f"These certificates are valid for {request.days} days.")

    def deploy(self) -> None:
        """Stop a running stack, then start it again in the background.

        Raises:
            OrchestrationError: If compose fails; service logs are printed.

        """
        console.section("Deploying MinIO")
        driver = self.driver
        service = self.service.name

        try:
            if driver.is_running(service):
                console.action("Stopping existing MinIO containers...")
                driver.down()

            with console.spinner("Starting MinIO containers..."):
                driver.up()
        except OrchestrationError:
            self.dump_logs()
            raise

        console.success("MinIO containers started")

    def wait_until_ready(self, max_attempts: int = MAX_ATTEMPTS, delay: float = DELAY_SECONDS) -> PollResult:
        """Poll the MinIO liveness endpoint.

        Raises:
            ReadinessError: If the endpoint never answered successfully.

        """
        console.section("Waiting for MinIO to be Ready")

        result = poll_health(health_url("localhost", self.service.api_port), max_attempts, delay)
        if not result.ok:
            raise ReadinessError(
                "MinIO failed to start within expected time\n"
                f"Check the logs with: {self.driver.command_line('logs')}"
            )

        console.success("MinIO is ready!")
        return result

    def display_info(self) -> None:
        display_deployment_info(self.require_config(), self.host.local_ip, self.service, self.cert_dir, self.driver)


def certificate_steps(deployment: Deployment, *, skip_checks: bool = False) -> list[Step]:
    """Build the pipeline that only generates certificates."""
    steps = [] if skip_checks else [Step("check requirements", deployment.check_requirements)]
    steps.append(Step("generate certificates", deployment.generate_certificates))
    return steps


def deployment_steps(
    deployment: Deployment,
    *,
    skip_checks: bool = False,
    deploy_only: bool = False,
) -> list[Step]:
    """Build the full deployment pipeline.

    Args:
        deployment: The deployment whose stages are arranged.
        skip_checks: Leave out the system requirement checks.
        deploy_only: Leave out certificate generation.

    Returns:
        The ordered steps.

    """
    steps = [] if skip_checks else [Step("check requirements", deployment.check_requirements)]
    steps.append(Step("set up environment", deployment.setup_environment))
    if not deploy_only:
        steps.append(Step("generate certificates", deployment.generate_certificates))
    steps.extend(
        [
            Step("create data directory", deployment.create_data_directory),
            Step("deploy", deployment.deploy),
            Step("wait for readiness", deployment.wait_until_ready),
            Step("display information", deployment.display_info),
        ]
    )
    return steps
