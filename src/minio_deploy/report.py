"""Human-readable status output.

Builds the access information, certificate locations and management
commands printed at the end of a deployment or verification run.
"""

from pathlib import Path

from minio_deploy import console
from minio_deploy.certs.generation import cert_path, key_path
from minio_deploy.compose import ComposeDriver
from minio_deploy.models import DeployConfig, ServiceDescriptor

CONTAINER_DATA_PATH = "/data"

_HIDDEN_PASSWORD = "[Hidden for security]"


def access_urls(address: str, service: ServiceDescriptor) -> dict[str, str]:
    """Return the console and API URLs for one address."""
    return {
        "Web Console": f"https://{address}:{service.console_port}",
        "S3 API Endpoint": f"https://{address}:{service.api_port}",
    }


def access_info(
    config: DeployConfig,
    local_ip: str,
    service: ServiceDescriptor,
    *,
    show_password: bool = True,
) -> dict[str, str]:
    """Build the access information for a deployed MinIO.

    Args:
        config: Deployment configuration.
        local_ip: Primary local IP address of the host.
        service: Service name and published ports.
        show_password: Print the password in clear text if True.

    Returns:
        Ordered label -> value pairs.

    """
    network = access_urls(local_ip, service)
    local = access_urls("localhost", service)
    return {
        "Web Console (Network)": network["Web Console"],
        "S3 API (Network)": network["S3 API Endpoint"],
        "Web Console (Local)": local["Web Console"],
        "S3 API (Local)": local["S3 API Endpoint"],
        "Username": config.root_user,
        "Password": config.root_password if show_password else _HIDDEN_PASSWORD,
    }


def storage_info(config: DeployConfig, cert_dir: Path) -> dict[str, str]:
    """Build the data and certificate location information."""
    return {
        "Host Path": str(config.local_mount),
        "Container Path": CONTAINER_DATA_PATH,
        "Private Key": str(key_path(cert_dir)),
        "Public Certificate": str(cert_path(cert_dir)),
    }


def management_commands(driver: ComposeDriver) -> dict[str, str]:
    """Build the management command hints for the detected compose form."""
    return {
        "View logs": driver.command_line("logs"),
        "Stop service": driver.command_line("down"),
        "Restart service": driver.command_line("restart"),
        "Update service": f"{driver.command_line('pull')} && {driver.command_line('up', '-d')}",
    }


def self_signed_note() -> None:
    console.warning("You may need to accept the security warning in your browser")
    console.plain("  since MinIO is using a self-signed certificate.")


def display_deployment_info(
    config: DeployConfig,
    local_ip: str,
    service: ServiceDescriptor,
    cert_dir: Path,
    driver: ComposeDriver,
) -> None:
    """Print everything a user needs after a successful deployment."""
    console.section("Deployment Information")
    console.success("MinIO has been successfully deployed with TLS!")
    console.summary_panel("Access Information", access_info(config, local_ip, service))
    console.summary_panel("Data Storage & Certificates", storage_info(config, cert_dir))
    self_signed_note()
    console.summary_panel("Management Commands", management_commands(driver))


def display_verification_info(config: DeployConfig, local_ip: str, service: ServiceDescriptor) -> None:
    """Print access information after verification, with the password hidden."""
    console.section("Access Information")
    console.success("MinIO is successfully deployed and accessible!")
    console.summary_panel("Access Information", access_info(config, local_ip, service, show_password=False))
    self_signed_note()
