"""Fetch a server's TLS certificate and optionally trust it locally.

Clients of a self-signed MinIO need its certificate to avoid insecure
flags. This module downloads it from a running server, checks it parses,
writes it as PEM and can install it into the macOS system keychain.
"""

import contextlib
import ssl
import subprocess
from pathlib import Path

from icecream import ic

from minio_deploy import console
from minio_deploy.certs.generation import describe_certificate, load_certificate
from minio_deploy.exceptions import CertificateError

DEFAULT_PORT = 9000
DEFAULT_OUTPUT = "minio-cert.pem"
DEFAULT_TIMEOUT = 10.0

SYSTEM_KEYCHAIN = "/Library/Keychains/System.keychain"

_TROUBLESHOOTING = """Troubleshooting steps:
1. Verify MinIO is running: curl -k https://{host}:{port}/minio/health/live
2. Check if port {port} is correct (MinIO API port, not console port)
3. Verify network connectivity: ping {host}
4. Check firewall settings"""


def fetch_server_certificate(host: str, port: int = DEFAULT_PORT, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Download the certificate a TLS server presents, without verifying it.

    Args:
        host: Server hostname or IP address, also sent as SNI.
        port: Server port.
        timeout: Connection timeout in seconds.

    Returns:
        The certificate in PEM form.

    Raises:
        CertificateError: If no TLS connection can be established.

    """
    ic(host, port)
    try:
        return ssl.get_server_certificate((host, port), timeout=timeout)
    except OSError as err:
        raise CertificateError(
            f"Cannot establish TLS connection to {host}:{port}: {err}\n"
            + _TROUBLESHOOTING.format(host=host, port=port)
        ) from err


def save_certificate(pem: str, output: Path) -> Path:
    """Write a PEM certificate and check that it loads back.

    Args:
        pem: The certificate text.
        output: Destination path.

    Returns:
        The output path.

    Raises:
        CertificateError: If the file cannot be written or is not a valid
            certificate, in which case the partial file is removed.

    """
    try:
        output.write_text(pem)
    except OSError as err:
        raise CertificateError(f"Cannot write {output}: {err.strerror}") from err

    try:
        load_certificate(output)
    except CertificateError:
        with contextlib.suppress(OSError):
            output.unlink(missing_ok=True)
        raise
    return output


def extract_certificate(host: str, port: int, output: Path) -> dict[str, str]:
    """Fetch, store and describe the certificate of a MinIO server.

    Returns:
        Display details of the stored certificate.

    Raises:
        CertificateError: If fetching or storing fails.

    """
    console.action(f"Extracting certificate from {console.highlight(f'{host}:{port}')}")
    with console.spinner("Connecting and extracting certificate..."):
        pem = fetch_server_certificate(host, port)
    save_certificate(pem, output)
    console.success(f"Certificate extracted successfully to {console.highlight(str(output))}")
    return describe_certificate(load_certificate(output))


def install_to_keychain(cert_file: Path) -> None:
    """Install a certificate as a trusted root in the macOS system keychain.

    Requires administrator privileges; sudo prompts for the password.

    Args:
        cert_file: PEM certificate to trust.

    Raises:
        CertificateError: If the security command fails or is unavailable.

    """
    cmd: list[str] = [
        "sudo",
        "security",
        "add-trusted-cert",
        "-d",
        "-r",
        "trustRoot",
        "-k",
        SYSTEM_KEYCHAIN,
        str(cert_file),
    ]
    ic(cmd)

    console.action("Installing certificate to macOS system keychain (requires administrator privileges)")
    try:
        subprocess.run(cmd, check=True)
    except FileNotFoundError as err:
        raise CertificateError("The 'security' tool is not available on this system") from err
    except subprocess.CalledProcessError as err:
        raise CertificateError(f"Failed to install certificate to keychain (exit code {err.returncode})") from err

    console.success("Certificate installed successfully to system keychain")


def keychain_command_hint(cert_file: Path) -> str:
    """Return the manual command for trusting the certificate on macOS."""
    return f"sudo security add-trusted-cert -d -r trustRoot -k {SYSTEM_KEYCHAIN} {cert_file}"
