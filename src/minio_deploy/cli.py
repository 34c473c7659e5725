#!/usr/bin/env python
"""Command-line interface for minio-deploy.

This module provides the three entry points of the tool: the deployment
command, the certificate extraction helper and the verification helper.
Each one runs its stages and turns the first failure into a readable
message and exit code 1.
"""

import sys
from pathlib import Path

import click
from icecream import ic
from rich.markup import escape

from minio_deploy import __version__, console
from minio_deploy.certs.extraction import (
    DEFAULT_OUTPUT,
    DEFAULT_PORT,
    extract_certificate,
    install_to_keychain,
    keychain_command_hint,
)
from minio_deploy.core.deployment import Deployment, certificate_steps, deployment_steps
from minio_deploy.core.pipeline import run_pipeline
from minio_deploy.core.verification import Verification, verification_steps
from minio_deploy.exceptions import DeployError, PrerequisiteError, ReadinessError
from minio_deploy.host import INSTALL_HINT, Host
from minio_deploy.models import PipelineResult

_PROJECT_DIR_OPTION = click.option(
    "--project-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="directory holding docker-compose.yml and .env",
)
_DEBUG_OPTION = click.option("--debug", required=False, is_flag=True, help="print debug information")


def report_error(err: Exception, *, readiness_warning: bool = False) -> None:
    """Print a pipeline failure with the remediation text for its kind.

    Args:
        err: The error raised by the failed step.
        readiness_warning: Report a ReadinessError as a warning, the service
            was started and is likely still coming up.

    """
    if readiness_warning and isinstance(err, ReadinessError):
        console.warning(escape(str(err)))
        return

    console.error(escape(str(err)))
    if isinstance(err, PrerequisiteError):
        console.newline()
        console.plain(INSTALL_HINT)


def finish(result: PipelineResult, success_message: str, *, after_start: bool = False) -> None:
    """Print the final status of a pipeline run and exit 1 if it failed.

    Args:
        result: The pipeline outcome.
        success_message: Printed when every step completed.
        after_start: The pipeline started the service, so a readiness
            failure means it is likely still starting.

    """
    ic(result)
    if result.ok:
        console.success(success_message)
        return

    failed = result.failed_step
    error = result.error
    if failed is not None and error is not None:
        report_error(error, readiness_warning=after_start)
        if after_start and isinstance(error, ReadinessError):
            console.error("Deployment completed but MinIO may not be fully ready")
            console.plain("Please check the logs and try accessing the web console")
        else:
            console.error(f"Stopped at step: {failed.name}")
    sys.exit(1)


@click.command(
    help="Deploy MinIO with self-signed TLS certificates using docker compose",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@_DEBUG_OPTION
@click.option("--skip-checks", required=False, is_flag=True, help="skip system requirement checks")
@click.option("--certs-only", required=False, is_flag=True, help="only generate certificates")
@click.option("--deploy-only", required=False, is_flag=True, help="only deploy (skip certificate generation)")
@_PROJECT_DIR_OPTION
def deploy(
    version: bool,
    debug: bool,
    skip_checks: bool,
    certs_only: bool,
    deploy_only: bool,
    project_dir: Path,
) -> None:
    """Run the deployment pipeline.

    Args:
        version: Print version and exit.
        debug: Enable debug output.
        skip_checks: Skip system requirement checks.
        certs_only: Only generate certificates.
        deploy_only: Deploy with existing certificates.
        project_dir: Directory holding docker-compose.yml and .env.

    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        return

    if certs_only and deploy_only:
        raise click.UsageError("--certs-only and --deploy-only cannot be used together")

    console.banner("MinIO Deployment", "Secure S3-Compatible Object Storage")
    deployment = Deployment(project_dir)

    if certs_only:
        result = run_pipeline(certificate_steps(deployment, skip_checks=skip_checks))
        finish(result, "Certificate generation completed")
        return

    result = run_pipeline(deployment_steps(deployment, skip_checks=skip_checks, deploy_only=deploy_only))
    finish(result, "Deployment completed successfully!", after_start=True)


def _print_next_steps(host: str, port: int, output: Path, *, trusted: bool) -> None:
    console.newline()
    console.success("Certificate extraction completed successfully!")
    console.section("Next steps")
    if trusted:
        console.step("Certificate has been installed to your system keychain")
        console.step("You can now use MinIO clients without --insecure flags")
        console.step("Restart your applications to use the new certificate")
    else:
        console.step(f"Certificate saved to: {output}")
        console.step("Use this certificate file with your MinIO clients")
        console.step(f"Or install to keychain manually: {keychain_command_hint(output)}")
    console.newline()
    console.plain("Example usage with MinIO client:")
    console.plain(f"  mc alias set myminio https://{host}:{port} your-username your-password")


@click.command(help="Extract the TLS certificate from a running MinIO server")
@click.option("--host", "-h", "host", required=True, help="MinIO server hostname or IP address")
@click.option("--port", "-p", type=int, default=DEFAULT_PORT, show_default=True, help="MinIO server port")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="output certificate file",
)
@click.option("--keychain", "-k", is_flag=True, help="install certificate to macOS keychain (requires sudo)")
@_DEBUG_OPTION
def get_cert(host: str, port: int, output: Path, keychain: bool, debug: bool) -> None:
    """Fetch a server certificate and optionally trust it.

    Args:
        host: MinIO server hostname or IP address.
        port: MinIO API port.
        output: Where to write the PEM certificate.
        keychain: Install the certificate into the macOS system keychain.
        debug: Enable debug output.

    """
    if not debug:
        ic.disable()

    console.banner("MinIO Certificate Extraction")
    console.summary_panel("Target", {"Host": host, "Port": str(port), "Output": str(output)})

    trusted = False
    try:
        details = extract_certificate(host, port, output)
        console.summary_panel("Certificate Information", details)

        if keychain:
            if Host().is_macos:
                install_to_keychain(output)
                trusted = True
            else:
                console.warning("Keychain installation is only supported on macOS")
    except DeployError as e:
        console.error(escape(str(e)))
        console.error("Certificate extraction failed")
        sys.exit(1)

    _print_next_steps(host, port, output, trusted=trusted)


@click.command(help="Verify that MinIO is properly deployed and accessible")
@_PROJECT_DIR_OPTION
@_DEBUG_OPTION
def verify(project_dir: Path, debug: bool) -> None:
    """Run the verification checks.

    Args:
        project_dir: Directory holding docker-compose.yml and .env.
        debug: Enable debug output.

    """
    if not debug:
        ic.disable()

    console.banner("MinIO Setup Verification")
    result = run_pipeline(verification_steps(Verification(project_dir)))
    finish(result, "Verification completed successfully!")


if __name__ == "__main__":
    deploy()
