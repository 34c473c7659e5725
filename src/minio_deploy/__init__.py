"""minio-deploy: Deploy MinIO with self-signed TLS on a single host.

This package generates a self-signed certificate for the host, validates
the .env configuration, drives docker compose and waits for the MinIO
liveness endpoint.

Example usage:
    from pathlib import Path

    from minio_deploy import Deployment, deployment_steps, run_pipeline

    deployment = Deployment(Path("."))
    result = run_pipeline(deployment_steps(deployment, deploy_only=True))
"""

__version__ = "0.1.0"

from minio_deploy.certs.san import build_san_string
from minio_deploy.cli import deploy, get_cert, verify
from minio_deploy.core import Deployment, Verification, deployment_steps, run_pipeline, verification_steps
from minio_deploy.exceptions import (
    CertificateError,
    ConfigurationError,
    DeployError,
    OrchestrationError,
    PrerequisiteError,
    ReadinessError,
)
from minio_deploy.health import poll_health

__all__ = [
    # Version
    "__version__",
    # CLI
    "deploy",
    "get_cert",
    "verify",
    # Classes
    "Deployment",
    "Verification",
    # Functions
    "build_san_string",
    "deployment_steps",
    "poll_health",
    "run_pipeline",
    "verification_steps",
    # Exceptions
    "DeployError",
    "CertificateError",
    "ConfigurationError",
    "OrchestrationError",
    "PrerequisiteError",
    "ReadinessError",
]
