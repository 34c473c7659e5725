"""Custom exceptions for minio-deploy.

This module defines the exception hierarchy used throughout the application.
Each class maps to one kind of failure the deployment pipeline can surface,
so the CLI can pick the right remediation text and exit code.
"""


class DeployError(Exception):
    """Base exception for all minio-deploy errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch every deployment failure with a single
    except clause if desired.
    """

    pass


class ConfigurationError(DeployError):
    """Raised when the .env configuration is missing or unusable.

    This can occur when:
    - Neither .env nor env.template exists
    - A required key is missing or empty
    - Credentials still hold their placeholder values
    """

    pass


class PrerequisiteError(DeployError):
    """Raised when a required external tool is not installed.

    This typically means:
    - The docker binary is not on PATH
    - Neither 'docker compose' nor 'docker-compose' is usable
    """

    pass


class CertificateError(DeployError):
    """Raised when a TLS certificate cannot be generated, read or fetched.

    This can occur when:
    - An IP-tagged SAN entry is not a real IP address
    - The certificate directory is not writable
    - The server refuses the TLS handshake during extraction
    """

    pass


class OrchestrationError(DeployError):
    """Raised when the compose stack fails to start, stop or report state."""

    pass


class ReadinessError(DeployError):
    """Raised when the MinIO liveness endpoint never answered successfully.

    The container may simply still be starting, so callers report this
    as a warning while still exiting non-zero.
    """

    pass
