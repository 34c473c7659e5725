"""Data models for minio-deploy.

This module provides type-safe data structures for the application,
replacing loosely-typed dictionaries and ambient environment variables
with proper Python data classes.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NamedTuple


class SanType(str, Enum):
    """Subject-Alternative-Name entry kinds.

    Inherits from str so the value can be used directly when rendering
    the openssl-style ``TYPE:value`` form.
    """

    IP = "IP"
    DNS = "DNS"


class SanEntry(NamedTuple):
    """A single Subject-Alternative-Name entry.

    Attributes:
        type: Whether the value is an IP literal or a DNS name.
        value: The address or name, already trimmed.

    """

    type: SanType
    value: str

    def __str__(self) -> str:
        return f"{self.type.value}:{self.value}"


@dataclass(frozen=True, slots=True)
class CertificateRequest:
    """Everything needed to produce one self-signed certificate.

    Attributes:
        common_name: Host identity placed in the certificate subject.
        san_entries: Ordered SAN entries, seed entries first.
        days: Validity period in days.
        key_size: RSA key size in bits.

    """

    common_name: str
    san_entries: tuple[SanEntry, ...]
    days: int = 365
    key_size: int = 2048

    @property
    def san_string(self) -> str:
        """The SAN list in openssl ``subjectAltName`` syntax."""
        return ",".join(str(entry) for entry in self.san_entries)


class ComposeVariant(Enum):
    """The two command forms of docker compose."""

    MODERN = ("docker", "compose")
    LEGACY = ("docker-compose",)

    @property
    def argv(self) -> list[str]:
        return list(self.value)

    @property
    def display(self) -> str:
        return " ".join(self.value)


@dataclass(frozen=True, slots=True)
class DeployConfig:
    """Deployment settings read once from the .env file.

    Attributes:
        root_user: MinIO admin username.
        root_password: MinIO admin password.
        local_mount: Host directory bind-mounted at /data.
        extra_sans: Optional comma-separated extra SAN entries, None if unset.
        env_file: Path of the .env file the values came from.

    """

    root_user: str
    root_password: str
    local_mount: Path
    env_file: Path
    extra_sans: str | None = None

    def __repr__(self) -> str:
        """Return a representation that never leaks the password."""
        return (
            f"DeployConfig(root_user={self.root_user!r}, root_password='***', "
            f"local_mount={self.local_mount!r}, extra_sans={self.extra_sans!r})"
        )


class ServiceDescriptor(NamedTuple):
    """The MinIO service as declared in docker-compose.yml.

    Attributes:
        name: Compose service name.
        api_port: Host port published for the S3 API.
        console_port: Host port published for the web console.

    """

    name: str
    api_port: int
    console_port: int


@dataclass(frozen=True, slots=True)
class PollResult:
    """Outcome of a bounded health-polling run."""

    ok: bool
    attempts: int


@dataclass(frozen=True, slots=True)
class StepResult:
    """Outcome of one pipeline step.

    Attributes:
        name: Human-readable step name.
        ok: True if the step completed.
        error: The failure raised by the step, if any.

    """

    name: str
    ok: bool
    error: Exception | None = None


@dataclass(slots=True)
class PipelineResult:
    """Outcome of a whole pipeline run."""

    steps: list[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(step.ok for step in self.steps)

    @property
    def failed_step(self) -> StepResult | None:
        return next((step for step in self.steps if not step.ok), None)

    @property
    def error(self) -> Exception | None:
        failed = self.failed_step
        return failed.error if failed else None
