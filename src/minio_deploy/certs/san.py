"""Subject-Alternative-Name assembly.

Builds the ordered SAN list for the MinIO certificate from the host's
network identity and an optional user-supplied list of extra names.
"""

import re

from minio_deploy.models import CertificateRequest, SanEntry, SanType

LOOPBACK_IP = "127.0.0.1"
LOOPBACK_NAME = "localhost"

# Four dot-separated digit groups; octets are not range-checked
_IP_LITERAL_PATTERN = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$")


def classify_san(value: str) -> SanEntry:
    """Tag a single SAN value as an IP literal or a DNS name.

    Args:
        value: The trimmed entry.

    Returns:
        A SanEntry of type IP if the value looks like a dotted quad,
        otherwise DNS.

    """
    if _IP_LITERAL_PATTERN.match(value):
        return SanEntry(SanType.IP, value)
    return SanEntry(SanType.DNS, value)


def seed_entries(local_ip: str, hostname: str) -> list[SanEntry]:
    """Return the four entries every certificate carries, in fixed order."""
    return [
        SanEntry(SanType.IP, LOOPBACK_IP),
        SanEntry(SanType.IP, local_ip),
        SanEntry(SanType.DNS, LOOPBACK_NAME),
        SanEntry(SanType.DNS, hostname),
    ]


def parse_extra_sans(extra: str | None) -> list[SanEntry]:
    """Split a comma-separated list of extra names into SAN entries.

    Whitespace around each entry is trimmed and empty pieces are dropped.
    Input order is preserved and duplicates are kept.

    Args:
        extra: The raw list, e.g. ``"minio.local, 192.168.1.100"``.

    Returns:
        The classified entries, empty if the input is empty or None.

    """
    if not extra:
        return []
    return [classify_san(piece.strip()) for piece in extra.split(",") if piece.strip()]


def build_san_entries(local_ip: str, hostname: str, extra: str | None = None) -> list[SanEntry]:
    """Build the full ordered SAN list.

    Args:
        local_ip: Primary local IPv4 address of the host.
        hostname: Host name.
        extra: Optional comma-separated extra domains or IPs.

    Returns:
        Seed entries followed by the extra entries.

    """
    return [*seed_entries(local_ip, hostname), *parse_extra_sans(extra)]


def build_san_string(local_ip: str, hostname: str, extra: str | None = None) -> str:
    """Build the SAN list in openssl ``subjectAltName`` syntax.

    Example:
        >>> build_san_string("10.0.0.5", "pi", "minio.local")
        'IP:127.0.0.1,IP:10.0.0.5,DNS:localhost,DNS:pi,DNS:minio.local'

    """
    return ",".join(str(entry) for entry in build_san_entries(local_ip, hostname, extra))


def build_certificate_request(local_ip: str, hostname: str, extra: str | None = None) -> CertificateRequest:
    """Build the request for a self-signed certificate for this host.

    The hostname doubles as the certificate common name.
    """
    return CertificateRequest(
        common_name=hostname,
        san_entries=tuple(build_san_entries(local_ip, hostname, extra)),
    )
