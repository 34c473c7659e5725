"""Self-signed certificate generation and inspection.

This module turns a CertificateRequest into a private key and a
self-signed certificate on disk, and reads certificates back for
display and expiry checks.
"""

import ipaddress
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from icecream import ic

from minio_deploy import console
from minio_deploy.exceptions import CertificateError
from minio_deploy.models import CertificateRequest, SanEntry, SanType

KEY_FILE_NAME = "private.key"
CERT_FILE_NAME = "public.crt"

_KEY_MODE = 0o600
_CERT_MODE = 0o644

# Placeholder distinguished name fields, only CN carries meaning
_SUBJECT_DEFAULTS = (
    (NameOID.COUNTRY_NAME, "US"),
    (NameOID.STATE_OR_PROVINCE_NAME, "State"),
    (NameOID.LOCALITY_NAME, "City"),
    (NameOID.ORGANIZATION_NAME, "Organization"),
    (NameOID.ORGANIZATIONAL_UNIT_NAME, "OrganizationalUnit"),
)


def key_path(cert_dir: Path) -> Path:
    return cert_dir / KEY_FILE_NAME


def cert_path(cert_dir: Path) -> Path:
    return cert_dir / CERT_FILE_NAME


def certificates_exist(cert_dir: Path) -> bool:
    """Check whether both the private key and certificate are present."""
    return key_path(cert_dir).is_file() and cert_path(cert_dir).is_file()


def _general_name(entry: SanEntry) -> x509.GeneralName:
    """Convert a SAN entry into its x509 representation.

    Raises:
        CertificateError: If an IP-tagged value is not a valid IP address, or
            a DNS-tagged value is not an ASCII (A-label) name.

    """
    if entry.type is SanType.IP:
        try:
            return x509.IPAddress(ipaddress.ip_address(entry.value))
        except ValueError as err:
            raise CertificateError(f"Invalid IP address in Subject Alternative Names: {entry.value}") from err
    try:
        return x509.DNSName(entry.value)
    except ValueError as err:
        raise CertificateError(f"Invalid DNS name in Subject Alternative Names: {entry.value}") from err


def _subject(common_name: str) -> x509.Name:
    attributes = [x509.NameAttribute(oid, value) for oid, value in _SUBJECT_DEFAULTS]
    attributes.append(x509.NameAttribute(NameOID.COMMON_NAME, common_name))
    return x509.Name(attributes)


def build_certificate(request: CertificateRequest) -> tuple[rsa.RSAPrivateKey, x509.Certificate]:
    """Generate a key pair and a self-signed certificate in memory.

    Args:
        request: Common name, SAN entries, validity and key size.

    Returns:
        Tuple of (private key, certificate).

    Raises:
        CertificateError: If a SAN entry cannot be encoded.

    """
    san = x509.SubjectAlternativeName([_general_name(entry) for entry in request.san_entries])

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=request.key_size)
    subject = _subject(request.common_name)
    now = datetime.now(timezone.utc)

    certificate = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(days=request.days))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=False)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=True,
                key_encipherment=True,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=False,
        )
        .add_extension(san, critical=False)
        .sign(private_key, hashes.SHA256())
    )
    return private_key, certificate


def _write_file(path: Path, data: bytes, mode: int) -> None:
    try:
        path.write_bytes(data)
        os.chmod(path, mode)
    except OSError as err:
        raise CertificateError(f"Cannot write {path}: {err.strerror}") from err


def generate_self_signed_cert(request: CertificateRequest, cert_dir: Path) -> tuple[Path, Path]:
    """Generate and store a private key and self-signed certificate.

    Creates ``private.key`` (mode 0600) and ``public.crt`` (mode 0644) in
    the certificate directory, replacing any existing files.

    Args:
        request: What to put in the certificate.
        cert_dir: Target directory, created if missing.

    Returns:
        Tuple of (key path, certificate path).

    Raises:
        CertificateError: If the certificate cannot be built or written.

    """
    console.info(f"Subject Alternative Names: {console.highlight(request.san_string)}")
    ic(request)

    try:
        cert_dir.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise CertificateError(f"Cannot create certificate directory {cert_dir}: {err.strerror}") from err

    with console.spinner(f"Generating {request.key_size}-bit private key and certificate..."):
        private_key, certificate = build_certificate(request)

    key_file = key_path(cert_dir)
    cert_file = cert_path(cert_dir)

    _write_file(
        key_file,
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ),
        _KEY_MODE,
    )
    _write_file(cert_file, certificate.public_bytes(serialization.Encoding.PEM), _CERT_MODE)

    return key_file, cert_file


def load_certificate(path: Path) -> x509.Certificate:
    """Load a PEM certificate from disk.

    Raises:
        CertificateError: If the file is missing or not a PEM certificate.

    """
    try:
        return x509.load_pem_x509_certificate(path.read_bytes())
    except FileNotFoundError as err:
        raise CertificateError(f"Certificate not found: {path}") from err
    except ValueError as err:
        raise CertificateError(f"Certificate file is empty or invalid: {path}") from err


def subject_alt_names(certificate: x509.Certificate) -> list[str]:
    """Return the certificate SANs rendered as ``DNS:x`` / ``IP Address:y``."""
    try:
        extension = certificate.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return []
    names = [f"DNS:{name}" for name in extension.value.get_values_for_type(x509.DNSName)]
    names.extend(f"IP Address:{ip}" for ip in extension.value.get_values_for_type(x509.IPAddress))
    return names


def describe_certificate(certificate: x509.Certificate) -> dict[str, str]:
    """Summarize a certificate for display in a summary panel."""
    details = {
        "Subject": certificate.subject.rfc4514_string(),
        "Issuer": certificate.issuer.rfc4514_string(),
        "Not Before": certificate.not_valid_before_utc.isoformat(),
        "Not After": certificate.not_valid_after_utc.isoformat(),
    }
    names = subject_alt_names(certificate)
    if names:
        details["Alt Names"] = ", ".join(names)
    return details


def expires_within(certificate: x509.Certificate, seconds: int, now: datetime | None = None) -> bool:
    """Check whether the certificate expires within the given number of seconds."""
    now = now or datetime.now(timezone.utc)
    return certificate.not_valid_after_utc <= now + timedelta(seconds=seconds)
