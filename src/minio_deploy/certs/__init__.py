"""Certificate management subpackage.

This package contains modules for SAN assembly, self-signed certificate
generation, certificate extraction from a running server, and the
related interactive prompts.
"""

from minio_deploy.certs.extraction import extract_certificate, fetch_server_certificate, install_to_keychain
from minio_deploy.certs.generation import (
    certificates_exist,
    describe_certificate,
    generate_self_signed_cert,
    load_certificate,
)
from minio_deploy.certs.san import build_certificate_request, build_san_entries, build_san_string, classify_san

__all__ = [
    # san
    "classify_san",
    "build_san_entries",
    "build_san_string",
    "build_certificate_request",
    # generation
    "certificates_exist",
    "generate_self_signed_cert",
    "load_certificate",
    "describe_certificate",
    # extraction
    "fetch_server_certificate",
    "extract_certificate",
    "install_to_keychain",
]
