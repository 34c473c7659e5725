"""Interactive user prompts for certificate handling."""

import questionary

from minio_deploy.styles import PROMPT_STYLE, QMARK


def prompt_extra_sans() -> str:
    """Ask for additional domains or IPs to include in the certificate.

    Returns:
        The raw comma-separated answer, empty if the user skipped.

    """
    answer = questionary.text(
        "Additional domains or IP addresses (comma-separated, Enter to skip)",
        instruction="e.g. minio.local,192.168.1.100,my-minio.com",
        style=PROMPT_STYLE,
        qmark=QMARK,
    ).unsafe_ask()
    return answer or ""


def confirm_regenerate() -> bool:
    """Ask whether existing certificates should be replaced."""
    return bool(
        questionary.confirm(
            "Certificates already exist. Do you want to regenerate them?",
            default=False,
            style=PROMPT_STYLE,
            qmark=QMARK,
        ).unsafe_ask()
    )


def confirm_env_edited() -> bool:
    """Wait until the user has edited a freshly created .env file."""
    return bool(
        questionary.confirm(
            "Continue after editing the .env file?",
            default=True,
            style=PROMPT_STYLE,
            qmark=QMARK,
        ).unsafe_ask()
    )
