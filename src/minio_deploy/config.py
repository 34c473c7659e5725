"""Deployment configuration loading and validation.

The .env file is the single place where deployment settings enter the
program. It is parsed with python-dotenv, validated, and turned into an
immutable DeployConfig that every later stage receives explicitly.
"""

import shutil
from pathlib import Path

from dotenv import dotenv_values
from icecream import ic

from minio_deploy.exceptions import ConfigurationError
from minio_deploy.models import DeployConfig

ENV_FILE_NAME = ".env"
ENV_TEMPLATE_NAME = "env.template"

ROOT_USER_KEY = "MINIO_ROOT_USER"
ROOT_PASSWORD_KEY = "MINIO_ROOT_PASSWORD"
LOCAL_MOUNT_KEY = "LOCAL_MOUNT"
EXTRA_SANS_KEY = "MINIO_EXTRA_SANS"

REQUIRED_KEYS = (ROOT_USER_KEY, ROOT_PASSWORD_KEY, LOCAL_MOUNT_KEY)

# Values shipped in env.template that must never reach a running deployment
PLACEHOLDERS = {
    ROOT_USER_KEY: "CHANGE_THIS_USERNAME",
    ROOT_PASSWORD_KEY: "CHANGE_THIS_PASSWORD_BEFORE_DEPLOYMENT",
}

_MISSING_KEYS_HINT = f"Required variables: {', '.join(REQUIRED_KEYS)}"

_PLACEHOLDER_HINT = f"""Please update the following in your .env file:
  - {ROOT_USER_KEY}: Set to your desired admin username
  - {ROOT_PASSWORD_KEY}: Set to a secure password

For security reasons, deployment cannot proceed with placeholder values."""

TEMPLATE_EDIT_HINT = f"""Please edit the .env file and update the following:
  - {ROOT_USER_KEY}: Change to your admin username
  - {ROOT_PASSWORD_KEY}: Change to a secure password
  - {LOCAL_MOUNT_KEY}: Set to your desired data storage path"""


def read_env_file(env_file: Path) -> dict[str, str]:
    """Parse a key=value environment file.

    Keys without a value are returned as empty strings rather than None.

    Args:
        env_file: Path to the .env file.

    Returns:
        Mapping of keys to string values.

    Raises:
        ConfigurationError: If the file does not exist.

    """
    if not env_file.is_file():
        raise ConfigurationError(f"{env_file} not found")

    values = {key: value or "" for key, value in dotenv_values(env_file).items()}
    ic(sorted(values))
    return values


def require_keys(values: dict[str, str]) -> None:
    """Ensure every required key is present and non-empty.

    Raises:
        ConfigurationError: If a required key is missing or empty.

    """
    missing = [key for key in REQUIRED_KEYS if not values.get(key, "").strip()]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables in .env file: {', '.join(missing)}\n{_MISSING_KEYS_HINT}"
        )


def validate_values(values: dict[str, str]) -> None:
    """Validate raw .env values before anything acts on them.

    Args:
        values: Mapping read from the .env file.

    Raises:
        ConfigurationError: If a required key is missing or empty, or if a
            credential still equals its placeholder value.

    """
    require_keys(values)

    placeholders = [key for key, sentinel in PLACEHOLDERS.items() if values.get(key) == sentinel]
    if placeholders:
        raise ConfigurationError(
            f"Placeholder credentials detected in .env file: {', '.join(placeholders)}\n{_PLACEHOLDER_HINT}"
        )


def build_config(values: dict[str, str], env_file: Path, *, allow_placeholders: bool = False) -> DeployConfig:
    """Validate raw values and build a DeployConfig from them.

    Args:
        values: Mapping read from the .env file.
        env_file: Path the values were read from.
        allow_placeholders: Only check that required keys are set. Used when
            inspecting an existing deployment rather than creating one.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If validation fails.

    """
    if allow_placeholders:
        require_keys(values)
    else:
        validate_values(values)
    extra_sans = values.get(EXTRA_SANS_KEY, "").strip() or None
    # docker compose resolves a relative bind-mount source against the project directory
    local_mount = Path(values[LOCAL_MOUNT_KEY]).expanduser()
    if not local_mount.is_absolute():
        local_mount = env_file.parent.resolve() / local_mount
    return DeployConfig(
        root_user=values[ROOT_USER_KEY],
        root_password=values[ROOT_PASSWORD_KEY],
        local_mount=local_mount,
        env_file=env_file,
        extra_sans=extra_sans,
    )


def load_config(env_file: Path, *, allow_placeholders: bool = False) -> DeployConfig:
    """Read and validate the .env file in one step.

    Args:
        env_file: Path to the .env file.
        allow_placeholders: Skip the placeholder check, see build_config.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: If the file is missing or validation fails.

    """
    return build_config(read_env_file(env_file), env_file, allow_placeholders=allow_placeholders)


def read_extra_sans(env_file: Path) -> str | None:
    """Return the optional extra SAN list without validating anything else.

    Used when only certificates are generated, so an incomplete .env
    does not block it.

    Args:
        env_file: Path to the .env file, which may not exist.

    Returns:
        The raw comma-separated list, or None if the file or key is absent.

    """
    if not env_file.is_file():
        return None
    value = (dotenv_values(env_file).get(EXTRA_SANS_KEY) or "").strip()
    return value or None


def create_from_template(project_dir: Path) -> Path:
    """Create .env from env.template in the project directory.

    Args:
        project_dir: Directory holding env.template.

    Returns:
        Path of the newly created .env file.

    Raises:
        ConfigurationError: If env.template does not exist.

    """
    template = project_dir / ENV_TEMPLATE_NAME
    env_file = project_dir / ENV_FILE_NAME
    if not template.is_file():
        raise ConfigurationError(f"Neither {ENV_FILE_NAME} nor {ENV_TEMPLATE_NAME} found in {project_dir}")

    shutil.copyfile(template, env_file)
    return env_file
