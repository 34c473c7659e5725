"""MinIO liveness polling.

The server is reachable over HTTPS with a self-signed certificate, so
every request here skips certificate verification.
"""

import time
from collections.abc import Callable

import requests
import urllib3
from icecream import ic

from minio_deploy import console
from minio_deploy.models import PollResult

HEALTH_PATH = "/minio/health/live"

MAX_ATTEMPTS = 30
DELAY_SECONDS = 5.0
REQUEST_TIMEOUT = 5.0

# Self-signed certificates are expected here
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


def health_url(host: str, port: int) -> str:
    """Return the liveness URL of a MinIO server."""
    return f"https://{host}:{port}{HEALTH_PATH}"


def check_endpoint(url: str, timeout: float = REQUEST_TIMEOUT) -> bool:
    """Issue one GET request and report whether it succeeded.

    Connection errors and timeouts count as failure.

    Args:
        url: The URL to request.
        timeout: Request timeout in seconds.

    Returns:
        True if the server answered with a 2xx status.

    """
    try:
        response = requests.get(url, verify=False, timeout=timeout)
    except requests.exceptions.RequestException as err:
        ic(err)
        return False
    ic(url, response.status_code)
    return 200 <= response.status_code < 300


def poll_health(
    url: str,
    max_attempts: int = MAX_ATTEMPTS,
    delay: float = DELAY_SECONDS,
    *,
    probe: Callable[[str], bool] = check_endpoint,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult:
    """Poll a liveness URL until it succeeds or the attempt budget runs out.

    The delay between attempts is constant. No sleep follows the last
    attempt.

    Args:
        url: Liveness URL.
        max_attempts: Maximum number of requests.
        delay: Seconds to wait between attempts.
        probe: Callable issuing one request, True on success.
        sleep: Callable used to wait between attempts.

    Returns:
        PollResult with the outcome and the number of requests made.

    """
    for attempt in range(1, max_attempts + 1):
        if probe(url):
            return PollResult(ok=True, attempts=attempt)

        console.step(f"Attempt {attempt}/{max_attempts}: Waiting for MinIO to start...")
        if attempt < max_attempts:
            sleep(delay)

    return PollResult(ok=False, attempts=max_attempts)
