"""Download/upload throughput test against an HTTP endpoint."""

import logging
import math
import os
import urllib.request
from time import perf_counter

from pingx.models import SpeedTestResult

logger = logging.getLogger(__name__)

DEFAULT_DOWNLOAD_URL = "http://httpbin.org/bytes/1048576"
DEFAULT_UPLOAD_URL = "http://httpbin.org/post"
DOWNLOAD_SIZE_ESTIMATE = 1024 * 1024  # Used when the body length is unknown
UPLOAD_SIZE = 512 * 1024
REQUEST_TIMEOUT_S = 15
CHUNK_SIZE = 64 * 1024


class SpeedTestError(Exception):
    """Raised when a throughput measurement cannot be completed."""


def compute_mbps(num_bytes: int, duration_s: float) -> float:
    """Convert a transfer into megabits per second, clamped to a finite value >= 0."""
    if duration_s <= 0:
        return 0.0
    mbps = (num_bytes * 8) / (duration_s * 1_000_000)
    if not math.isfinite(mbps) or mbps <= 0:
        return 0.0
    return mbps


def measure_download(url: str = DEFAULT_DOWNLOAD_URL, timeout_s: int = REQUEST_TIMEOUT_S) -> float:
    """Time a GET of ``url`` and return the download rate in Mbps."""
    start = perf_counter()
    downloaded = 0
    try:
        with urllib.request.urlopen(url, timeout=timeout_s) as resp:
            while True:
                chunk = resp.read(CHUNK_SIZE)
                if not chunk:
                    break
                downloaded += len(chunk)
    except OSError as e:
        # URLError, HTTPError and socket timeouts are all OSError subclasses
        raise SpeedTestError(f"Download failed: {e}") from e

    duration = perf_counter() - start
    logger.debug("Download finished: bytes=%d, duration=%.3fs", downloaded, duration)
    return compute_mbps(downloaded or DOWNLOAD_SIZE_ESTIMATE, duration)


def measure_upload(
    url: str = DEFAULT_UPLOAD_URL, size: int = UPLOAD_SIZE, timeout_s: int = REQUEST_TIMEOUT_S
) -> float:
    """Time a POST of ``size`` bytes to ``url`` and return the upload rate in Mbps."""
    payload = b"a" * size
    request = urllib.request.Request(
        url,
        data=payload,
        method="POST",
        headers={"Content-Type": "application/octet-stream", "Content-Length": str(size)},
    )

    start = perf_counter()
    try:
        with urllib.request.urlopen(request, timeout=timeout_s) as resp:
            resp.read()
    except OSError as e:
        raise SpeedTestError(f"Upload failed: {e}") from e

    duration = perf_counter() - start
    logger.debug("Upload finished: bytes=%d, duration=%.3fs", size, duration)
    return compute_mbps(size, duration)


def run_speed_test(download_url: str | None = None, upload_url: str | None = None) -> SpeedTestResult:
    """Measure download then upload throughput, one request each.

    Endpoints default to PINGX_SPEEDTEST_DOWNLOAD_URL / PINGX_SPEEDTEST_UPLOAD_URL
    when set, else httpbin.org.

    Raises:
        SpeedTestError: If either request fails or times out
    """
    download_url = download_url or os.environ.get("PINGX_SPEEDTEST_DOWNLOAD_URL", DEFAULT_DOWNLOAD_URL)
    upload_url = upload_url or os.environ.get("PINGX_SPEEDTEST_UPLOAD_URL", DEFAULT_UPLOAD_URL)

    logger.info("Speed test started: download=%s, upload=%s", download_url, upload_url)
    download = measure_download(download_url)
    upload = measure_upload(upload_url)
    return SpeedTestResult(download_mbps=download, upload_mbps=upload)
