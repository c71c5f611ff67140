# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module includes utilities functions for chartsyncer."""

import logging
import os
import shutil
import tarfile
import time

import requests
from requests.auth import AuthBase
from requests.models import Response

from chartsyncer.config.defaults import defaults

logger: logging.Logger = logging.getLogger(__name__)

# The status codes for which a GET request is sent again.
RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


def send_get_http_raw(
    url: str,
    headers: dict | None = None,
    timeout: int | None = None,
    auth: AuthBase | tuple[str, str] | None = None,
    stream: bool = False,
) -> Response | None:
    """Send the GET HTTP request with the given url and headers.

    Requests failing with a retryable status code are sent again up to ``error_retries``
    times (see the ``[requests]`` section of ``defaults.ini``).

    Parameters
    ----------
    url : str
        The url of the request.
    headers : dict | None
        The dict that describes the headers of the request.
    timeout: int | None
        The request timeout (optional).
    auth: AuthBase | tuple[str, str] | None
        The authentication passed to ``requests`` (optional).
    stream: bool
        Indicates whether the response should be immediately downloaded (False) or streamed (True). Default: False.

    Returns
    -------
    Response | None
        The response, whatever its status code, or ``None`` if the request could not be sent.
    """
    logger.debug("GET - %s", url)
    if not timeout:
        timeout = defaults.getint("requests", "timeout", fallback=10)
    error_retries = defaults.getint("requests", "error_retries", fallback=5)

    retry_counter = error_retries
    while True:
        try:
            response = requests.get(url=url, headers=headers, timeout=timeout, auth=auth, stream=stream)
        except requests.exceptions.RequestException as error:
            logger.debug(error)
            return None

        if response.status_code not in RETRYABLE_STATUS_CODES:
            return response

        if retry_counter <= 0:
            logger.debug("Maximum retries reached: %s", error_retries)
            return response

        logger.debug("Receiving error code %s from server. Retrying ...", response.status_code)
        retry_counter = retry_counter - 1
        time.sleep(_get_retry_delay(response))


def _get_retry_delay(response: Response) -> float:
    """Return the number of seconds to wait before retrying, based on the ``Retry-After`` header."""
    retry_after = response.headers.get("Retry-After", "")
    try:
        return min(float(retry_after), 60.0)
    except ValueError:
        return 1.0


def download_file(response: Response, dest: str) -> None:
    """Stream the body of ``response`` into the file at ``dest``.

    A partially written file is removed when the download fails.

    Raises
    ------
    requests.exceptions.RequestException
        If the body cannot be read.
    OSError
        If the file cannot be written.
    """
    try:
        with open(dest, "wb") as file:
            for chunk in response.iter_content(chunk_size=8192):
                file.write(chunk)
    except (requests.exceptions.RequestException, OSError):
        if os.path.exists(dest):
            os.remove(dest)
        raise


def copy_file(src: str, dest: str) -> None:
    """Copy a file using `shutil.copy2 <https://docs.python.org/3/library/shutil.html>`_.

    This copy operation will preserve the permission of the src file.

    Parameters
    ----------
    src : str
        The path of the source file.
    dest : str
        The destination path to copy to.

    Raises
    ------
    OSError
        If the file cannot be copied.
    """
    logger.debug("Copying %s to %s", src, dest)
    shutil.copy2(src, dest)


def extract_tarfile(archive_path: str, dest_dir: str) -> None:
    """Extract a gzipped tar archive into ``dest_dir``.

    Members escaping ``dest_dir`` are rejected by the ``data`` extraction filter.

    Raises
    ------
    tarfile.TarError
        If the archive is invalid.
    OSError
        If the archive cannot be read or extracted.
    """
    with tarfile.open(archive_path, "r:gz") as archive:
        archive.extractall(dest_dir, filter="data")
