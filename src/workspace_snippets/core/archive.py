"""Download a GitHub source archive and compute its checksums and date."""

import base64
import hashlib
import io
import re
import zipfile
from datetime import date
from typing import Optional

import requests

from ..errors import NetworkError
from ..models.context import ArchiveMetadata

ROOT_ENTRY_PATTERN = re.compile(r'^[^/]+/$')
INTEGRITY_ALGORITHM = 'sha384'


def archive_url(remote_url: str, commit_hash: str) -> str:
    """Build the URL of the zip archive GitHub serves for ``commit_hash``."""
    # The archive URL doesn't work with the .git suffix.
    if remote_url.endswith('.git'):
        remote_url = remote_url[:-4]
    return f"{remote_url.rstrip('/')}/archive/{commit_hash}.zip"


def integrity_string(content: bytes) -> str:
    """Return a subresource-integrity style digest such as ``sha384-<base64>``."""
    digest = hashlib.new(INTEGRITY_ALGORITHM, content).digest()
    return f"{INTEGRITY_ALGORITHM}-{base64.b64encode(digest).decode('ascii')}"


def archive_date(content: bytes) -> str:
    """Return the date of the single top-level directory entry as ``YYYY-MM-DD``.

    Raises:
        ValueError: If the archive doesn't have exactly one top-level directory entry.
        zipfile.BadZipFile: If ``content`` isn't a zip archive.
    """
    with zipfile.ZipFile(io.BytesIO(content)) as archive:
        roots = [info for info in archive.infolist() if ROOT_ENTRY_PATTERN.match(info.filename)]
    if len(roots) != 1:
        raise ValueError(f"expected one top-level directory, found {len(roots)}")
    year, month, day = roots[0].date_time[:3]
    return date(year, month, day).isoformat()


def fetch_archive_metadata(url: str, session: Optional[requests.Session] = None,
                           timeout: float = 60) -> ArchiveMetadata:
    """Download the archive at ``url`` and describe it.

    Args:
        url: Archive download URL.
        session: HTTP session to use; a new one is created if not given.
        timeout: Request timeout in seconds.

    Returns:
        ArchiveMetadata: SHA-256 hex digest, integrity string and date.

    Raises:
        NetworkError: If the download fails or the archive is malformed.
    """
    session = session or requests.Session()
    try:
        response = session.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"couldn't download {url}: {e}") from e
    if response.status_code != 200:
        raise NetworkError(f"downloading {url} resulted in HTTP status {response.status_code}")
    content = response.content
    try:
        modified = archive_date(content)
    except (zipfile.BadZipFile, ValueError) as e:
        raise NetworkError(f"malformed archive {url}: {e}") from e
    return ArchiveMetadata(
        sha256=hashlib.sha256(content).hexdigest(),
        integrity=integrity_string(content),
        date=modified,
    )
