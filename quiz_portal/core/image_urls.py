"""Resolution of question image links, including Google Drive sharing URLs.

Drive sharing links point at a viewer page rather than image bytes. The file
id is pulled out of the link and rewritten into direct-download formats,
ordered from the most to the least reliable.
"""

from __future__ import annotations

import re

DRIVE_URL_FORMATS: tuple[str, ...] = (
    "https://lh3.googleusercontent.com/d/{file_id}",
    "https://drive.google.com/thumbnail?id={file_id}&sz=w1000",
    "https://drive.google.com/uc?id={file_id}",
    "https://drive.google.com/uc?export=view&id={file_id}",
    "https://drive.google.com/uc?export=download&id={file_id}",
)

_FILE_ID_PATTERNS = (
    re.compile(r"/file/d/([a-zA-Z0-9_-]+)(?:/|$|\?)"),
    re.compile(r"[?&]id=([a-zA-Z0-9_-]+)(?:&|$)"),
    re.compile(r"/d/([a-zA-Z0-9_-]+)(?:/|$|\?)"),
)

_DIRECT_DRIVE_MARKERS = (
    "drive.google.com/uc?",
    "drive.google.com/thumbnail",
    "lh3.googleusercontent.com",
)


def is_drive_url(url: str) -> bool:
    return "drive.google.com" in url or "lh3.googleusercontent.com" in url


def extract_drive_file_id(url: str | None) -> str | None:
    """Return the Drive file id in ``url``, or None when it has none."""
    if not url or not is_drive_url(url):
        return None
    for pattern in _FILE_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def convert_drive_url(url: str | None) -> str:
    """Rewrite a Drive sharing link into its preferred direct format."""
    if not url:
        return ""
    if any(marker in url for marker in _DIRECT_DRIVE_MARKERS):
        return url
    file_id = extract_drive_file_id(url)
    if file_id is None:
        return url
    return DRIVE_URL_FORMATS[0].format(file_id=file_id)


def image_url_candidates(url: str | None) -> list[str]:
    """URLs to try in order when loading ``url``; Drive links expand to every format."""
    if not url:
        return []
    file_id = extract_drive_file_id(url)
    if file_id is None:
        return [url]
    return [template.format(file_id=file_id) for template in DRIVE_URL_FORMATS]

