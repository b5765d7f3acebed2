"""Parse customer-submitted additional info into typed values.

Uploaded files arrive either as ``{"label": ..., "url": ...}`` objects or,
from older clients, as ``"label (url)"`` strings. Both become a
:class:`FileReference`, as does any other text containing the upload
marker, which is taken verbatim as the URL. Anything else is :class:`PlainText`.
"""

import posixpath
from typing import Any, Optional, Tuple
from urllib.parse import unquote, urlparse

from insurance_api.schemas.document import AdditionalInfoValue, FileReference, PlainText

UPLOAD_MARKER = "/uploads/"

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"})


def url_basename(url: str) -> str:
    path = urlparse(url).path or url
    return unquote(posixpath.basename(path.rstrip("/")))


def split_labelled_url(text: str) -> Optional[Tuple[str, str]]:
    """Split a ``"label (url)"`` value into its label and URL.

    File names may themselves contain parentheses, so the URL starts at the
    last opening parenthesis (at the start or after whitespace) whose
    enclosed text holds the upload marker.
    """
    if not text.endswith(")"):
        return None

    start = text.rfind("(", 0, len(text) - 1)
    while start != -1:
        url = text[start + 1:-1].strip()
        if UPLOAD_MARKER in url and (start == 0 or text[start - 1].isspace()):
            return text[:start].strip(), url
        start = text.rfind("(", 0, start)
    return None


def parse_value(value: Any) -> Optional[AdditionalInfoValue]:
    """Parse one additional-info value.

    Returns None for empty values.
    """
    if value is None:
        return None

    if isinstance(value, dict):
        url = str(value.get("url") or "").strip()
        if not url:
            return None
        label = str(value.get("label") or value.get("name") or "").strip()
        return FileReference(label=label or url_basename(url), url=url)

    text = str(value).strip()
    if not text:
        return None

    labelled = split_labelled_url(text)
    if labelled is not None:
        label, url = labelled
        return FileReference(label=label or url_basename(url), url=url)

    if UPLOAD_MARKER in text:
        return FileReference(label=url_basename(text), url=text)

    return PlainText(text=text)


def file_reference_for(value: Any) -> Optional[FileReference]:
    """Return the uploaded file an additional-info value points at, if any."""
    parsed = parse_value(value)
    if isinstance(parsed, FileReference) and UPLOAD_MARKER in parsed.url:
        return parsed
    return None


def classify_file_type(url: str) -> str:
    """``"image"`` for known image extensions, ``"document"`` otherwise."""
    extension = posixpath.splitext(urlparse(url).path or url)[1].lower()
    return "image" if extension in IMAGE_EXTENSIONS else "document"
