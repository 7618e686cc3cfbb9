"""Image reference resolution used when an image mark definition is built."""

from __future__ import annotations

import mimetypes
from pathlib import PurePosixPath
from typing import Protocol
from urllib.parse import urljoin, urlparse

from .model import Picture, PictureSource


class AssetResolver(Protocol):
    def resolve(self, reference: str) -> str:  # pragma: no cover - structural protocol
        """Return the source URL for a raw image reference."""

    def resolve_picture(self, reference: str, alt: str) -> Picture:  # pragma: no cover - structural protocol
        """Return the picture descriptor for a raw image reference."""


class IdentityResolver:
    """Keeps references as written and returns a placeholder picture."""

    def resolve(self, reference: str) -> str:
        return reference

    def resolve_picture(self, reference: str, alt: str) -> Picture:
        return Picture(src=reference, alt=alt)


class BaseUrlResolver:
    """Joins relative references onto ``base_url`` and guesses the source MIME type."""

    def __init__(self, base_url: str) -> None:
        if not base_url.endswith("/"):
            base_url += "/"
        self.base_url = base_url

    def resolve(self, reference: str) -> str:
        if urlparse(reference).scheme:
            return reference
        return urljoin(self.base_url, reference.lstrip("/"))

    def resolve_picture(self, reference: str, alt: str) -> Picture:
        src = self.resolve(reference)
        mime, _ = mimetypes.guess_type(PurePosixPath(urlparse(src).path).name)
        return Picture(src=src, alt=alt, sources=(PictureSource(srcset=src, mime_type=mime),))
