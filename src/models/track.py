"""
Track data model
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse
import uuid


@dataclass(frozen=True)
class Track:
    """
    Track data model

    A selectable background-music track. Owned by the caller; the playback
    controller only reads it.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    url: str = ""
    title: str = ""

    @property
    def file_name(self) -> str:
        """Last path component of the url"""
        path = urlparse(self.url).path if self.url.startswith("file://") else self.url
        return Path(unquote(path)).name

    @property
    def display_name(self) -> str:
        """Display name"""
        return self.title or self.file_name

    def resolve_path(self, media_root: Optional[str] = None) -> str:
        """
        Turn the url into a filesystem path

        Args:
            media_root: Directory that relative urls are resolved against

        Returns:
            str: Absolute or root-relative file path
        """
        if self.url.startswith("file://"):
            return unquote(urlparse(self.url).path)

        path = Path(self.url)
        if media_root and not path.is_absolute():
            return str(Path(media_root) / path)
        if media_root and path.is_absolute() and not path.exists():
            # Server-style urls ("/music/a.mp3") live under the media root
            candidate = Path(media_root) / str(path).lstrip("/\\")
            if candidate.exists():
                return str(candidate)
        return str(path)

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'url': self.url,
            'title': self.title,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Track':
        """Create Track object from dictionary"""
        return cls(
            id=str(data.get('id') or uuid.uuid4()),
            url=data.get('url', ''),
            title=data.get('title') or data.get('originalname', ''),
        )
