"""
Track Catalog Module

Lists the background-music tracks available in a local directory.
"""

from typing import Generator, Iterable, List, Optional
from pathlib import Path
import hashlib
import logging

from models.track import Track

logger = logging.getLogger(__name__)

DEFAULT_FORMATS = ('mp3', 'flac', 'wav', 'ogg')


class TrackCatalog:
    """
    Track Catalog

    Scans a directory for supported audio files and turns them into Tracks.
    Track ids are derived from the path so that rescanning keeps them stable.
    """

    def __init__(self, supported_formats: Optional[Iterable[str]] = None):
        formats = supported_formats or DEFAULT_FORMATS
        self._supported_exts = {
            '.' + str(fmt).lower().lstrip('.') for fmt in formats
        }

    @property
    def supported_extensions(self) -> List[str]:
        return sorted(self._supported_exts)

    def scan(self, directory: str, recursive: bool = False) -> List[Track]:
        """
        Scan a directory

        Args:
            directory: Directory to scan
            recursive: Descend into subdirectories

        Returns:
            List[Track]: Tracks sorted by title (case-insensitive)
        """
        dir_path = Path(directory)
        if not dir_path.is_dir():
            logger.warning("Music directory not found: %s", directory)
            return []

        tracks = [self._track_from_file(path) for path in self._iter_audio_files(dir_path, recursive)]
        tracks.sort(key=lambda track: track.display_name.lower())
        logger.info("Found %d tracks in %s", len(tracks), directory)
        return tracks

    def _iter_audio_files(self, dir_path: Path, recursive: bool) -> Generator[Path, None, None]:
        """Iterate through audio files generator."""
        pattern = dir_path.rglob("*") if recursive else dir_path.glob("*")
        for file_path in pattern:
            if file_path.is_file() and file_path.suffix.lower() in self._supported_exts:
                yield file_path

    def _track_from_file(self, path: Path) -> Track:
        resolved = str(path.resolve())
        track_id = hashlib.sha1(resolved.encode('utf-8')).hexdigest()[:16]
        return Track(id=track_id, url=resolved, title=self.read_title(path))

    @staticmethod
    def read_title(path: Path) -> str:
        """Title tag of the file, or its stem when untagged or unreadable"""
        try:
            from mutagen import File

            audio = File(str(path), easy=True)
            if audio is not None and audio.tags:
                titles = audio.tags.get('title')
                if titles and str(titles[0]).strip():
                    return str(titles[0]).strip()
        except Exception as e:
            logger.debug("Reading tags failed: %s, Error: %s", path, e)
        return path.stem
