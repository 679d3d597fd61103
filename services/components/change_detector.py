"""
ChangeDetector component for deciding whether a version was already archived.
The archive directory itself is the ledger: if it exists, the version is known.
"""
from pathlib import Path
from typing import Union

from core.config import settings
from core.exceptions import FilesystemException, ParsingException
from core.logger import get_logger
from models.target import Target

logger = get_logger(__name__)


class ChangeDetector:
    """
    Maps resource paths to archive directories under the output root.
    """

    def __init__(self, output_dir: Union[str, Path, None] = None):
        self.output_dir = Path(output_dir or settings.OUTPUT_DIR)

    @staticmethod
    def version_segment(resource_path: str) -> str:
        """
        Returns the text after the last `/` of a resource path.

        Raises:
            ParsingException: if the segment is empty or not a plain name
        """
        segment = resource_path.rsplit("/", 1)[-1]
        if not segment or segment in (".", "..") or "\\" in segment:
            raise ParsingException(
                "Resource path has no usable version segment",
                {"resource_path": resource_path},
            )
        return segment

    def archive_dir(self, target: Target, resource_path: str) -> Path:
        return self.output_dir / target.host / self.version_segment(resource_path)

    def is_new_version(self, target: Target, resource_path: str) -> bool:
        """True iff nothing exists yet at the archive directory for this version."""
        path = self.archive_dir(target, resource_path)
        is_new = not path.exists()
        logger.debug(f"[CHANGE_DETECTOR] {path} {'missing' if is_new else 'exists'}")
        return is_new

    def mark_archived(self, target: Target, resource_path: str) -> Path:
        """
        Creates the archive directory. Must be called before any asset download
        so an interrupted download is not detected as new again.
        """
        path = self.archive_dir(target, resource_path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemException(
                "Failed to create archive directory", {"path": str(path), "error": str(e)}
            ) from e
        return path
