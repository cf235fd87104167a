"""ZIP packaging of captured images."""

import io
import zipfile
from typing import Iterable, Optional

from word_stamp.config import get_settings
from word_stamp.formatting.ir import ArchiveEntry

# Fixed member timestamp so identical entries give identical archives
ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)


class ArchiveEncodingError(Exception):
    """The archive could not be produced."""

    pass


class ArchiveBuilder:
    """Accumulate named images and serialize them into one ZIP blob.

    Every entry lands under a fixed folder, e.g. ``images/<name>.png``.
    Names are used as given; duplicates are not resolved here.
    """

    def __init__(self, folder: Optional[str] = None, extension: str = ".png") -> None:
        """Initialize the builder.

        Args:
            folder: Folder prefix inside the archive
            extension: Extension appended to each entry name
        """
        self.folder = (folder if folder is not None else get_settings().archive_folder).strip("/")
        self.extension = extension
        self.entries: list[ArchiveEntry] = []

    def add(self, name: str, data: bytes) -> None:
        """Queue an entry."""
        self.entries.append(ArchiveEntry(name=name, image_bytes=data))

    def member_name(self, name: str) -> str:
        """Path of an entry inside the archive."""
        filename = f"{name}{self.extension}"
        return f"{self.folder}/{filename}" if self.folder else filename

    def build(self, entries: Optional[Iterable[ArchiveEntry]] = None) -> bytes:
        """Serialize entries (the queued ones by default) into a ZIP.

        Raises:
            ArchiveEncodingError: If there is nothing to archive or writing fails
        """
        items = list(entries) if entries is not None else list(self.entries)
        if not items:
            raise ArchiveEncodingError("Cannot build an archive with no entries")

        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for entry in items:
                    info = zipfile.ZipInfo(self.member_name(entry.name), date_time=ZIP_TIMESTAMP)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    zf.writestr(info, entry.image_bytes)
        except (ValueError, OSError) as e:
            raise ArchiveEncodingError(f"Failed to write archive: {e}") from e

        return buffer.getvalue()
