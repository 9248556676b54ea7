"""File storage for wiki pages."""

import logging
import os
import tempfile
from pathlib import Path

from tinywiki.core.models import Page

logger = logging.getLogger(__name__)


class PageNotFoundError(LookupError):
    """Raised when a page has never been saved."""

    def __init__(self, title: str):
        super().__init__(f"page not found: {title}")
        self.title = title


class PageStore:
    """File-based page storage.

    Each page lives in its own file: <root>/<title>.txt. Titles may contain
    "/", which maps to nested directories under the root. Bodies are stored
    as raw bytes.

    Titles are not validated here; callers check them against
    TITLE_PATTERN first. There is no locking: concurrent saves of the same
    title race and the last replace wins.
    """

    def __init__(self, root: Path, suffix: str = ".txt"):
        self.root = root
        self.suffix = suffix

    def resolve_path(self, title: str) -> Path:
        """Get the file path for a page title."""
        return self.root / (title.lstrip("/") + self.suffix)

    async def save(self, title: str, body: bytes) -> Page:
        """Write a page, replacing any existing content.

        The body is written to a temporary file next to the target and
        moved into place, so a reader sees either the old or the new file.
        """
        path = self.resolve_path(title)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(body)
            os.replace(tmp_name, path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug("Saved page %r (%d bytes) to %s", title, len(body), path)
        return Page(title=title, body=body)

    async def load(self, title: str) -> Page:
        """Read a page.

        Raises:
            PageNotFoundError: the page file does not exist.
            OSError: any other read failure.
        """
        path = self.resolve_path(title)
        try:
            body = path.read_bytes()
        except FileNotFoundError as exc:
            raise PageNotFoundError(title) from exc

        logger.debug("Loaded page %r (%d bytes) from %s", title, len(body), path)
        return Page(title=title, body=body)
