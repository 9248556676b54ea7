"""Data models for TinyWiki."""

import re

from pydantic import BaseModel

TITLE_PATTERN = re.compile(r"[a-zA-Z0-9/\-_]+")


def is_valid_title(title: str) -> bool:
    """Check a title against the allowed charset."""
    return TITLE_PATTERN.fullmatch(title) is not None


class Page(BaseModel):
    """Represents a wiki page."""

    title: str
    body: bytes = b""

    @property
    def text(self) -> str:
        """Body decoded for display."""
        return self.body.decode("utf-8", errors="replace")
