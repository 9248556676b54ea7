"""TinyWiki: a minimal file-backed personal wiki."""
