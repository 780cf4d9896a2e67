"""Error types raised while baking a font atlas."""

from __future__ import annotations


class FontBakerError(Exception):
    """Base class for font baking failures."""


class UsageError(FontBakerError):
    """Command line arguments are missing or malformed."""


class ResourceNotFound(FontBakerError, LookupError):
    """The requested font family/style is not available."""


class EncodingOverflow(FontBakerError, ValueError):
    """A glyph value does not fit the fields of the baked format."""
