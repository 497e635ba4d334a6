"""Canonical symbol naming."""

from naming.formats import PUBLIC_API_FORMAT, SHORT_NAME_FORMAT, DisplayFormat
from naming.render import short_name, signature_name, to_display_string

__all__ = [
    "DisplayFormat",
    "PUBLIC_API_FORMAT",
    "SHORT_NAME_FORMAT",
    "short_name",
    "signature_name",
    "to_display_string",
]
