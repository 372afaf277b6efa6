"""Scan configuration model and remote option mapping."""

from .mapper import build_option_payload, convert_to_boolean, convert_to_number
from .models import CAMEL_ALIASES, ScanConfiguration

__all__ = [
    "CAMEL_ALIASES",
    "ScanConfiguration",
    "build_option_payload",
    "convert_to_boolean",
    "convert_to_number",
]
