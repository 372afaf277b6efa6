"""Translate a ScanConfiguration into the remote service's flat option map."""

import math
import re
from typing import Any

from .models import ScanConfiguration

TRUE_STRINGS = frozenset({"true", "1", "yes"})

# (config attribute, remote option name)
TEXT_OPTIONS = (
    ("target", "url"),
    ("method", "method"),
    ("data", "data"),
    ("cookie", "cookie"),
    ("user_agent", "userAgent"),
    ("referer", "referer"),
    ("proxy", "proxy"),
    ("proxy_cred", "proxyCred"),
    ("proxy_file", "proxyFile"),
    ("tor_port", "torPort"),
    ("tor_type", "torType"),
    ("randomize", "randomize"),
    ("safe_url", "safeUrl"),
    ("safe_post", "safePost"),
    ("safe_req_file", "safeReqFile"),
    ("csrf_token", "csrfToken"),
    ("csrf_url", "csrfUrl"),
    ("csrf_method", "csrfMethod"),
    ("eval", "eval"),
)

BOOLEAN_OPTIONS = (
    ("tor", "tor"),
    ("check_tor", "checkTor"),
    ("skip_url_encode", "skipUrlEncode"),
    ("force_ssl", "forceSsl"),
    ("chunked", "chunked"),
    ("hpp", "hpp"),
)

NUMERIC_OPTIONS = (
    ("delay", "delay"),
    ("timeout", "timeout"),
    ("retries", "retries"),
    ("safe_freq", "safeFreq"),
)

_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def convert_to_boolean(value: Any) -> bool:
    """Native booleans pass through; only "true", "1" and "yes" strings are True."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in TRUE_STRINGS
    return False


def convert_to_number(value: Any) -> int | float:
    """Parse a number permissively, returning 0 when nothing numeric is found.

    Strings are read like a leading-prefix float parse, so "12abc" is 12.
    Integral results come back as int. Values that overflow to infinity, and
    native inf or nan, become 0 since they cannot be sent as JSON.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if not isinstance(value, str):
        return 0
    match = _NUMBER_PREFIX.match(value)
    if not match:
        return 0
    try:
        parsed = float(match.group(1))
    except ValueError:
        return 0
    if not math.isfinite(parsed):
        return 0
    return int(parsed) if parsed.is_integer() else parsed


def build_option_payload(config: ScanConfiguration) -> dict[str, Any]:
    """Return the remote option map for a configuration.

    Unset fields are omitted. ``custom_options`` is merged last and may
    override any computed key; keys it sets to None, inf or nan are dropped
    as well.
    """
    options: dict[str, Any] = {}

    for attr, name in TEXT_OPTIONS:
        value = getattr(config, attr)
        if value:
            options[name] = value

    if config.headers is not None:
        options["headers"] = "\n".join(config.headers)

    for attr, name in BOOLEAN_OPTIONS:
        value = getattr(config, attr)
        if value is not None:
            options[name] = convert_to_boolean(value)

    for attr, name in NUMERIC_OPTIONS:
        value = getattr(config, attr)
        if value is not None:
            options[name] = convert_to_number(value)

    if config.custom_options:
        options.update(config.custom_options)

    return {key: value for key, value in options.items() if _is_sendable(value)}


def _is_sendable(value: Any) -> bool:
    if value is None:
        return False
    return not isinstance(value, float) or math.isfinite(value)
