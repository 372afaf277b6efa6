"""Typed scan configuration accepted from callers."""

from dataclasses import dataclass, field, fields
from typing import Any

BoolLike = bool | str
NumberLike = int | float | str

# camelCase keys accepted from JSON request payloads
CAMEL_ALIASES = {
    "userAgent": "user_agent",
    "proxyCred": "proxy_cred",
    "proxyFile": "proxy_file",
    "torPort": "tor_port",
    "torType": "tor_type",
    "checkTor": "check_tor",
    "safeUrl": "safe_url",
    "safePost": "safe_post",
    "safeReqFile": "safe_req_file",
    "safeFreq": "safe_freq",
    "skipUrlEncode": "skip_url_encode",
    "csrfToken": "csrf_token",
    "csrfUrl": "csrf_url",
    "csrfMethod": "csrf_method",
    "forceSsl": "force_ssl",
    "customOptions": "custom_options",
}


@dataclass
class ScanConfiguration:
    """Everything a caller can say about one scan request."""

    target: str
    method: str | None = "GET"
    data: str | None = None
    cookie: str | None = None
    user_agent: str | None = None
    referer: str | None = None
    headers: list[str] | None = None

    proxy: str | None = None
    proxy_cred: str | None = None
    proxy_file: str | None = None
    tor_port: str | None = None
    tor_type: str | None = None
    randomize: str | None = None
    safe_url: str | None = None
    safe_post: str | None = None
    safe_req_file: str | None = None
    csrf_token: str | None = None
    csrf_url: str | None = None
    csrf_method: str | None = None
    eval: str | None = None

    tor: BoolLike | None = None
    check_tor: BoolLike | None = None
    skip_url_encode: BoolLike | None = None
    force_ssl: BoolLike | None = None
    chunked: BoolLike | None = None
    hpp: BoolLike | None = None

    delay: NumberLike | None = None
    timeout: NumberLike | None = None
    retries: NumberLike | None = None
    safe_freq: NumberLike | None = None

    custom_options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ScanConfiguration":
        """Build a configuration from snake_case or camelCase keys.

        Unknown keys are rejected so typos do not silently disappear.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        unknown: list[str] = []
        for key, value in payload.items():
            name = CAMEL_ALIASES.get(key, key)
            if name not in known:
                unknown.append(key)
                continue
            values[name] = value
        if unknown:
            raise ValueError(f"Unknown scan option(s): {', '.join(sorted(unknown))}")
        if not values.get("target"):
            raise ValueError("Scan configuration requires a target URL")
        if values.get("custom_options") is None:
            values["custom_options"] = {}
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Return the set fields only, suitable for JSON storage."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value == {}:
                continue
            result[f.name] = list(value) if isinstance(value, list) else value
        return result
