"""Remote scanning service contract and sqlmap REST API adapter."""

from .base import RemoteScanClient
from .client import DEFAULT_API_URL, SqlmapApiClient, format_log_entry
from .models import RUNNING, TERMINATED, RemoteAck, RemoteStatus, ScanResult

__all__ = [
    "DEFAULT_API_URL",
    "RUNNING",
    "RemoteAck",
    "RemoteScanClient",
    "RemoteStatus",
    "ScanResult",
    "SqlmapApiClient",
    "TERMINATED",
    "format_log_entry",
]
