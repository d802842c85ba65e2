from .config import ConnectionProfile, ScanConfig, resolve_connection_profile, resolve_scan_config
from .client import build_client
from .export import DynamoItemSource, scan_and_export

__all__ = [
    "ConnectionProfile",
    "ScanConfig",
    "resolve_connection_profile",
    "resolve_scan_config",
    "build_client",
    "DynamoItemSource",
    "scan_and_export",
]
