"""Region selection model and display synchronization."""

from .region_model import Region, RegionModel
from .sync_broadcaster import SyncBroadcaster, format_seconds

__all__ = [
    "Region",
    "RegionModel",
    "SyncBroadcaster",
    "format_seconds",
]
