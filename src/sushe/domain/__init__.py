"""Domain models and enums for sushe.

Usage:
    from sushe.domain import MediaInfo, PartInfo, Phase, Progress
"""

from .enums import Phase
from .models import MediaInfo, PartInfo, Progress, ProgressSink

__all__ = [
    "MediaInfo",
    "PartInfo",
    "Phase",
    "Progress",
    "ProgressSink",
]
