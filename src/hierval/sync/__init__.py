"""Remote hierarchy service access and dry-sync."""

from .accessor import HttpLearnServiceAccessor, LearnServiceAccessor
from .drysync import DrySyncClient, Err, Ok, SyncOutcome, fallback_result

__all__ = [
    "LearnServiceAccessor",
    "HttpLearnServiceAccessor",
    "DrySyncClient",
    "Ok",
    "Err",
    "SyncOutcome",
    "fallback_result",
]
