"""Content services."""

from .content_service import ContentService, SubmissionResult
from .listing_service import CategoryListingService
from .resolution_service import ResolutionService
from .consistency import ConsistencyChecker, ReconcileReport

__all__ = [
    "ContentService",
    "SubmissionResult",
    "CategoryListingService",
    "ResolutionService",
    "ConsistencyChecker",
    "ReconcileReport",
]
