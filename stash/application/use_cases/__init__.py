"""Use cases: upload pipeline, delivery, deletion."""

from stash.application.use_cases.deletion import DeletionService
from stash.application.use_cases.delivery import DeliveryService, parse_range
from stash.application.use_cases.uploads import UploadService

__all__ = ["DeletionService", "DeliveryService", "UploadService", "parse_range"]
