"""Integrity feature: service layer, schemas, and API router."""

from .router import create_integrity_router
from .schemas import (
    BatchReportPayload,
    FailurePayload,
    FrequencyPayload,
    FrequencyRequest,
    RepairPayload,
    ValidationPayload,
)
from .service import IntegrityConfig, IntegrityService, SpotRejected

__all__ = [
    "BatchReportPayload",
    "FailurePayload",
    "FrequencyPayload",
    "FrequencyRequest",
    "IntegrityConfig",
    "IntegrityService",
    "RepairPayload",
    "SpotRejected",
    "ValidationPayload",
    "create_integrity_router",
]
