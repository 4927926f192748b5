from local_yield.services.audit.audit_log_service import (
    DEFAULT_RANGE_LIMIT,
    MAX_RANGE_LIMIT,
    AuditLogService,
)

__all__ = ["AuditLogService", "DEFAULT_RANGE_LIMIT", "MAX_RANGE_LIMIT"]
