"""
Audit logging: records account and publication events.

Events go to the store's audit_log collection and to structured logging.
"""

from __future__ import annotations

import logging

from flask import has_request_context, request

from database import get_store
from models import AuditEntry

logger = logging.getLogger(__name__)


def log_event(action: str, email: str = "", detail: str = "") -> AuditEntry:
    ip = (request.remote_addr or "") if has_request_context() else ""
    store = get_store()
    entry = AuditEntry(
        action=action,
        email=email,
        detail=detail,
        ip_address=ip,
        created_at=store.now(),
    )
    store.append("audit_log", entry)
    logger.info("audit: %s email=%s detail=%s ip=%s", action, email, detail, ip)
    return entry
