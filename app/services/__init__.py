from .claude_client import ClaudeClient, get_claude_client
from .audit_logger import AuditAction, record_audit_event
from . import storage

__all__ = [
    "ClaudeClient",
    "get_claude_client",
    "AuditAction",
    "record_audit_event",
    "storage"
]
