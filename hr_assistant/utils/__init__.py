"""
Utility modules for the HR assistant.

This package contains shared utilities used across the application:
- config: Configuration management
- logger: Logging infrastructure
- constants: Application-wide constants
"""

from hr_assistant.utils.config import (
    AppSettings,
    get_settings,
    reload_settings,
    ROOT_DIR,
    DATA_DIR,
)
from hr_assistant.utils.constants import (
    APP_NAME,
    APP_DISPLAY_NAME,
    VERSION,
    SUPPORTED_MIME_TYPES,
    AuditAction,
    DocumentStatus,
    DocumentType,
    ExperienceLevel,
    QueryKind,
    SentimentLabel,
)
from hr_assistant.utils.logger import (
    setup_logging,
    get_logger,
    audit_log,
    LoggerMixin,
    log,
)

__all__ = [
    # Config
    "AppSettings",
    "get_settings",
    "reload_settings",
    "ROOT_DIR",
    "DATA_DIR",
    # Constants
    "APP_NAME",
    "APP_DISPLAY_NAME",
    "VERSION",
    "SUPPORTED_MIME_TYPES",
    "AuditAction",
    "DocumentStatus",
    "DocumentType",
    "ExperienceLevel",
    "QueryKind",
    "SentimentLabel",
    # Logger
    "setup_logging",
    "get_logger",
    "audit_log",
    "LoggerMixin",
    "log",
]
