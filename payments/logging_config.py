"""
Structured logging configuration.
Outputs JSON in production for log aggregation.
Outputs plain text in development for readability.
"""

import sys
import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from payments.config import Settings, get_settings


class JSONFormatter(logging.Formatter):
    """Format logs as JSON."""
    
    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        
        return json.dumps(log_obj)


def mask_card_number(cc_number: Optional[str]) -> str:
    """Card numbers are never logged in cleartext; keep the last four digits."""
    if not cc_number:
        return "<empty>"
    visible = cc_number[-4:] if len(cc_number) > 4 else ""
    return "*" * (len(cc_number) - len(visible)) + visible


def short_fingerprint(fingerprint: str) -> str:
    return fingerprint[:12]


def configure_logging(settings: Optional[Settings] = None):
    """Configure root logger."""
    settings = settings or get_settings()
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO if settings.is_production else logging.DEBUG)
    
    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        
    # Create console handler
    console_handler = logging.StreamHandler(sys.stdout)
    
    if settings.is_production:
        # JSON formatting for production
        console_handler.setFormatter(JSONFormatter())
    else:
        # Standard formatting for development
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)
        
    root_logger.addHandler(console_handler)
    
    # Set levels for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )
