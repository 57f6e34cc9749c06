"""
Core module - configuration, logging, the record store and its encrypted
container.
"""

from pwstore.core.config import PwstoreConfig
from pwstore.core.logging import get_secure_logger, SecureLogFilter

__all__ = ["PwstoreConfig", "get_secure_logger", "SecureLogFilter"]
