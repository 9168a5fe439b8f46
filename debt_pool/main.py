"""Service factory"""

from typing import Optional

from debt_pool.config import Settings, settings as default_settings
from debt_pool.infrastructure.observability.logging import setup_logging
from debt_pool.service import LedgerService


def create_service(settings: Optional[Settings] = None) -> LedgerService:
    """Configure logging and return a service over the ledger file"""
    settings = settings or default_settings

    # Setup structured logging
    setup_logging(settings.log_level)

    service = LedgerService(settings=settings)
    service.load()
    return service
