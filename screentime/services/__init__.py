"""Business logic services."""
from .usage_service import UsageService
from .refresh_service import MidnightRefresher

__all__ = ['UsageService', 'MidnightRefresher']
