"""
Drivers domain package.

Public API:
- Domain models: Driver, DriverStatus
- (Registry lives in drivers.registry)
"""
from .models import Driver, DriverStatus

__all__ = ["Driver",
           "DriverStatus",
           ]
