"""
Rides domain package.

Public API:
- Domain models: RideRequest, RideRequestStatus
- (Pending queue lives in rides.queue)
"""
from .models import RideRequest, RideRequestStatus

__all__ = ["RideRequest",
           "RideRequestStatus",
           ]
