from dataclasses import replace
from datetime import datetime

from drivers.models import Driver, DriverStatus


class DriverStateException(Exception):
    """Raised when an invalid driver transition is attempted."""
    pass


def handle_driver_assignment(driver: Driver) -> Driver:
    """
    Called when the matching engine commits a ride to this driver.
    Only an AVAILABLE driver can be assigned; the result is UNAVAILABLE.
    Activity time is left alone: being assigned is not "becoming free".
    """
    if not driver.is_available:
        raise DriverStateException(f"Driver {driver.id} is not available. Current: {driver.status.value}")

    return replace(driver, status=DriverStatus.UNAVAILABLE)


def handle_availability_change(driver: Driver, available: bool, now: datetime) -> Driver:
    """
    Explicit toggle from the control surface (e.g. trip completed, going offline).
    Refreshes last_active_at only on the transition to AVAILABLE, which is what
    lets a long-idle driver win near-ties against one that just became free.
    """
    if not available:
        return replace(driver, status=DriverStatus.UNAVAILABLE)

    if driver.is_available:
        # Already free: keep the idle start
        return driver

    return replace(driver, status=DriverStatus.AVAILABLE, last_active_at=now)
