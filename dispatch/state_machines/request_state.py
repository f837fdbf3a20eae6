from dataclasses import replace

from rides.models import RideRequest, RideRequestStatus


class RideRequestStateException(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


def transition_request_to_matched(request: RideRequest) -> RideRequest:
    """
    Called when the matching engine commits a driver to this request.
    """
    if request.status != RideRequestStatus.PENDING:
        raise RideRequestStateException(f"Cannot match request {request.id} from {request.status}")

    return replace(request, status=RideRequestStatus.MATCHED)


def transition_request_to_expired(request: RideRequest) -> RideRequest:
    """
    Called by the expiry sweep. No retry and no rider notification follow.
    """
    if request.status != RideRequestStatus.PENDING:
        raise RideRequestStateException(f"Cannot expire request {request.id} from {request.status}")

    return replace(request, status=RideRequestStatus.EXPIRED)
