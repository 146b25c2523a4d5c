"""
Position fusion - augments a schedule record with a live tracker fix.

Schedule providers often have no telemetry for a flight that is plainly
in the air. When the primary record has no position (or only a ground
position), the secondary tracker is consulted:

    Strategy A  exact ICAO24 transponder lookup, when the primary record
                carries one
    Strategy B  expected callsign (ICAO operator prefix + flight number)
                searched within a box around both airports

Callsign matching is a prefix match and can pick the wrong aircraft when
several flights of the same airline are close together; it is best-effort,
not a correctness guarantee.

Enrichment is never fatal: any tracker failure leaves the record as it was.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from runway.analytics.geodesy import estimate_eta, project_progress_fraction
from runway.exceptions import UpstreamUnavailableError
from runway.ingestion.airlines import iata_to_icao, split_flight_number
from runway.ingestion.opensky_client import CALLSIGN_WIDTH, BoundingBox, StateVector
from runway.ingestion.positions import PositionSource, normalize_position
from runway.models import FlightRecord, LivePosition

logger = logging.getLogger(__name__)

# Degrees of lat/lon added around the route for the callsign search
ROUTE_BOX_PADDING_DEG = 3.0


class LiveTracker(Protocol):
    def find_by_icao24(self, icao24: str) -> List[StateVector]:
        ...

    def find_in_box(self, bbox: BoundingBox) -> List[StateVector]:
        ...


def expected_callsign(record: FlightRecord) -> Optional[str]:
    """
    Transponder callsign the flight should be squawking, e.g. UA 1 -> UAL1.

    Returns None when the operator prefix or flight number can't be derived.
    """
    code, number = split_flight_number(record.flight_number)
    if not number:
        return None

    prefix = None
    if record.airline_icao and len(record.airline_icao) == 3:
        prefix = record.airline_icao
    else:
        prefix = iata_to_icao(record.airline_iata)
    if prefix is None and code:
        prefix = code if len(code) == 3 else iata_to_icao(code)
    if prefix is None:
        return None

    return f'{prefix}{number}'.strip().upper()[:CALLSIGN_WIDTH]


def _airborne_position(state: StateVector) -> Optional[LivePosition]:
    position = normalize_position(state.to_payload(), PositionSource.OPENSKY)
    if position is None or position.is_on_ground is True:
        return None
    return position


def _match_by_icao24(tracker: LiveTracker, icao24: str) -> Optional[LivePosition]:
    states = tracker.find_by_icao24(icao24)
    if not states:
        return None
    # Only the first returned state is considered
    return _airborne_position(states[0])


def _match_by_callsign(tracker: LiveTracker, record: FlightRecord) -> Optional[LivePosition]:
    callsign = expected_callsign(record)
    if not callsign:
        return None

    bbox = BoundingBox.around_route(record.departure, record.arrival, ROUTE_BOX_PADDING_DEG)
    for state in tracker.find_in_box(bbox):
        observed = (state.callsign or '').strip().upper()
        if not observed.startswith(callsign):
            continue
        position = _airborne_position(state)
        if position is not None:
            logger.info(f'[Fusion] matched {callsign} to {state.icao24} ({observed})')
            return position
    return None


def recompute_progress_and_eta(record: FlightRecord, now: Optional[datetime] = None) -> FlightRecord:
    """
    Refresh progress and arrival ETA from the record's live position.

    Each value is only replaced when the geometry yields one.
    """
    live = record.live
    if live is None or live.is_on_ground is True:
        return record

    dep, arr = record.departure, record.arrival
    if dep.has_coordinates and arr.has_coordinates:
        progress = project_progress_fraction(
            dep.latitude, dep.longitude,
            arr.latitude, arr.longitude,
            live.latitude, live.longitude,
        )
        if progress is not None:
            record.progress = progress

    if arr.has_coordinates:
        eta = estimate_eta(
            live.latitude, live.longitude,
            arr.latitude, arr.longitude,
            live.ground_speed_kts,
            now=now,
        )
        if eta is not None:
            record.arrival.estimated_time = eta

    return record


def needs_fusion(record: FlightRecord) -> bool:
    """True when a tracker fix could improve this record."""
    if record.status.is_terminal:
        return False
    return record.live is None or record.live.is_on_ground is True


def fuse_live_position(
    record: FlightRecord,
    tracker: Optional[LiveTracker],
    now: Optional[datetime] = None,
) -> FlightRecord:
    """Fill in the record's live position from the secondary tracker."""
    if tracker is None or not needs_fusion(record):
        return record

    now = now or datetime.now(timezone.utc)
    position = None
    try:
        if record.icao24:
            position = _match_by_icao24(tracker, record.icao24)
            if position is not None:
                logger.info(f'[Fusion] {record.flight_number}: matched by icao24 {record.icao24}')

        if position is None and record.departure.has_coordinates and record.arrival.has_coordinates:
            position = _match_by_callsign(tracker, record)

    except UpstreamUnavailableError as e:
        logger.warning(f'[Fusion] tracker unavailable for {record.flight_number}: {e.message}')
        return record
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning(f'[Fusion] malformed tracker data for {record.flight_number}: {e}')
        return record

    if position is None:
        logger.debug(f'[Fusion] no live match for {record.flight_number}')
        return record

    record.live = position
    return recompute_progress_and_eta(record, now)
