"""
Airline code tables.

Consumer flight numbers use IATA airline codes (UA 1) while transponder
callsigns use ICAO operator codes (UAL1). These tables bridge the two and
provide display names for providers that only report an operator code.
"""

import re
from typing import Dict, Optional, Tuple

# ICAO operator code -> (IATA code, full name)
AIRLINE_INFO: Dict[str, Tuple[str, str]] = {
    'UAL': ('UA', 'United Airlines'),
    'AAL': ('AA', 'American Airlines'),
    'DAL': ('DL', 'Delta Air Lines'),
    'SWA': ('WN', 'Southwest Airlines'),
    'JBU': ('B6', 'JetBlue Airways'),
    'ASA': ('AS', 'Alaska Airlines'),
    'NKS': ('NK', 'Spirit Airlines'),
    'FFT': ('F9', 'Frontier Airlines'),
    'HAL': ('HA', 'Hawaiian Airlines'),
    'AAY': ('G4', 'Allegiant Air'),
    'SKW': ('OO', 'SkyWest Airlines'),
    'RPA': ('YX', 'Republic Airways'),
    'ENY': ('MQ', 'Envoy Air'),
    'ACA': ('AC', 'Air Canada'),
    'WJA': ('WS', 'WestJet'),
    'BAW': ('BA', 'British Airways'),
    'VIR': ('VS', 'Virgin Atlantic'),
    'DLH': ('LH', 'Lufthansa'),
    'AFR': ('AF', 'Air France'),
    'KLM': ('KL', 'KLM'),
    'IBE': ('IB', 'Iberia'),
    'TAP': ('TP', 'TAP Air Portugal'),
    'RYR': ('FR', 'Ryanair'),
    'EZY': ('U2', 'easyJet'),
    'THY': ('TK', 'Turkish Airlines'),
    'UAE': ('EK', 'Emirates'),
    'QTR': ('QR', 'Qatar Airways'),
    'SIA': ('SQ', 'Singapore Airlines'),
    'CPA': ('CX', 'Cathay Pacific'),
    'JAL': ('JL', 'Japan Airlines'),
    'ANA': ('NH', 'All Nippon Airways'),
    'KAL': ('KE', 'Korean Air'),
    'QFA': ('QF', 'Qantas'),
    'ANZ': ('NZ', 'Air New Zealand'),
    'FDX': ('FX', 'FedEx Express'),
    'UPS': ('5X', 'UPS Airlines'),
}

IATA_TO_ICAO: Dict[str, str] = {iata: icao for icao, (iata, _) in AIRLINE_INFO.items()}

# Airline code (2-char IATA incl. digit forms, or 3-letter ICAO) then digits
FLIGHT_NUMBER_RE = re.compile(r'\A([A-Z][0-9]|[0-9][A-Z]|[A-Z]{2,3})0*([0-9]{1,4})([A-Z]?)\Z')


def airline_name(icao_code: Optional[str]) -> Optional[str]:
    """Display name for an ICAO operator code, if known."""
    info = AIRLINE_INFO.get((icao_code or '').upper())
    return info[1] if info else None


def iata_to_icao(iata_code: Optional[str]) -> Optional[str]:
    return IATA_TO_ICAO.get((iata_code or '').upper())


def icao_to_iata(icao_code: Optional[str]) -> Optional[str]:
    info = AIRLINE_INFO.get((icao_code or '').upper())
    return info[0] if info else None


def split_flight_number(flight_number: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a flight designator into (airline code, numeric suffix).

    Leading zeros are dropped from the number: 'BA 0178' -> ('BA', '178').
    Returns (None, None) if the designator doesn't look like a flight number.
    """
    cleaned = re.sub(r'[\s\-]', '', flight_number or '').upper()
    match = FLIGHT_NUMBER_RE.match(cleaned)
    if not match:
        return None, None
    return match.group(1), match.group(2)
