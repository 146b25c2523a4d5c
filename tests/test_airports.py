from unittest import mock

import requests

from runway.cache import AirportCache
from runway.ingestion.airport_db import EMBEDDED_AIRPORTS, AirportDirectory, AirportInfo, parse_airports_csv

AIRPORTS_CSV = '''"id","ident","type","name","latitude_deg","longitude_deg","municipality","iata_code"
1,"KSFO","large_airport","San Francisco International Airport",37.6188,-122.375,"San Francisco","SFO"
2,"KPAO","small_airport","Palo Alto Airport",37.4611,-122.115,"Palo Alto","PAO"
3,"00AK","small_airport","Lowell Field",59.947,-151.692,"Anchor Point",""
4,"XXXX","closed","Broken Row","n/a",-1.0,"Nowhere","BRK"
'''


def csv_session(text=AIRPORTS_CSV, error=None):
    session = mock.MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = mock.MagicMock(text=text)
    return session


def test_parse_airports_csv():
    index = parse_airports_csv(AIRPORTS_CSV)

    assert set(index) == {'SFO', 'PAO'}
    assert index['PAO'].city == 'Palo Alto'
    assert index['SFO'].latitude == 37.6188


def test_directory_loads_csv_once():
    session = csv_session()
    directory = AirportDirectory(session=session)

    assert directory.lookup('pao').name == 'Palo Alto Airport'
    assert directory.lookup('SFO').longitude == -122.375
    assert session.get.call_count == 1


def test_directory_falls_back_to_embedded_table():
    directory = AirportDirectory(session=csv_session())
    assert directory.lookup('LHR') == EMBEDDED_AIRPORTS['LHR']
    assert directory.lookup('QQQ') is None
    assert directory.lookup('') is None


def test_failed_download_backs_off():
    session = csv_session(error=requests.ConnectionError('offline'))
    directory = AirportDirectory(session=session)

    assert directory.lookup('EWR') == EMBEDDED_AIRPORTS['EWR']
    assert directory.lookup('PAO') is None
    assert session.get.call_count == 1


def test_cache_loads_each_code_once():
    cache = AirportCache()
    loader = mock.Mock(side_effect=EMBEDDED_AIRPORTS.get)

    first = cache.get_or_load('sfo', loader)
    second = cache.get_or_load('SFO', loader)

    assert first is second
    loader.assert_called_once_with('SFO')
    assert cache.stats['entries'] == 1
    assert cache.stats['hits'] == 1


def test_cache_does_not_store_misses():
    cache = AirportCache()
    loader = mock.Mock(return_value=None)

    assert cache.get_or_load('QQQ', loader) is None
    assert cache.get_or_load('QQQ', loader) is None
    assert loader.call_count == 2
    assert cache.get_or_load(None, loader) is None


def test_cache_clear():
    cache = AirportCache()
    cache.get_or_load('XYZ', lambda iata: AirportInfo(iata, 'Test', 'Testville', 1.0, 2.0))
    cache.clear()
    assert cache.get('XYZ') is None
