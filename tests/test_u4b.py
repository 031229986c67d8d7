from datetime import datetime

import pytest

from wsprtrack.channels import Channel
from wsprtrack.protocols import Protocol
from wsprtrack.reports import RawReport
from wsprtrack.spots import decode_spot, Spot
from wsprtrack.spots.u4b import (
    callsign_value,
    decode_basic_telemetry,
    encode_basic_telemetry,
    encode_extended_telemetry,
    extended_telemetry_value,
    LATITUDE_EXTENSION,
    locator_power_value,
    LONGITUDE_EXTENSION,
)
from wsprtrack.telemetry import RAW_CEILING

PRIMARY_TIME = datetime(2025, 7, 1, 12, 8)


def u4b_spot(*messages, version: int = None) -> (Spot, Channel):
    channel = Channel('20m', 0, callsign='KD2XYZ', version=version)
    spot = Spot(RawReport(PRIMARY_TIME, 'KD2XYZ', 'FN20', 13), Protocol.U4B)
    for slot, (callsign, locator, power) in enumerate(messages, start=1):
        spot.slots[slot] = RawReport(
            datetime(2025, 7, 1, 12, 8 + 2 * slot), callsign, locator, power
        )
    return spot, channel


def test_values():
    assert callsign_value('0C0IAQ') == 216336
    assert locator_power_value('FQ30', 30) == 201979
    assert extended_telemetry_value(0, 2) == 1

    with pytest.raises(ValueError):
        callsign_value('0C0IA')
    with pytest.raises(ValueError):
        callsign_value('0C0I1Q')
    with pytest.raises(ValueError):
        locator_power_value('FQ30', 31)
    with pytest.raises(ValueError):
        locator_power_value('FZ30', 30)


def test_decode_basic_telemetry():
    spot, channel = u4b_spot(('0C0IAQ', 'FQ30', 30))

    decode_spot(spot, channel)

    assert spot.slot_valid[:2] == [True, True]
    assert spot.valid
    assert spot.locator == 'FN20IK'
    assert spot.latitude == pytest.approx(40 + 10 / 24 + 1 / 48)
    assert spot.longitude == pytest.approx(-76 + 8 / 12 + 1 / 24)
    assert spot.altitude == 12000
    assert spot.speed == pytest.approx(10 * 2 * 1.852)
    assert spot.voltage == pytest.approx(4.1)
    assert spot.temperature == -20
    assert spot['gps_bit'] == 1


def test_round_trip():
    values = [
        ('FN20IK', 12000, 37.04, 4.1, -20),
        ('PM95AA', 0, 0, 3.0, -50),
        ('AA00XX', 21340, 41 * 2 * 1.852, 4.95, 39),
        ('RR99MM', 9020, 20 * 1.852, 3.3, 0),
    ]

    for locator, altitude, speed, voltage, temperature in values:
        callsign, telemetry_locator, power = encode_basic_telemetry(
            locator, altitude, speed, voltage, temperature
        )
        spot = Spot(RawReport(PRIMARY_TIME, 'KD2XYZ', locator[:4], 13), Protocol.U4B)
        spot.slots[1] = RawReport(datetime(2025, 7, 1, 12, 10), callsign, telemetry_locator, power)

        decode_spot(spot, Channel('20m', 0))

        assert spot.slot_valid[1]
        assert spot.locator == locator
        assert spot.altitude == altitude
        assert spot.speed == pytest.approx(speed)
        assert spot.voltage == pytest.approx(voltage)
        assert spot.temperature == temperature


def test_gps_bit_clear():
    spot, channel = u4b_spot(encode_basic_telemetry('FN20IK', 12000, 37.04, 4.1, -20, gps_bit=0))

    decode_spot(spot, channel)

    assert spot.slot_valid[1]
    assert not spot.valid
    assert spot.altitude == 12000
    assert spot.locator == 'FN20IK'


def test_versions():
    reference = decode_basic_telemetry(216336, 201979 - 2)
    fields = ['subsquare', 'altitude', 'speed', 'voltage', 'temperature']

    assert reference.gps_bit == 0

    for version in range(5):
        cleared = decode_basic_telemetry(216336, 201979 - 2, version)
        assert cleared == reference

    speed = decode_basic_telemetry(216336, 201979, 1)
    altitude = decode_basic_telemetry(216336, 201979, 2)
    unversioned = decode_basic_telemetry(216336, 201979, 0)

    assert speed.speed == pytest.approx(reference.speed + 84 * 1.852)
    assert altitude.altitude == reference.altitude + 10
    for field in fields:
        if field != 'speed':
            assert getattr(speed, field) == getattr(reference, field)
        if field != 'altitude':
            assert getattr(altitude, field) == getattr(reference, field)
        assert getattr(unversioned, field) == getattr(reference, field)


def test_position_versions():
    message = encode_basic_telemetry('FN20IK', 12000, 37.04, 4.1, -20, gps_bit=1)
    cleared_message = encode_basic_telemetry('FN20IK', 12000, 37.04, 4.1, -20, gps_bit=0)

    reference, channel = u4b_spot(message)
    decode_spot(reference, channel)

    for version, latitude_shift, longitude_shift in [
        (3, 0, LONGITUDE_EXTENSION),
        (4, LATITUDE_EXTENSION, 0),
    ]:
        spot, channel = u4b_spot(message, version=version)
        cleared_spot, _ = u4b_spot(cleared_message, version=version)
        decode_spot(spot, channel)
        decode_spot(cleared_spot, channel)

        assert spot.valid and cleared_spot.valid
        assert spot.latitude == pytest.approx(reference.latitude + latitude_shift)
        assert spot.longitude == pytest.approx(reference.longitude + longitude_shift)
        assert cleared_spot.latitude == pytest.approx(reference.latitude - latitude_shift)
        assert cleared_spot.longitude == pytest.approx(reference.longitude - longitude_shift)
        assert spot.altitude == cleared_spot.altitude == reference.altitude
        assert spot.speed == cleared_spot.speed == reference.speed


def test_extended_telemetry():
    spot, channel = u4b_spot(
        ('0C0IAQ', 'FQ30', 30),
        encode_extended_telemetry(123456789),
        encode_extended_telemetry(RAW_CEILING - 1),
    )

    decode_spot(spot, channel)

    assert spot.slot_valid == [True, True, True, True, None]
    assert spot.raw_telemetry == [None, None, 123456789, RAW_CEILING - 1, None]

    with pytest.raises(ValueError):
        encode_extended_telemetry(RAW_CEILING)
    with pytest.raises(ValueError):
        encode_extended_telemetry(-1)


def test_extended_telemetry_in_slot_1():
    spot, channel = u4b_spot(encode_extended_telemetry(4242))

    decode_spot(spot, channel)

    assert spot.slot_valid[1]
    assert spot.raw_telemetry[1] == 4242
    assert spot.locator == 'FN20'
    assert spot.altitude is None


def test_invalid_slots():
    spot, channel = u4b_spot(
        ('0C0IA', 'FQ30', 30),
        ('0C0IAQ', 'FQ30', 30),
        ('0C0IAQ', 'FQ30', 31),
        encode_extended_telemetry(7),
    )

    decode_spot(spot, channel)

    assert spot.slot_valid == [True, False, False, False, True]
    assert spot.locator == 'FN20'
    assert spot.latitude == pytest.approx(40.5)
    assert spot.altitude is None
    assert spot.valid


def test_subsquare_out_of_range():
    spot, channel = u4b_spot(('0Z0ZZZ', 'FQ30', 30))

    decode_spot(spot, channel)

    assert spot.slot_valid[1] is False
    assert spot.locator == 'FN20'
