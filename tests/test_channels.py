from datetime import datetime, timezone

import pytest

from wsprtrack.bands import band_info, BANDS
from wsprtrack.channels import Channel
from wsprtrack.protocols import Correlation, PayloadFamily, Protocol
from wsprtrack.reports import RawReport


def test_bands():
    assert len(BANDS) == 17
    assert band_info('20m').start_minute == 8
    assert band_info(' 40M ').start_minute == 0

    with pytest.raises(ValueError):
        band_info('11m')


def test_protocols():
    assert Protocol.from_string('U4B') is Protocol.U4B
    assert Protocol.from_string(' zachtek2 ') is Protocol.ZACHTEK2
    assert Protocol.from_string(Protocol.WB8ELK) is Protocol.WB8ELK
    assert Protocol.U4B.slots == 5
    assert Protocol.U4B.correlation == Correlation.CORECEPTION
    assert Protocol.WB8ELK.payload == PayloadFamily.TWO_MESSAGE
    assert Protocol.ZACHTEK1.primary_only
    assert not Protocol.ZACHTEK2.primary_only
    assert str(Protocol.GENERIC2) == 'generic2'

    with pytest.raises(ValueError):
        Protocol.from_string('aprs')


def test_slots():
    channel = Channel('20m', 0)
    rotated_channel = Channel('20m', 3)

    assert channel.base_minute == 8
    assert rotated_channel.base_minute == 4

    assert channel.slot_of(datetime(2025, 7, 1, 12, 8)) == 0
    assert channel.slot_of(datetime(2025, 7, 1, 12, 10)) == 1
    assert channel.slot_of(datetime(2025, 7, 1, 12, 16)) == 4
    assert rotated_channel.slot_of(datetime(2025, 7, 1, 12, 4)) == 0
    assert rotated_channel.slot_of(datetime(2025, 7, 1, 12, 2)) == 4


def test_telemetry_prefix():
    assert Channel('20m', 0).telemetry_prefix == ('0', '0')
    assert Channel('20m', 259).telemetry_prefix == ('1', '2')
    assert Channel('20m', 599).telemetry_prefix == ('Q', '9')

    assert Channel('20m', 0).frequency_lane == 0
    assert Channel('20m', 17).frequency_lane == 3


def test_invalid_channel():
    with pytest.raises(ValueError):
        Channel('20m', 600)
    with pytest.raises(ValueError):
        Channel('20m', 5, protocol='zachtek1')
    with pytest.raises(ValueError):
        Channel('20m', 0, version=5)
    with pytest.raises(ValueError):
        Channel('20m', 0, callsign='W1AW/P')
    with pytest.raises(ValueError):
        Channel('11m', 0)

    assert Channel('20m', 4, protocol='zachtek1').number == 4


def test_accepts():
    channel = Channel('20m', 0, callsign='kd2xyz')
    primary = RawReport(datetime(2025, 7, 1, 12, 8), 'KD2XYZ', 'FN20', 13)
    other = RawReport(datetime(2025, 7, 1, 12, 8), 'W1AW', 'FN31', 13)
    telemetry = RawReport(datetime(2025, 7, 1, 12, 10), '0C0IAQ', 'FQ30', 30)
    other_channel = RawReport(datetime(2025, 7, 1, 12, 10), '1C2IAQ', 'FQ30', 30)

    assert channel.accepts(primary, 0)
    assert not channel.accepts(other, 0)
    assert channel.accepts(telemetry, 1)
    assert not channel.accepts(other_channel, 1)
    assert not Channel('20m', 0, protocol='zachtek1').accepts(telemetry, 1)
    assert Channel('20m', 0, protocol='zachtek2').accepts(other, 1)


def test_next_update_time():
    channel = Channel('20m', 0)

    assert channel.next_update_time(
        datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc)
    ) == datetime(2025, 7, 1, 12, 9, 15, tzinfo=timezone.utc)
    assert channel.next_update_time(
        datetime(2025, 7, 1, 12, 9, 10, tzinfo=timezone.utc)
    ) == datetime(2025, 7, 1, 12, 19, 15, tzinfo=timezone.utc)
    assert Channel('20m', 0, protocol='zachtek1').next_update_time(
        datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc)
    ) == datetime(2025, 7, 1, 12, 11, 15, tzinfo=timezone.utc)
