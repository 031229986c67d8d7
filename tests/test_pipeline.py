from datetime import datetime

import pytest

from tests import INPUT_DIRECTORY
from wsprtrack import Channel, reconstruct_track
from wsprtrack.reports import RawReport, RawReportFile
from wsprtrack.spots.u4b import encode_extended_telemetry
from wsprtrack.telemetry import parse_extended_telemetry

# user-defined message type 0 in slot 2, with a temperature digit of 5 and a battery digit of 8
EXTENDED_TELEMETRY = 2 * 4 + 0 * 20 + 5 * 320 + 8 * 2560


def test_reconstruct_track():
    channel = Channel('20m', 0, callsign='KD2XYZ')
    reports = RawReportFile(INPUT_DIRECTORY / 'reports.json').reports

    track = reconstruct_track(reports, channel)

    assert len(track) == 2
    assert track.name == 'KD2XYZ'

    spot = track[0]
    assert spot.slot_valid[:2] == [True, True]
    assert spot.locator == 'FN20IK'
    assert spot.altitude == 12000
    assert spot.speed > 0
    assert spot.attached

    # the lone 4-character fix 10 minutes later adds nothing to the path
    assert track[1].locator == 'FN20'
    assert not track[1].attached

    assert track.summary.attached == 1
    assert track.summary.unattached == 1


def test_reconstruct_track_with_extended_telemetry():
    channel = Channel('20m', 0, callsign='KD2XYZ')
    telemetry = parse_extended_telemetry('et0:0_8:-50:1,10:0:0.5', labels='temp,bat')
    reports = RawReportFile(INPUT_DIRECTORY / 'reports.json').reports
    reports.append(
        RawReport(
            datetime(2025, 7, 1, 12, 12),
            *encode_extended_telemetry(EXTENDED_TELEMETRY, channel),
            [('W1AW', 'FN31', 14097051, -20)],
        )
    )
    reports = sorted(reports)

    track = reconstruct_track(reports, channel, telemetry=telemetry)

    spot = track[0]
    assert spot.raw_telemetry[2] == EXTENDED_TELEMETRY
    assert spot.telemetry[0] == -45
    assert spot.telemetry[1] == pytest.approx(4.0)
    assert track[1].telemetry == [None, None]


def test_reconstruct_track_unknown_protocol():
    channel = Channel('20m', 0, protocol='unknown')
    reports = RawReportFile(INPUT_DIRECTORY / 'reports.json').reports

    track = reconstruct_track(reports, channel)

    assert len(track) == 3
    assert track.attached_count == 0
    assert track.name == 'unknown 20m'
