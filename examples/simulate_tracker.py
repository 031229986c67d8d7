from datetime import datetime, timedelta

from wsprtrack import Channel, reconstruct_track
from wsprtrack.reports import RawReport
from wsprtrack.spots.u4b import encode_basic_telemetry, encode_extended_telemetry
from wsprtrack.spots.writer import write_spot_track
from wsprtrack.telemetry import parse_extended_telemetry

if __name__ == '__main__':
    channel = Channel('20m', 0, callsign='KD2XYZ')
    telemetry = parse_extended_telemetry('et0:0_8:-50:1,10:0:0.5', labels='temp,bat', units='C,V')
    start_time = datetime(2025, 7, 1, 12, 8)
    receptions = [('W1AW', 'FN31', 14097050, -20)]

    reports = []
    for cycle, locator in enumerate(['FN20IK', 'FN20KL', 'FN20MM', 'FN21AA']):
        time = start_time + timedelta(minutes=10 * cycle)
        reports.append(RawReport(time, channel.callsign, locator[:4], 13, receptions))
        reports.append(
            RawReport(
                time + timedelta(minutes=2),
                *encode_basic_telemetry(locator, 12000 + 40 * cycle, 30, 4.1, -30, channel=channel),
                receptions,
            )
        )
        reports.append(
            RawReport(
                time + timedelta(minutes=4),
                *encode_extended_telemetry(2 * 4 + (cycle % 8) * 320 + 8 * 2560, channel=channel),
                receptions,
            )
        )

    track = reconstruct_track(sorted(reports), channel, telemetry=telemetry)

    for spot in track:
        values = ', '.join(
            f'{telemetry.label(index)} {telemetry.format_value(index, value)}'
            for index, value in enumerate(spot.telemetry)
            if value is not None
        )
        print(f'{spot} {spot.altitude:.0f}m {values}')
    print(track.summary)

    write_spot_track(track, 'simulated_track.geojson', telemetry=telemetry)
