from os import PathLike
from pathlib import Path

import geojson
import numpy
import typepigeon

from wsprtrack.spots.tracks import SpotTrack
from wsprtrack.telemetry import ExtendedTelemetrySpec


def _optional_float(value: float, decimals: int = 3) -> float:
    return float(numpy.round(value, decimals)) if value is not None else None


def write_spot_track(track: SpotTrack, filename: PathLike, telemetry: ExtendedTelemetrySpec = None):
    """
    write the spots of a track to file

    :param track: curated spot track
    :param filename: `.geojson` / `.json` (one point per spot and a line over the attached spots) or `.txt`
    :param telemetry: extended telemetry specification to label extended telemetry values with
    """

    if not isinstance(filename, Path):
        filename = Path(filename)

    if filename.suffix == '.txt':
        lines = []
        for spot in track:
            line = (
                f'{spot.time:%Y-%m-%d %H:%M:%S %Z} {spot.callsign} {spot.locator} '
                f'{"attached" if spot.attached else "unattached"}'
            )
            if spot.altitude is not None:
                line += f' {spot.altitude:.0f}m'
            lines.append(line)
        with open(filename, 'w') as output_file:
            output_file.write('\n'.join(lines))
    elif filename.suffix in ['.geojson', '.json']:
        features = []
        for spot in track:
            if not spot.located:
                continue

            properties = {
                'time': f'{spot.time:%Y%m%d%H%M%S}',
                'callsign': spot.callsign,
                'locator': spot.locator,
                'altitude': _optional_float(spot.altitude),
                'speed': _optional_float(spot.speed),
                'voltage': _optional_float(spot.voltage),
                'temperature': _optional_float(spot.temperature),
                'valid': spot.valid,
                'attached': spot.attached,
                'receivers': spot.receivers,
            }
            for index, value in enumerate(spot.telemetry):
                label = telemetry.label(index) if telemetry is not None else f'ET{index}'
                properties[label] = _optional_float(value, 6)
            properties.update(spot.attributes)

            features.append(
                geojson.Feature(
                    geometry=geojson.Point(spot.coordinates.tolist()), properties=properties,
                )
            )

        attached_spots = track.attached_spots
        if len(attached_spots) > 0:
            summary = track.summary
            properties = {
                'name': track.name,
                'start_time': f'{attached_spots[0].time:%Y-%m-%d %H:%M:%S}',
                'end_time': f'{attached_spots[-1].time:%Y-%m-%d %H:%M:%S}',
                'duration': f'{summary.duration}',
                'distance': float(numpy.round(summary.distance, 3)),
                'laps': summary.laps,
                'attached': summary.attached,
                'unattached': summary.unattached,
                **track.attributes,
            }

            features.append(
                geojson.Feature(
                    geometry=geojson.LineString(
                        [spot.coordinates.tolist() for spot in attached_spots]
                    ),
                    properties=typepigeon.convert_to_json(properties),
                )
            )

        features = geojson.FeatureCollection(features)

        with open(filename, 'w') as output_file:
            geojson.dump(features, output_file)
    else:
        raise NotImplementedError(
            f'saving to file type "{filename.suffix}" has not been implemented'
        )
