from datetime import datetime, timezone
import logging
from pathlib import Path
import sys

import humanize
import typer

from wsprtrack.configuration.run import RunConfiguration
from wsprtrack.pipeline import reconstruct_track
from wsprtrack.reports import merge_reports, RawReportFile
from wsprtrack.reports.base import utc_minute
from wsprtrack.spots.writer import write_spot_track
from wsprtrack.utilities import DEFAULT_LOG_FORMAT, get_logger

logging.basicConfig(stream=sys.stdout, level=logging.INFO, format=DEFAULT_LOG_FORMAT)


def wsprtrack_command(configuration_filename: str, output: str = None):
    """
    reconstruct the track of a WSPR tracker from wspr.live exports

    :param configuration_filename: configuration file in YAML format - see `examples` directory for examples
    :param output: file to write the track to (`.geojson`, `.json`, or `.txt`), overriding the configuration
    """

    if not isinstance(configuration_filename, Path):
        configuration_filename = Path(configuration_filename)

    configuration = RunConfiguration.from_file(configuration_filename)
    if output is not None:
        configuration['output'] = {'filename': output}

    if configuration['log']['filename'] is not None:
        file_handler = logging.FileHandler(configuration['log']['filename'])
        file_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)
        # dropped reports and detached spots are logged by the package at debug level
        get_logger('wsprtrack', log_filename=configuration['log']['filename'])

    channel = configuration.channel_configuration
    telemetry = configuration['telemetry'].spec
    logging.info(f'tracking {channel}')
    if telemetry is not None:
        logging.info(f'decoding extended telemetry with "{telemetry}"')

    reports = []
    for filename in configuration['reports']['filenames']:
        # relative paths are relative to the configuration file
        if not filename.is_absolute():
            filename = configuration_filename.parent / filename
        try:
            report_file = RawReportFile(filename)
        except NotImplementedError as error:
            logging.warning(f'{error.__class__.__name__} - {error}')
            continue
        new_reports = report_file.reports
        logging.info(f'read {len(new_reports)} report(s) from {report_file.location}')
        reports = merge_reports(reports, new_reports)

    start_time = configuration['time']['start']
    end_time = configuration['time']['end']
    if start_time is not None:
        reports = [report for report in reports if report.time >= utc_minute(start_time)]
    if end_time is not None:
        reports = [report for report in reports if report.time <= utc_minute(end_time)]

    if len(reports) == 0:
        logging.error('no reports to reconstruct a track from')
        return

    track = reconstruct_track(
        reports,
        channel,
        telemetry=telemetry,
        detach_grid4=configuration['track']['detach_grid4'],
    )

    summary = track.summary
    logging.info(
        f'{track.name}: {summary.attached} spot(s) attached, {summary.unattached} unattached, '
        f'{summary.distance / 1000:.0f} km over {humanize.naturaldelta(summary.duration)}'
        + (f', {summary.laps} lap(s)' if summary.laps > 0 else '')
    )

    last_spot = track.last_spot
    if last_spot is not None:
        now = datetime.now(timezone.utc)
        message = f'last spot {last_spot} ({humanize.naturaltime(now - last_spot.time)})'
        if last_spot.altitude is not None:
            message += f' at {last_spot.altitude:.0f} m'
        logging.info(message)
        logging.info(f'next update expected at {channel.next_update_time(now):%Y-%m-%d %H:%M:%S %Z}')

    if configuration['output']['filename'] is not None:
        write_spot_track(track, configuration['output']['filename'], telemetry=telemetry)
        logging.info(f'wrote {len(track)} spot(s) to {configuration["output"]["filename"]}')


def main():
    typer.run(wsprtrack_command)


if __name__ == '__main__':
    main()
