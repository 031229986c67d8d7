from typing import Iterable

from wsprtrack.channels import Channel
from wsprtrack.reports import RawReport
from wsprtrack.spots import decode_spots, match_reports, SpotTrack
from wsprtrack.telemetry import evaluate_spot, ExtendedTelemetrySpec
from wsprtrack.utilities import get_logger

LOGGER = get_logger('wsprtrack')


def reconstruct_track(
    reports: Iterable[RawReport],
    channel: Channel,
    telemetry: ExtendedTelemetrySpec = None,
    detach_grid4: bool = False,
    name: str = None,
) -> SpotTrack:
    """
    Reconstruct the track of a tracker from raw reports: match the reports into spots, decode the spots, evaluate their
    extended telemetry, and curate the path.

    Every call starts from scratch; call again with the merged reports after retrieving more.

    :param reports: raw reports, sorted by time and callsign
    :param channel: channel of the tracker
    :param telemetry: extended telemetry specification
    :param detach_grid4: exclude fixes from 4-character locators from the path
    :param name: name of track
    :return: curated track
    """

    spots = decode_spots(match_reports(reports, channel), channel)

    if telemetry is not None:
        for spot in spots:
            evaluate_spot(spot, telemetry)

    if name is None:
        name = channel.callsign if channel.callsign is not None else f'{channel.protocol} {channel.band}'

    track = SpotTrack(spots, name=name, detach_grid4=detach_grid4, channel=repr(channel))
    LOGGER.debug(f'{len(spots)} spots decoded - {track}')
    return track
