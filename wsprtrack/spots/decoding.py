from typing import Iterable, List

from wsprtrack.channels import Channel
from wsprtrack.protocols import PayloadFamily
from wsprtrack.spots.base import Spot
from wsprtrack.spots.u4b import decode_u4b
from wsprtrack.utilities import get_logger

LOGGER = get_logger('wsprtrack.spots')

# altitude in meters per dBm of declared power, in the primary and secondary transmission
PRIMARY_ALTITUDE_STEP = 300
SECONDARY_ALTITUDE_STEP = 20


def decode_primary_only(spot: Spot, channel: Channel):
    spot.altitude = PRIMARY_ALTITUDE_STEP * spot.slots[0].power


def decode_two_message(spot: Spot, channel: Channel):
    decode_primary_only(spot, channel)

    secondary = spot.slots[1]
    if secondary is None:
        return

    locator = secondary.locator
    if len(locator) != 6 or locator[:4] != spot.locator[:4]:
        LOGGER.debug(
            f'{spot.time:%Y-%m-%d %H:%M} slot 1 - locator "{locator}" does not extend "{spot.locator}"'
        )
        spot.slot_valid[1] = False
        return

    try:
        spot.locate(locator)
    except ValueError as error:
        LOGGER.debug(f'{spot.time:%Y-%m-%d %H:%M} slot 1 - {error}')
        spot.slot_valid[1] = False
        return

    spot.slot_valid[1] = True
    spot.altitude += SECONDARY_ALTITUDE_STEP * secondary.power


def decode_passthrough(spot: Spot, channel: Channel):
    pass


DECODERS = {
    PayloadFamily.DENSE_NUMERIC: decode_u4b,
    PayloadFamily.TWO_MESSAGE: decode_two_message,
    PayloadFamily.PRIMARY_ONLY: decode_primary_only,
    PayloadFamily.PASSTHROUGH: decode_passthrough,
}


def decode_spot(spot: Spot, channel: Channel) -> Spot:
    """
    Derive the position and telemetry of a spot from its transmissions, according to the protocol of the channel.

    The primary transmission always locates the spot. A malformed supplementary transmission only flags its own slot
    as invalid and takes no part in the decode.

    :param spot: spot with slots assigned
    :param channel: channel of the tracker
    :return: the same spot, decoded in place
    """

    payload = spot.protocol.payload
    primary = spot.slots[0]

    # the dense numeric protocol refines the square of the primary transmission with its own sub-square
    locator = primary.locator[:4] if payload == PayloadFamily.DENSE_NUMERIC else primary.locator
    try:
        spot.locate(locator)
        spot.slot_valid[0] = True
    except ValueError as error:
        LOGGER.warning(f'{spot.time:%Y-%m-%d %H:%M} primary transmission - {error}')
        spot.slot_valid[0] = False
        spot.valid = False
        return spot

    DECODERS[payload](spot, channel)
    return spot


def decode_spots(spots: Iterable[Spot], channel: Channel) -> List[Spot]:
    return [decode_spot(spot, channel) for spot in spots]
