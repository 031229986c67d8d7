"""
U4B telemetry encoding

A U4B tracker sends its regular callsign in slot 0, followed by telemetry messages whose callsign, locator, and power
fields are digits of two mixed-radix integers. The callsign carries `m`, the sub-square and altitude; the locator and
power carry `n`, the telemetry type, GPS status, speed, voltage, and temperature. A message with an even `n` instead
carries an opaque extended telemetry integer spread across both.

Format reference: https://qrp-labs.com/flights/s4.html (the voltage formula there is documented incorrectly)
"""

import re
from typing import NamedTuple, Tuple

from wsprtrack.channels import Channel
from wsprtrack.reports import POWER_LADDER
from wsprtrack.spots.base import Spot
from wsprtrack.telemetry.spec import Extractor, RAW_CEILING
from wsprtrack.utilities import get_logger

LOGGER = get_logger('wsprtrack.spots')

TELEMETRY_CALLSIGN_PATTERN = re.compile(r'^[01Q][0-9A-Z][0-9][A-Z]{3}$')
TELEMETRY_LOCATOR_PATTERN = re.compile(r'^[A-R]{2}[0-9]{2}$')

KNOT = 1.852

# `m` is the sub-square index and the altitude step
ALTITUDE_STEPS = 1068
ALTITUDE_STEP = 20
SUBSQUARES = 24

# `n` spans every combination of the 18 x 18 x 10 x 10 locator digits and 19 power levels
LOCATOR_POWER_COMBINATIONS = 18 * 18 * 10 * 10 * len(POWER_LADDER)

TELEMETRY_TYPE = Extractor(1, 2)
GPS_BIT = Extractor(2, 2)


class BasicTelemetryField(NamedTuple):
    name: str
    extractor: Extractor
    rotation: int = 0

    def decode(self, n: int) -> float:
        digit = (self.extractor.digit(n) + self.rotation) % self.extractor.modulus
        return self.extractor.offset + digit * self.extractor.slope

    def encode(self, value: float) -> int:
        digit = int(round((value - self.extractor.offset) / self.extractor.slope))
        digit = min(max(digit, 0), self.extractor.modulus - 1)
        return (digit - self.rotation) % self.extractor.modulus


BASIC_TELEMETRY_FIELDS = (
    BasicTelemetryField('speed', Extractor(4, 42, 0, 2 * KNOT)),
    BasicTelemetryField('voltage', Extractor(168, 40, 3.0, 0.05), rotation=20),
    BasicTelemetryField('temperature', Extractor(6720, 90, -50, 1)),
)

# from this version on, the GPS bit carries an extra bit of precision for one field instead
VERSIONED_THRESHOLD = 1
SPEED_VERSION = 1
ALTITUDE_VERSION = 2
LONGITUDE_VERSION = 3
LATITUDE_VERSION = 4

SPEED_EXTENSION = 42 * 2 * KNOT
ALTITUDE_EXTENSION = ALTITUDE_STEP / 2
# centers of the halves of a sub-square (1/12 x 1/24 degrees)
LONGITUDE_EXTENSION = 1 / 48
LATITUDE_EXTENSION = 1 / 96


class BasicTelemetry(NamedTuple):
    subsquare: str
    altitude: float
    speed: float
    voltage: float
    temperature: float
    gps_bit: int


def _alphanumeric_value(character: str) -> int:
    return int(character, 36)


def _alphanumeric_character(value: int) -> str:
    return '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'[value]


def callsign_value(callsign: str) -> int:
    """
    `m` from the second, fourth, fifth, and sixth characters of a telemetry callsign

    :param callsign: telemetry callsign
    :return: `m`
    """

    if len(callsign) != 6:
        raise ValueError(f'telemetry callsign "{callsign}" should have 6 characters')
    if not TELEMETRY_CALLSIGN_PATTERN.match(callsign):
        raise ValueError(f'"{callsign}" is not a telemetry callsign')

    value = _alphanumeric_value(callsign[1])
    for character in callsign[3:]:
        value = value * 26 + ord(character) - ord('A')
    return value


def locator_power_value(locator: str, power: int) -> int:
    """
    `n` from the locator and power level of a telemetry message

    :param locator: 4-character locator
    :param power: power level in dBm
    :return: `n`
    """

    locator = locator[:4]
    if not TELEMETRY_LOCATOR_PATTERN.match(locator):
        raise ValueError(f'"{locator}" is not a telemetry locator')
    if power not in POWER_LADDER:
        raise ValueError(f'power {power} dBm is not a WSPR power level')

    value = (ord(locator[0]) - ord('A')) * 18 + ord(locator[1]) - ord('A')
    value = (value * 10 + int(locator[2])) * 10 + int(locator[3])
    return value * len(POWER_LADDER) + POWER_LADDER.index(power)


def extended_telemetry_value(m: int, n: int) -> int:
    return (m * LOCATOR_POWER_COMBINATIONS + n) // 2


def decode_basic_telemetry(m: int, n: int, version: int = None) -> BasicTelemetry:
    """
    decode a basic telemetry message

    :param m: value of the callsign
    :param n: value of the locator and power
    :param version: declared protocol version
    :return: decoded fields, with the GPS bit applied according to the version
    """

    subsquare_index, altitude_step = divmod(m, ALTITUDE_STEPS)
    if subsquare_index >= SUBSQUARES ** 2:
        raise ValueError(f'sub-square index {subsquare_index} is out of range')
    subsquare = ''.join(
        chr(ord('A') + index) for index in divmod(subsquare_index, SUBSQUARES)
    )

    speed, voltage, temperature = (field.decode(n) for field in BASIC_TELEMETRY_FIELDS)
    altitude = altitude_step * ALTITUDE_STEP
    gps_bit = GPS_BIT.digit(n)

    if version == SPEED_VERSION:
        speed += gps_bit * SPEED_EXTENSION
    elif version == ALTITUDE_VERSION:
        altitude += gps_bit * ALTITUDE_EXTENSION

    return BasicTelemetry(subsquare, altitude, speed, voltage, temperature, gps_bit)


def decode_u4b(spot: Spot, channel: Channel):
    """
    decode the telemetry messages of a U4B spot in place

    :param spot: spot with slots assigned
    :param channel: channel of the tracker
    """

    version = channel.version if channel.version is not None else 0

    for index, report in enumerate(spot.slots[1:], start=1):
        if report is None:
            continue

        try:
            m = callsign_value(report.callsign)
            n = locator_power_value(report.locator, report.power)
        except ValueError as error:
            LOGGER.debug(f'{spot.time:%Y-%m-%d %H:%M} slot {index} - {error}')
            spot.slot_valid[index] = False
            continue

        if TELEMETRY_TYPE.digit(n) == 0:
            spot.raw_telemetry[index] = extended_telemetry_value(m, n)
            spot.slot_valid[index] = True
            continue
        elif index != 1:
            LOGGER.debug(f'{spot.time:%Y-%m-%d %H:%M} slot {index} - basic telemetry outside of slot 1')
            spot.slot_valid[index] = False
            continue

        try:
            telemetry = decode_basic_telemetry(m, n, version)
        except ValueError as error:
            LOGGER.debug(f'{spot.time:%Y-%m-%d %H:%M} slot {index} - {error}')
            spot.slot_valid[index] = False
            continue

        spot.slot_valid[index] = True
        spot.locate(spot.locator[:4] + telemetry.subsquare)
        spot.altitude = telemetry.altitude
        spot.speed = telemetry.speed
        spot.voltage = telemetry.voltage
        spot.temperature = telemetry.temperature
        spot['gps_bit'] = telemetry.gps_bit

        if version < VERSIONED_THRESHOLD:
            spot.valid = telemetry.gps_bit == 1
        elif version == LONGITUDE_VERSION:
            spot.longitude += LONGITUDE_EXTENSION if telemetry.gps_bit else -LONGITUDE_EXTENSION
        elif version == LATITUDE_VERSION:
            spot.latitude += LATITUDE_EXTENSION if telemetry.gps_bit else -LATITUDE_EXTENSION


def encode_callsign(m: int, channel: Channel = None) -> str:
    first, third = channel.telemetry_prefix if channel is not None else ('0', '0')
    m, sixth = divmod(m, 26)
    m, fifth = divmod(m, 26)
    second, fourth = divmod(m, 26)
    return (
        first
        + _alphanumeric_character(second)
        + third
        + ''.join(chr(ord('A') + value) for value in (fourth, fifth, sixth))
    )


def encode_locator_power(n: int) -> Tuple[str, int]:
    n, power_index = divmod(n, len(POWER_LADDER))
    n, fourth = divmod(n, 10)
    n, third = divmod(n, 10)
    first, second = divmod(n, 18)
    locator = chr(ord('A') + first) + chr(ord('A') + second) + str(third) + str(fourth)
    return locator, POWER_LADDER[power_index]


def encode_basic_telemetry(
    locator: str,
    altitude: float,
    speed: float,
    voltage: float,
    temperature: float,
    gps_bit: int = 1,
    channel: Channel = None,
) -> Tuple[str, str, int]:
    """
    encode a basic telemetry message the way a tracker would

    :param locator: 6-character locator of the tracker
    :param altitude: altitude in meters
    :param speed: speed in km/h
    :param voltage: voltage in V
    :param temperature: temperature in °C
    :param gps_bit: GPS bit (GPS validity, or an extra bit of precision from version 1)
    :param channel: channel of the tracker
    :return: callsign, locator, and power of the message
    """

    locator = locator.upper()
    subsquare_index = (ord(locator[4]) - ord('A')) * SUBSQUARES + ord(locator[5]) - ord('A')
    altitude_step = min(max(int(round(altitude / ALTITUDE_STEP)), 0), ALTITUDE_STEPS - 1)
    m = subsquare_index * ALTITUDE_STEPS + altitude_step

    n = 0
    for field, value in reversed(list(zip(BASIC_TELEMETRY_FIELDS, (speed, voltage, temperature)))):
        n = n * field.extractor.modulus + field.encode(value)
    n = (n * 2 + gps_bit) * 2 + 1

    return (encode_callsign(m, channel),) + encode_locator_power(n)


def encode_extended_telemetry(raw: int, channel: Channel = None) -> Tuple[str, str, int]:
    """
    encode an extended telemetry integer the way a tracker would

    :param raw: extended telemetry integer
    :param channel: channel of the tracker
    :return: callsign, locator, and power of the message
    """

    if raw < 0 or raw >= RAW_CEILING:
        raise ValueError(f'extended telemetry value {raw} is out of range')
    m, n = divmod(raw * 2, LOCATOR_POWER_COMBINATIONS)
    return (encode_callsign(m, channel),) + encode_locator_power(n)
