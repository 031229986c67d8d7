import re
from typing import Mapping, Sequence, Union

from wsprtrack.reports.base import POWER_LADDER, RawReport, Reception

CALLSIGN_PATTERN = re.compile(r'^(<)?[A-Z0-9/]{3,12}(>)?$')
LOCATOR_PATTERN = re.compile(r'^[A-R]{2}[0-9]{2}([A-X]{2})?$')


class InvalidReportError(Exception):
    pass


def parse_reception(raw_reception: Union[Sequence, Mapping]) -> Reception:
    """
    Parse one reception record, either `[rx_sign, rx_loc, frequency, snr]`, `[rx_sign, frequency]`,
    or a mapping of the same fields.

    :param raw_reception: raw reception record
    :return: reception
    """

    try:
        if isinstance(raw_reception, Mapping):
            callsign = raw_reception['rx_sign']
            locator = raw_reception.get('rx_loc')
            frequency = raw_reception['frequency']
            snr = raw_reception.get('snr')
        elif len(raw_reception) == 2:
            callsign, frequency = raw_reception
            locator = None
            snr = None
        else:
            callsign, locator, frequency, snr = raw_reception
        # missing CSV cells are read as NaN
        if not isinstance(locator, str):
            locator = None
        if snr is not None and snr != snr:
            snr = None
        return Reception(
            str(callsign).strip().upper(),
            locator,
            float(frequency),
            float(snr) if snr is not None else None,
        )
    except (KeyError, TypeError, ValueError) as error:
        raise InvalidReportError(f'unreadable reception record {raw_reception!r} - {error}')


def parse_report(row: Union[Sequence, Mapping]) -> RawReport:
    """
    Parse a raw report from a wspr.live row, `[time, tx_sign, tx_loc, power, [reception, ...]]`,
    or from a mapping with the same field names.

    wspr.live format reference: https://wspr.live

    :param row: wspr.live row
    :return: raw report
    """

    try:
        if isinstance(row, Mapping):
            time = row['time']
            callsign = row['tx_sign']
            locator = row['tx_loc']
            power = row['power']
            receptions = row.get('receptions', [])
        else:
            time, callsign, locator, power, receptions = row
    except (KeyError, TypeError, ValueError) as error:
        raise InvalidReportError(f'unreadable row {row!r} - {error}')

    callsign = str(callsign).strip().upper()
    if not CALLSIGN_PATTERN.match(callsign):
        raise InvalidReportError(f'invalid callsign "{callsign}"')

    locator = str(locator).strip().upper()
    if not LOCATOR_PATTERN.match(locator):
        raise InvalidReportError(f'invalid locator "{locator}" from {callsign}')

    try:
        power = int(power)
    except (TypeError, ValueError):
        raise InvalidReportError(f'invalid power "{power}" from {callsign}')
    if power not in POWER_LADDER:
        raise InvalidReportError(f'power {power} dBm from {callsign} is not a WSPR power level')

    try:
        return RawReport(
            time,
            callsign,
            locator,
            power,
            [parse_reception(reception) for reception in receptions],
        )
    except (OverflowError, TypeError, ValueError) as error:
        raise InvalidReportError(f'invalid time "{time}" from {callsign} - {error}')
