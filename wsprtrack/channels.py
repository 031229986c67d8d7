from datetime import datetime, timedelta
import re
from typing import Union

from wsprtrack.bands import band_info
from wsprtrack.protocols import Protocol
from wsprtrack.reports import RawReport
from wsprtrack.reports.base import utc_minute

CALLSIGN_PATTERN = re.compile(r'^[A-Z0-9]{4,6}$')

# one transmission every two minutes, one cycle every ten
SLOT_MINUTES = 2
CYCLE = timedelta(minutes=10)

# wait for the end of the transmission plus time for reports to trickle in
UPDATE_DELAY = timedelta(seconds=195)
MINIMUM_UPDATE_WAIT = timedelta(seconds=10)

# highest version reinterpreting the U4B GPS bit
MAXIMUM_VERSION = 4


class Channel:
    """
    a tracker's transmission schedule: the band it transmits on, its channel, and the protocol it encodes telemetry with
    """

    def __init__(
        self,
        band: str,
        number: int = 0,
        protocol: Union[Protocol, str] = Protocol.U4B,
        callsign: str = None,
        version: int = None,
    ):
        """
        :param band: band name, e.g. `20m`
        :param number: channel number (`0` - `599` for U4B, `0` - `4` otherwise)
        :param protocol: telemetry protocol
        :param callsign: callsign of the primary transmission
        :param version: declared protocol version, reinterpreting the U4B GPS bit when `1` or greater
        """

        protocol = Protocol.from_string(protocol)
        info = band_info(band)

        number = int(number) if number is not None else 0
        maximum_number = 599 if protocol == Protocol.U4B else 4
        if number < 0 or number > maximum_number:
            raise ValueError(
                f'{protocol.tag} channel should be an integer between 0 and {maximum_number}, not {number}'
            )

        if callsign is not None:
            callsign = callsign.strip().upper()
            if not CALLSIGN_PATTERN.match(callsign):
                raise ValueError(f'unrecognized callsign format: "{callsign}"')

        if version is not None:
            version = int(version)
            if version < 0 or version > MAXIMUM_VERSION:
                raise ValueError(
                    f'protocol version should be between 0 and {MAXIMUM_VERSION}, not {version}'
                )

        self.band = band.strip().lower()
        self.number = number
        self.protocol = protocol
        self.callsign = callsign
        self.version = version
        self.__info = info

    @property
    def slots(self) -> int:
        return self.protocol.slots

    @property
    def base_minute(self) -> int:
        """ minute (modulo 10) of the primary transmission """
        return (self.__info.start_minute + (self.number % 5) * SLOT_MINUTES) % 10

    def slot_of(self, time: datetime) -> int:
        """
        slot index of a transmission at the given time

        :param time: transmission time
        :return: slot index in `[0, 4]`
        """

        return ((time.minute - self.base_minute + 10) % 10) // SLOT_MINUTES

    @property
    def telemetry_prefix(self) -> (str, str):
        """ first and third characters of U4B telemetry callsigns on this channel """
        return '01Q'[self.number // 200], str((self.number // 20) % 10)

    @property
    def frequency_lane(self) -> int:
        """ which of the four U4B frequency lanes within the WSPR window this channel uses """
        return (self.number % 20) // 5

    def accepts(self, report: RawReport, slot: int) -> bool:
        """
        whether the given report could have come from this channel's tracker in the given slot

        :param report: raw report
        :param slot: slot index the report falls in
        :return: whether the report belongs to this channel
        """

        if slot >= self.slots:
            return False
        if slot == 0 or self.protocol in (Protocol.UNKNOWN, Protocol.GENERIC1):
            return self.callsign is None or report.callsign == self.callsign
        elif self.protocol == Protocol.U4B:
            first, third = self.telemetry_prefix
            return (
                len(report.callsign) > 2
                and report.callsign[0] == first
                and report.callsign[2] == third
            )
        else:
            return True

    def next_update_time(self, now: datetime) -> datetime:
        """
        when the next incremental retrieval should happen: shortly after the last slot of the next cycle has been sent

        :param now: current time
        :return: time of next update
        """

        now = utc_minute(now) + timedelta(seconds=now.second, microseconds=now.microsecond)
        last_slot_minute = (self.base_minute + (self.slots - 1) * SLOT_MINUTES) % 10
        cycle_start = now.replace(minute=now.minute - now.minute % 10, second=0, microsecond=0)
        update_time = cycle_start + timedelta(minutes=last_slot_minute) + UPDATE_DELAY
        while update_time < now + MINIMUM_UPDATE_WAIT:
            update_time += CYCLE
        return update_time

    def __eq__(self, other: 'Channel') -> bool:
        return (
            isinstance(other, Channel)
            and self.band == other.band
            and self.number == other.number
            and self.protocol == other.protocol
            and self.callsign == other.callsign
            and self.version == other.version
        )

    def __repr__(self) -> str:
        return (
            f'{self.__class__.__name__}(band={repr(self.band)}, number={self.number}, '
            f'protocol={repr(self.protocol.tag)}, callsign={repr(self.callsign)}, version={repr(self.version)})'
        )
