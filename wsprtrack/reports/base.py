from datetime import datetime, timezone
from typing import Iterable, NamedTuple, Tuple, Union

from dateutil.parser import parse as parse_date

# transmit powers (dBm) a WSPR message can declare
POWER_LADDER = (0, 3, 7, 10, 13, 17, 20, 23, 27, 30, 33, 37, 40, 43, 47, 50, 53, 57, 60)


class Reception(NamedTuple):
    """ one receiver's decode of a transmission """

    callsign: str
    locator: str = None
    frequency: float = None
    snr: float = None


def utc_minute(time: Union[datetime, str]) -> datetime:
    """
    normalize a time to a timezone-aware UTC datetime at minute resolution (naive times are taken as UTC)

    :param time: datetime or date string
    :return: UTC datetime
    """

    if isinstance(time, str):
        time = parse_date(time)
    if time.tzinfo is None:
        time = time.replace(tzinfo=timezone.utc)
    else:
        time = time.astimezone(timezone.utc)
    return time.replace(second=0, microsecond=0)


class RawReport:
    """ one beacon transmission along with every reception of it """

    def __init__(
        self,
        time: Union[datetime, str],
        callsign: str,
        locator: str,
        power: int,
        receptions: Iterable[Union[Reception, tuple]] = None,
    ):
        """
        :param time: time of transmission (UTC)
        :param callsign: transmitted callsign
        :param locator: transmitted 4- or 6-character locator
        :param power: transmitted power level, in dBm
        :param receptions: reception records of the transmission
        """

        if receptions is None:
            receptions = []

        self.__time = utc_minute(time)
        self.__callsign = str(callsign).strip().upper()
        self.__locator = str(locator).strip().upper() if locator is not None else ''
        self.__power = int(power)
        self.__receptions = tuple(
            sorted(
                (
                    reception if isinstance(reception, Reception) else Reception(*reception)
                    for reception in receptions
                ),
                key=lambda reception: reception.callsign,
            )
        )

    @property
    def time(self) -> datetime:
        return self.__time

    @property
    def callsign(self) -> str:
        return self.__callsign

    @property
    def locator(self) -> str:
        return self.__locator

    @property
    def power(self) -> int:
        return self.__power

    @property
    def power_index(self) -> int:
        """ position of the declared power on the power ladder, or `None` if it is not on the ladder """
        try:
            return POWER_LADDER.index(self.power)
        except ValueError:
            return None

    @property
    def receptions(self) -> Tuple[Reception, ...]:
        return self.__receptions

    @property
    def receivers(self) -> Tuple[str, ...]:
        return tuple(reception.callsign for reception in self.receptions)

    @property
    def key(self) -> Tuple[datetime, str]:
        return self.time, self.callsign

    def __eq__(self, other: 'RawReport') -> bool:
        return (
            isinstance(other, RawReport)
            and self.key == other.key
            and self.locator == other.locator
            and self.power == other.power
            and self.receptions == other.receptions
        )

    def __hash__(self) -> int:
        return hash(self.key)

    def __lt__(self, other: 'RawReport') -> bool:
        return self.key < other.key

    def __gt__(self, other: 'RawReport') -> bool:
        return self.key > other.key

    def __str__(self) -> str:
        return f'{self.time:%Y-%m-%d %H:%M} {self.callsign} {self.locator} {self.power}'

    def __repr__(self) -> str:
        return (
            f'{self.__class__.__name__}(time={repr(self.time)}, callsign={repr(self.callsign)}, '
            f'locator={repr(self.locator)}, power={repr(self.power)}, receptions={repr(list(self.receptions))})'
        )
