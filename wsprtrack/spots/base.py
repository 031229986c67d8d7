from datetime import datetime, timedelta
import re
from typing import Any, List, Optional, Tuple

import numpy
from pyproj import Geod

from wsprtrack.protocols import Protocol
from wsprtrack.reports import RawReport

ELLIPSOID = Geod(ellps='WGS84')

LOCATOR_PATTERN = re.compile(r'^[A-R]{2}[0-9]{2}([A-X]{2})?$', re.IGNORECASE)


def maidenhead_to_coordinates(locator: str) -> Tuple[float, float]:
    """
    Decode a 4- or 6-character Maidenhead locator to the center of its cell.

    >>> maidenhead_to_coordinates('FN20')
    (40.5, -75.0)

    :param locator: Maidenhead locator
    :return: latitude and longitude of cell center
    """

    if locator is None or not LOCATOR_PATTERN.match(locator):
        raise ValueError(f'invalid locator "{locator}"')

    locator = locator.upper()
    longitude = float((ord(locator[0]) - ord('A')) * 20 - 180 + int(locator[2]) * 2)
    latitude = float((ord(locator[1]) - ord('A')) * 10 - 90 + int(locator[3]))

    if len(locator) == 6:
        longitude += (ord(locator[4]) - ord('A')) / 12 + 1 / 24
        latitude += (ord(locator[5]) - ord('A')) / 24 + 1 / 48
    else:
        longitude += 1
        latitude += 0.5

    return latitude, longitude


def overground_distance(
    latitude_1: float, longitude_1: float, latitude_2: float, longitude_2: float
) -> float:
    """
    horizontal distance over the ellipsoid

    :return: distance in meters
    """

    _, _, distance = ELLIPSOID.inv(longitude_1, latitude_1, longitude_2, latitude_2)
    return distance


class Spot:
    """
    one telemetry reading, reconstructed from the transmissions a tracker sends in a single cycle
    """

    def __init__(self, primary: RawReport, protocol: Protocol = None, slots: int = None):
        """
        :param primary: primary (slot 0) transmission
        :param protocol: protocol the transmissions are encoded with
        :param slots: number of slots per cycle (defaults to the protocol's)
        """

        if protocol is None:
            protocol = Protocol.UNKNOWN
        if slots is None:
            slots = protocol.slots

        self.protocol = protocol
        self.slots: List[Optional[RawReport]] = [primary] + [None] * (slots - 1)
        self.slot_valid: List[Optional[bool]] = [None] * slots
        self.raw_telemetry: List[Optional[int]] = [None] * slots
        self.telemetry: List[Optional[float]] = []

        self.locator: str = primary.locator
        self.latitude: float = None
        self.longitude: float = None
        self.altitude: float = None
        self.speed: float = None
        self.voltage: float = None
        self.temperature: float = None
        self.valid = True
        self.attached = False
        self.attributes = {}

    @property
    def time(self) -> datetime:
        return self.slots[0].time

    @property
    def callsign(self) -> str:
        return self.slots[0].callsign

    @property
    def coordinates(self) -> numpy.ndarray:
        return numpy.array(
            (
                self.longitude if self.longitude is not None else numpy.nan,
                self.latitude if self.latitude is not None else numpy.nan,
                self.altitude if self.altitude is not None else 0,
            )
        )

    @property
    def located(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def high_resolution(self) -> bool:
        """ whether the position comes from a 6-character locator """
        return self.locator is not None and len(self.locator) >= 6

    @property
    def receivers(self) -> int:
        """ number of distinct receivers of any of the spot's transmissions """
        return len({receiver for slot in self.slots if slot is not None for receiver in slot.receivers})

    def locate(self, locator: str):
        """
        set position to the center of the given locator's cell

        :param locator: Maidenhead locator
        """

        self.locator = locator.upper()
        self.latitude, self.longitude = maidenhead_to_coordinates(locator)

    def overground_distance(self, other: 'Spot') -> float:
        """
        horizontal distance over ellipsoid

        :param other: other spot
        :return: distance in meters
        """

        return overground_distance(self.latitude, self.longitude, other.latitude, other.longitude)

    def __getitem__(self, field: str) -> Any:
        if field in self.attributes:
            return self.attributes[field]
        elif not field.startswith('_') and hasattr(self, field):
            return getattr(self, field)
        raise KeyError(f'"{field}" not in spot')

    def __setitem__(self, field: str, value: Any):
        self.attributes[field] = value

    def __contains__(self, field: str) -> bool:
        return field in self.attributes or (not field.startswith('_') and hasattr(self, field))

    def __sub__(self, other: 'Spot') -> 'Distance':
        return Distance.from_spots(self, other)

    def __gt__(self, other: 'Spot') -> bool:
        return self.time > other.time

    def __lt__(self, other: 'Spot') -> bool:
        return self.time < other.time

    def __str__(self) -> str:
        return f'{self.time:%Y-%m-%d %H:%M} {self.callsign} {self.locator}'

    def __repr__(self) -> str:
        return (
            f'{self.__class__.__name__}(time={repr(self.time)}, callsign={repr(self.callsign)}, '
            f'locator={repr(self.locator)}, altitude={repr(self.altitude)}, '
            f'slots={[slot is not None for slot in self.slots]}, attached={self.attached})'
        )


class Distance:
    def __init__(self, interval: timedelta, horizontal: float, vertical: float):
        self.__interval = interval
        self.__horizontal = horizontal
        self.__vertical = vertical

    @classmethod
    def from_spots(cls, spot_1: Spot, spot_2: Spot) -> 'Distance':
        """
        Get distance between two spots.

        :param spot_1: first spot
        :param spot_2: second spot
        """

        interval = spot_1.time - spot_2.time
        horizontal_distance = spot_1.overground_distance(spot_2)
        if spot_1.altitude is not None and spot_2.altitude is not None:
            vertical_distance = spot_1.altitude - spot_2.altitude
        else:
            vertical_distance = 0

        return cls(interval, horizontal_distance, vertical_distance)

    @property
    def interval(self) -> timedelta:
        return self.__interval

    @property
    def seconds(self) -> float:
        return self.interval / timedelta(seconds=1)

    @property
    def overground(self) -> float:
        return self.__horizontal

    @property
    def ascent(self) -> float:
        return self.__vertical

    @property
    def ascent_rate(self) -> float:
        return self.__vertical / self.seconds if self.seconds > 0 else 0

    @property
    def ground_speed(self) -> float:
        return self.__horizontal / self.seconds if self.seconds > 0 else 0

    def __str__(self) -> str:
        return f'{self.seconds}s, {self.ascent:6.2f}m vertical, {self.overground:6.2f}m horizontal'

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({repr(self.interval)}, {self.overground}, {self.ascent})'
