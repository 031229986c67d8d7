from datetime import timedelta
import math
from typing import Iterable, List, NamedTuple, Union

import numpy
from pandas import DataFrame

from wsprtrack.model import (
    AMBIGUOUS_LONGITUDE_DELTA,
    MAXIMUM_GROUND_SPEED,
    MINIMUM_SEGMENT_DISTANCE,
    REDUNDANCY_DISTANCE,
    REDUNDANCY_INTERVAL,
    uncertainty_radius,
)
from wsprtrack.protocols import Protocol
from wsprtrack.spots.base import Distance, Spot
from wsprtrack.utilities import get_logger

LOGGER = get_logger('wsprtrack.spots')


class TrackSummary(NamedTuple):
    attached: int
    unattached: int
    distance: float
    laps: int
    duration: timedelta


def feasible(distance: float, seconds: float, uncertainty: float = 0) -> bool:
    """
    whether a tracker could have covered the given distance in the given time without exceeding the maximum ground speed

    >>> feasible(300000, 3600)
    True
    >>> feasible(300001, 3600)
    False

    :param distance: distance between fixes, in meters
    :param seconds: time between fixes, in seconds
    :param uncertainty: sum of the uncertainty radii of both fixes, in meters
    :return: whether the implied speed is at most the maximum
    """

    return (distance - uncertainty) * 3600 <= MAXIMUM_GROUND_SPEED * 1000 * seconds


def redundant(spot: Spot, neighbor: Spot) -> bool:
    """ whether a 4-character fix adds nothing to the path next to the given 6-character fix """
    return (
        not spot.high_resolution
        and neighbor.high_resolution
        and abs(spot.time - neighbor.time) < REDUNDANCY_INTERVAL
        and spot.overground_distance(neighbor) < REDUNDANCY_DISTANCE
    )


def track_distance(spots: List[Spot]) -> float:
    """
    Length of the path over the ground. Segments are only counted once the tracker has moved far enough from the
    last counted fix, so that the jitter of nearby fixes does not add up.

    :param spots: attached spots
    :return: distance in meters
    """

    distance = 0.0
    if len(spots) == 0:
        return distance

    last_counted = spots[0]
    for index, spot in enumerate(spots[1:], start=1):
        segment = spot.overground_distance(last_counted)
        if segment > MINIMUM_SEGMENT_DISTANCE or index == len(spots) - 1:
            distance += segment
            last_counted = spot
    return distance


def laps(longitudes: Iterable[float]) -> int:
    """
    number of times the tracker has circled the globe eastward

    >>> laps([0, 100, -160, -60, 40, 90])
    1

    :param longitudes: longitudes of attached fixes, in order of time
    :return: whole laps
    """

    longitudes = numpy.asarray(list(longitudes), dtype=float)
    if len(longitudes) < 2:
        return 0

    deltas = numpy.diff(longitudes)
    ambiguous = numpy.abs(deltas) > AMBIGUOUS_LONGITUDE_DELTA
    deltas[ambiguous] = numpy.mod(deltas[ambiguous], 360)

    return max(int(math.floor(numpy.max(numpy.cumsum(deltas)) / 360)), 0)


class SpotTrack:
    """
    decoded spots in chronological order, with the subset forming a continuous, physically plausible path attached
    """

    def __init__(self, spots: List[Spot] = None, name: str = None, detach_grid4: bool = False, **attributes):
        """
        :param spots: decoded spots
        :param name: name of track
        :param detach_grid4: exclude fixes from 4-character locators from the path
        """

        if name is None:
            name = 'spot track'
        elif not isinstance(name, str):
            name = str(name)

        self.name = name
        self.spots: List[Spot] = sorted(spots) if spots is not None else []
        self.detach_grid4 = detach_grid4
        self.attributes = attributes

        self.__data = None
        self.curate()

    def curate(self) -> List[Spot]:
        """
        Decide which spots form the path, walking them in order of time. A spot is left unattached if its decode is
        invalid, its protocol is unknown, it is a 4-character fix when those are detached, or reaching it from the
        attached fix it would follow would take more than the maximum ground speed. A 4-character fix next to a
        6-character fix is left out in favor of the 6-character fix.

        :return: attached spots
        """

        attached = []
        for spot in self.spots:
            spot.attached = False

            if not spot.valid or not spot.located or spot.protocol == Protocol.UNKNOWN:
                continue
            if self.detach_grid4 and not spot.high_resolution:
                continue

            # trailing 4-character fixes this spot would replace
            replaced = 0
            if not spot.protocol.primary_only:
                if len(attached) > 0 and redundant(spot, attached[-1]):
                    continue
                while replaced < len(attached) and redundant(attached[-1 - replaced], spot):
                    replaced += 1

            # the speed limit holds against the fix that stays before this spot
            if len(attached) > replaced:
                last = attached[-1 - replaced]
                uncertainty = uncertainty_radius(last.locator) + uncertainty_radius(spot.locator)
                if not feasible(spot.overground_distance(last), (spot - last).seconds, uncertainty):
                    LOGGER.debug(f'detaching {spot} - too far from {last} to be reached in time')
                    continue

            for _ in range(replaced):
                attached.pop().attached = False

            spot.attached = True
            attached.append(spot)

        self.__data = None
        return attached

    @property
    def attached_spots(self) -> List[Spot]:
        return [spot for spot in self.spots if spot.attached]

    @property
    def attached_count(self) -> int:
        return len(self.attached_spots)

    @property
    def unattached_count(self) -> int:
        return len(self.spots) - self.attached_count

    @property
    def distance(self) -> float:
        """ length of the path over the ground, in meters """
        return track_distance(self.attached_spots)

    @property
    def laps(self) -> int:
        return laps(spot.longitude for spot in self.attached_spots)

    @property
    def duration(self) -> timedelta:
        attached_spots = self.attached_spots
        if len(attached_spots) == 0:
            return timedelta(0)
        return attached_spots[-1].time - attached_spots[0].time

    @property
    def last_spot(self) -> Spot:
        attached_spots = self.attached_spots
        return attached_spots[-1] if len(attached_spots) > 0 else None

    @property
    def summary(self) -> TrackSummary:
        return TrackSummary(
            attached=self.attached_count,
            unattached=self.unattached_count,
            distance=self.distance,
            laps=self.laps,
            duration=self.duration,
        )

    @property
    def data(self) -> DataFrame:
        if self.__data is None:
            attached_spots = self.attached_spots
            records = [
                {
                    'time': spot.time,
                    'locator': spot.locator,
                    'x': spot.coordinates[0],
                    'y': spot.coordinates[1],
                    'altitude': spot.coordinates[2],
                    'speed': spot.speed,
                    'voltage': spot.voltage,
                    'temperature': spot.temperature,
                }
                for spot in attached_spots
            ]
            distances = [Distance(timedelta(0), 0, 0)] + [
                current - previous for previous, current in zip(attached_spots[:-1], attached_spots[1:])
            ]
            for record, distance in zip(records, distances):
                record.update(
                    {
                        'interval': distance.interval,
                        'overground_distance': distance.overground,
                        'ascent': distance.ascent,
                        'ground_speed': distance.ground_speed,
                        'ascent_rate': distance.ascent_rate,
                    }
                )

            self.__data = DataFrame.from_records(
                records,
                columns=[
                    'time',
                    'locator',
                    'x',
                    'y',
                    'altitude',
                    'speed',
                    'voltage',
                    'temperature',
                    'interval',
                    'overground_distance',
                    'ascent',
                    'ground_speed',
                    'ascent_rate',
                ],
            )

        return self.__data

    @property
    def times(self) -> numpy.ndarray:
        return self.data['time'].values

    @property
    def coordinates(self) -> numpy.ndarray:
        return self.data[['x', 'y', 'altitude']].values

    @property
    def ground_speeds(self) -> numpy.ndarray:
        """ instantaneous overground speeds between attached spots """
        return self.data['ground_speed'].values

    @property
    def ascent_rates(self) -> numpy.ndarray:
        """ instantaneous ascent rates between attached spots """
        return self.data['ascent_rate'].values

    def __getitem__(self, index: Union[int, slice]) -> Union[Spot, List[Spot]]:
        return self.spots[index]

    def __iter__(self):
        return iter(self.spots)

    def __len__(self) -> int:
        return len(self.spots)

    def __str__(self) -> str:
        return f'{self.name}: {self.attached_count} of {len(self)} spots attached'
