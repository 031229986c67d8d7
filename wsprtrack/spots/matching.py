from datetime import timedelta
from functools import reduce
from typing import Iterable, List, NamedTuple, Optional

from wsprtrack.channels import Channel, CYCLE
from wsprtrack.protocols import Correlation, Protocol
from wsprtrack.reports import RawReport
from wsprtrack.spots.base import Spot
from wsprtrack.utilities import get_logger

LOGGER = get_logger('wsprtrack.spots')

# largest difference in frequency (Hz) of two receptions by the same receiver to count as co-reception
FREQUENCY_TOLERANCE = 5


class MatchState(NamedTuple):
    """
    accumulator threaded through the matching fold: the spots matched so far, of which the last is the only one still
    accepting supplementary transmissions (new spots are appended and slots are filled in place)
    """

    spots: List[Spot]

    @property
    def current(self) -> Optional[Spot]:
        return self.spots[-1] if len(self.spots) > 0 else None


def coreceived(first: RawReport, second: RawReport, tolerance: float = FREQUENCY_TOLERANCE) -> bool:
    """
    whether any receiver decoded both transmissions at nearly the same frequency

    Both reception lists are sorted by receiver callsign, so they are walked once in step.
    A reception with no recorded frequency matches on the receiver alone.

    :param first: earlier transmission
    :param second: later transmission
    :param tolerance: largest difference in frequency, in Hz
    :return: whether the transmissions were co-received
    """

    first_receptions = first.receptions
    second_receptions = second.receptions
    first_index = 0
    second_index = 0

    while first_index < len(first_receptions) and second_index < len(second_receptions):
        first_reception = first_receptions[first_index]
        second_reception = second_receptions[second_index]
        if first_reception.callsign == second_reception.callsign:
            if (
                first_reception.frequency is None
                or second_reception.frequency is None
                or abs(first_reception.frequency - second_reception.frequency) <= tolerance
            ):
                return True
            first_index += 1
            second_index += 1
        elif first_reception.callsign < second_reception.callsign:
            first_index += 1
        else:
            second_index += 1

    return False


def correlated(spot: Spot, report: RawReport, slot: int) -> bool:
    """
    whether a supplementary transmission belongs to the given spot, according to the spot protocol's correlation rule

    :param spot: spot in progress
    :param report: supplementary transmission
    :param slot: slot index of the transmission
    :return: whether to attach the transmission to the spot
    """

    correlation = spot.protocol.correlation
    if correlation == Correlation.UNCONDITIONAL:
        return True
    elif correlation == Correlation.LOCATOR_EQUALITY:
        return report.locator[:4] == spot.slots[0].locator[:4]
    elif correlation == Correlation.CORECEPTION:
        previous = next(
            spot.slots[index] for index in reversed(range(slot)) if spot.slots[index] is not None
        )
        return coreceived(previous, report)
    return False


def match_report(state: MatchState, report: RawReport, channel: Channel) -> MatchState:
    """
    advance the matching by one raw report, appending a new spot or filling a slot of the current one

    :param state: spots matched so far
    :param report: next raw report, in key order
    :param channel: channel of the tracker
    :return: the same state, advanced
    """

    unknown = channel.protocol == Protocol.UNKNOWN
    if unknown:
        slot = 0
    else:
        slot = channel.slot_of(report.time)

    if not channel.accepts(report, slot):
        return state

    current = state.current

    if slot == 0:
        # every report is its own spot when the protocol is unknown, even from different transmitters in one minute
        if not unknown and current is not None and current.time == report.time:
            LOGGER.debug(f'ignoring duplicate primary transmission {report}')
            return state
        state.spots.append(Spot(report, channel.protocol))
        return state

    if current is None:
        return state
    if not CYCLE > report.time - current.time > timedelta(0):
        LOGGER.debug(f'dropping {report} - outside of the cycle of {current}')
        return state
    if current.slots[slot] is not None:
        LOGGER.debug(f'dropping {report} - slot {slot} of {current} is already filled')
        return state
    if not correlated(current, report, slot):
        LOGGER.debug(f'dropping {report} - not correlated with {current}')
        return state

    current.slots[slot] = report
    return state


def match_reports(reports: Iterable[RawReport], channel: Channel) -> List[Spot]:
    """
    group a key-sorted sequence of raw reports into spots, one per cycle of the tracker

    :param reports: raw reports, sorted by time and callsign
    :param channel: channel of the tracker
    :return: spots, in order of time
    """

    state = reduce(
        lambda state, report: match_report(state, report, channel), reports, MatchState([]),
    )
    return state.spots
