from datetime import datetime
from typing import List, Optional

from wsprtrack.telemetry.spec import ExtendedTelemetrySpec


def sequence_number(time: datetime) -> int:
    """
    Transmission sequence number of a cycle, counted in 2-minute steps from the start of the month.

    >>> sequence_number(datetime(2025, 7, 1, 0, 10))
    5

    :param time: time of the primary transmission
    :return: sequence number
    """

    return ((time.day - 1) * 24 + time.hour) * 30 + time.minute // 2


def evaluate(
    raw_telemetry: List[Optional[int]], sequence: int, spec: ExtendedTelemetrySpec
) -> List[Optional[float]]:
    """
    Decode raw extended telemetry integers, indexed by the slot they were sent in, into a flat list of channel values.

    Each integer is checked against each decoder in order and decoded by the first whose filters all hold. Every
    decoder owns a fixed range of the output, so a value's position does not depend on which decoders matched.

    :param raw_telemetry: raw integer of each slot (`None` where the slot carried none)
    :param sequence: transmission sequence number of the cycle
    :param spec: extended telemetry specification
    :return: value of each extracted channel (`None` where no integer was decoded into it)
    """

    values: List[Optional[float]] = [None] * spec.extractor_count

    for slot, raw in enumerate(raw_telemetry):
        if raw is None:
            continue
        for offset, decoder in zip(spec.offsets, spec.decoders):
            if decoder.matches(raw, slot, sequence):
                values[offset : offset + len(decoder.extractors)] = decoder.extract(raw)
                break

    return values


def evaluate_spot(spot, spec: ExtendedTelemetrySpec) -> List[Optional[float]]:
    """
    decode the raw extended telemetry of the given spot, storing the values on the spot

    :param spot: decoded spot
    :param spec: extended telemetry specification
    :return: value of each extracted channel
    """

    spot.telemetry = evaluate(spot.raw_telemetry, sequence_number(spot.time), spec)
    return spot.telemetry
