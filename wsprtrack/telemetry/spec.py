"""
value types of an extended telemetry specification

A specification is an ordered list of decoders. Each decoder pairs a set of filters, all of which must hold for a raw
telemetry integer, with a list of extractors that pull digits out of the integer and scale them into physical values.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

import numpy

# filter value meaning "equal to the index of the slot the integer came from"
SLOT = 's'

# largest raw extended telemetry integer, `floor((36 * 26 ** 3 * 615600) / 2)`
RAW_CEILING = 194756140800


def format_number(value: Union[int, float]) -> str:
    """
    shortest text that parses back to the same number, without exponents

    >>> format_number(0.05)
    '0.05'
    >>> format_number(-50)
    '-50'
    """

    if isinstance(value, int):
        return str(value)
    return numpy.format_float_positional(value, unique=True, trim='-')


class Filter(ABC):
    """ condition on a raw telemetry integer, the slot it came from, or the transmission sequence number """

    @abstractmethod
    def matches(self, raw: int, slot: int, sequence: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def serialize(self) -> str:
        raise NotImplementedError

    @property
    def implied_divisor(self) -> Optional[int]:
        """ divisor of the first extractor of a decoder using this filter, if the filter implies one """
        return None


@dataclass(frozen=True)
class SlotFilter(Filter):
    slot: int

    def matches(self, raw: int, slot: int, sequence: int) -> bool:
        return slot == self.slot

    def serialize(self) -> str:
        return f'{SLOT}:{self.slot}'


@dataclass(frozen=True)
class ValueFilter(Filter):
    divisor: int
    modulus: int
    value: Union[int, str]

    def matches(self, raw: int, slot: int, sequence: int) -> bool:
        expected = slot if self.value == SLOT else self.value
        return (raw // self.divisor) % self.modulus == expected

    def serialize(self) -> str:
        return f'{self.divisor}:{self.modulus}:{self.value}'


@dataclass(frozen=True)
class TemporalFilter(Filter):
    divisor: int
    modulus: int
    value: int

    def matches(self, raw: int, slot: int, sequence: int) -> bool:
        return (sequence // self.divisor) % self.modulus == self.value

    def serialize(self) -> str:
        return f't:{self.divisor}:{self.modulus}:{self.value}'


@dataclass(frozen=True)
class ShorthandFilter(Filter):
    """
    named alias for the headers of common vendor conventions

    `et0:T` is the user-defined message header: reserved bits `0`, slot number equal to the transmitting slot, and
    message type `T`, leaving extractors to start at a divisor of 320.
    `et3` is the slot 2 header whose two lowest bits are both set, leaving extractors to start at a divisor of 4.
    """

    name: str
    argument: Optional[int] = None

    def expand(self) -> Tuple[Filter, ...]:
        if self.name == 'et0':
            return (
                ValueFilter(1, 4, 0),
                ValueFilter(4, 5, SLOT),
                ValueFilter(20, 16, self.argument),
            )
        elif self.name == 'et3':
            return SlotFilter(2), ValueFilter(1, 2, 1), ValueFilter(2, 2, 1)
        raise ValueError(f'unrecognized filter shorthand "{self.name}"')

    @property
    def implied_divisor(self) -> int:
        return {'et0': 320, 'et3': 4}[self.name]

    def matches(self, raw: int, slot: int, sequence: int) -> bool:
        return all(filter.matches(raw, slot, sequence) for filter in self.expand())

    def serialize(self) -> str:
        if self.argument is None:
            return self.name
        return f'{self.name}:{self.argument}'


@dataclass(frozen=True)
class Extractor:
    """
    pulls the digit `floor(raw / divisor) mod modulus` out of a raw integer and maps it to `offset + digit * slope`
    """

    divisor: int
    modulus: int
    offset: Union[int, float] = 0
    slope: Union[int, float] = 1
    # whether the divisor was left for the parser to chain from the previous extractor
    implied: bool = field(default=False, compare=False)

    def digit(self, raw: int) -> int:
        return (raw // self.divisor) % self.modulus

    def extract(self, raw: int) -> float:
        return self.offset + self.digit(raw) * self.slope

    @property
    def next_divisor(self) -> int:
        return self.divisor * self.modulus

    def serialize(self) -> str:
        fields = [self.modulus, self.offset, self.slope]
        if not self.implied:
            fields.insert(0, self.divisor)
        return ':'.join(format_number(value) for value in fields)


@dataclass(frozen=True)
class Decoder:
    filters: Tuple[Filter, ...]
    extractors: Tuple[Extractor, ...]

    def matches(self, raw: int, slot: int, sequence: int) -> bool:
        return all(filter.matches(raw, slot, sequence) for filter in self.filters)

    def extract(self, raw: int) -> List[float]:
        return [extractor.extract(raw) for extractor in self.extractors]

    def serialize(self) -> str:
        filters = ','.join(filter.serialize() for filter in self.filters)
        extractors = ','.join(extractor.serialize() for extractor in self.extractors)
        return f'{filters}_{extractors}'


@dataclass(frozen=True)
class ExtendedTelemetrySpec:
    decoders: Tuple[Decoder, ...]
    labels: Tuple[Optional[str], ...] = ()
    long_labels: Tuple[Optional[str], ...] = ()
    units: Tuple[Optional[str], ...] = ()
    resolutions: Tuple[Optional[int], ...] = ()

    @property
    def extractor_count(self) -> int:
        return sum(len(decoder.extractors) for decoder in self.decoders)

    @property
    def offsets(self) -> List[int]:
        """ index of each decoder's first channel in the flat list of channels """
        offsets = []
        offset = 0
        for decoder in self.decoders:
            offsets.append(offset)
            offset += len(decoder.extractors)
        return offsets

    def label(self, index: int) -> str:
        return _entry(self.labels, index) or f'ET{index}'

    def long_label(self, index: int) -> str:
        return _entry(self.long_labels, index) or self.label(index)

    def unit(self, index: int) -> str:
        return _entry(self.units, index) or ''

    def resolution(self, index: int) -> int:
        return _entry(self.resolutions, index) or 0

    def format_value(self, index: int, value: float) -> str:
        return f'{value:.{self.resolution(index)}f}{self.unit(index)}'

    def serialize(self) -> str:
        return '~'.join(decoder.serialize() for decoder in self.decoders)

    @property
    def parameters(self) -> dict:
        """ text of the specification and each of its annotations, as accepted by the parser """

        return {
            'decoders': self.serialize(),
            'labels': _join(self.labels),
            'long_labels': _join(self.long_labels),
            'units': _join(self.units),
            'resolutions': _join(self.resolutions),
        }

    def __str__(self) -> str:
        return self.serialize()


def _entry(entries: tuple, index: int):
    return entries[index] if index < len(entries) else None


def _join(entries: tuple) -> Optional[str]:
    if len(entries) == 0:
        return None
    return ','.join('' if entry is None else str(entry) for entry in entries)
