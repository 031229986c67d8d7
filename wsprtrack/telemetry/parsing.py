import math
import re
from typing import List, Optional, Tuple, Union

from wsprtrack.telemetry.spec import (
    Decoder,
    ExtendedTelemetrySpec,
    Extractor,
    Filter,
    RAW_CEILING,
    ShorthandFilter,
    SLOT,
    SlotFilter,
    TemporalFilter,
    ValueFilter,
)

DECODER_SEPARATOR = '~'
SECTION_SEPARATOR = '_'
ITEM_SEPARATOR = ','
FIELD_SEPARATOR = ':'

DECODERS_PATTERN = re.compile(r'^[0-9ets,:_~.-]+$')
LABEL_PATTERN = re.compile(r'^[0-9a-z #_]+$', re.IGNORECASE)
UNITS_PATTERN = re.compile(r'^[a-z /°]+$', re.IGNORECASE)

MAXIMUM_LABEL_LENGTH = 32
MAXIMUM_LONG_LABEL_LENGTH = 64
MAXIMUM_UNITS_LENGTH = 8
MAXIMUM_RESOLUTION = 6
MAXIMUM_SLOT = 4
MAXIMUM_MESSAGE_TYPE = 15


class InvalidSpecificationError(ValueError):
    pass


def parse_extended_telemetry(
    decoders: str,
    labels: str = None,
    long_labels: str = None,
    units: str = None,
    resolutions: str = None,
) -> ExtendedTelemetrySpec:
    """
    Parse an extended telemetry specification.

    Decoders are separated by `~`; each decoder is a comma-separated list of filters and a comma-separated list of
    extractors joined by `_`. Filters are `s:SLOT`, `t:DIVISOR:MODULUS:VALUE`, `DIVISOR:MODULUS:VALUE` (where a
    value of `s` means the slot index), or one of the shorthands `et0:TYPE` and `et3`. Extractors are
    `DIVISOR:MODULUS:OFFSET:SLOPE`, or `MODULUS:OFFSET:SLOPE` to chain the divisor from the previous extractor.

    >>> spec = parse_extended_telemetry('et0:0,s:2_8:-50:1,10:0:0.5', labels='temp,bat')
    >>> spec.extractor_count
    2

    :param decoders: decoder specification
    :param labels: comma-separated short labels of extracted values
    :param long_labels: comma-separated long labels of extracted values
    :param units: comma-separated units of extracted values
    :param resolutions: comma-separated number of decimals to display of extracted values
    :return: extended telemetry specification
    """

    if decoders is None or len(decoders.strip()) == 0:
        raise InvalidSpecificationError('empty extended telemetry specification')

    decoders = decoders.strip().lower()
    if not DECODERS_PATTERN.match(decoders):
        raise InvalidSpecificationError(f'invalid characters in specification "{decoders}"')

    parsed_decoders = tuple(
        parse_decoder(decoder) for decoder in decoders.split(DECODER_SEPARATOR)
    )
    extractor_count = sum(len(decoder.extractors) for decoder in parsed_decoders)

    return ExtendedTelemetrySpec(
        decoders=parsed_decoders,
        labels=parse_annotations(
            labels, 'label', LABEL_PATTERN, MAXIMUM_LABEL_LENGTH, extractor_count
        ),
        long_labels=parse_annotations(
            long_labels, 'long label', LABEL_PATTERN, MAXIMUM_LONG_LABEL_LENGTH, extractor_count
        ),
        units=parse_annotations(
            units, 'units', UNITS_PATTERN, MAXIMUM_UNITS_LENGTH, extractor_count
        ),
        resolutions=parse_resolutions(resolutions, extractor_count),
    )


def parse_decoder(decoder: str) -> Decoder:
    sections = decoder.split(SECTION_SEPARATOR)
    if len(sections) != 2:
        raise InvalidSpecificationError(
            f'decoder "{decoder}" should be filters and extractors separated by "{SECTION_SEPARATOR}"'
        )
    filters_section, extractors_section = sections

    filters = ()
    if len(filters_section) > 0:
        filters = tuple(
            parse_filter(token) for token in filters_section.split(ITEM_SEPARATOR)
        )

    if len(extractors_section) == 0:
        raise InvalidSpecificationError(f'decoder "{decoder}" has no extractors')

    next_divisor = next(
        (
            condition.implied_divisor
            for condition in filters
            if condition.implied_divisor is not None
        ),
        1,
    )
    extractors = []
    for token in extractors_section.split(ITEM_SEPARATOR):
        extractor = parse_extractor(token, next_divisor)
        extractors.append(extractor)
        next_divisor = extractor.next_divisor

    return Decoder(filters, tuple(extractors))


def parse_filter(token: str) -> Filter:
    fields = token.split(FIELD_SEPARATOR)
    kind = fields[0]

    if kind == 'et0':
        if len(fields) != 2:
            raise InvalidSpecificationError(f'filter "{token}" should be "et0:TYPE"')
        message_type = parse_integer(fields[1], 'message type', 0)
        if message_type > MAXIMUM_MESSAGE_TYPE:
            raise InvalidSpecificationError(
                f'message type of "{token}" cannot exceed {MAXIMUM_MESSAGE_TYPE}'
            )
        return ShorthandFilter('et0', message_type)
    elif kind == 'et3':
        if len(fields) != 1:
            raise InvalidSpecificationError(f'filter "{token}" takes no arguments')
        return ShorthandFilter('et3')
    elif kind == SLOT:
        if len(fields) != 2:
            raise InvalidSpecificationError(f'filter "{token}" should be "s:SLOT"')
        slot = parse_integer(fields[1], 'slot', 0)
        if slot > MAXIMUM_SLOT:
            raise InvalidSpecificationError(f'slot of "{token}" cannot exceed {MAXIMUM_SLOT}')
        return SlotFilter(slot)
    elif kind == 't':
        if len(fields) != 4:
            raise InvalidSpecificationError(f'filter "{token}" should be "t:DIVISOR:MODULUS:VALUE"')
        divisor, modulus = parse_radix(fields[1], fields[2], token)
        value = parse_integer(fields[3], 'filter value', 0)
        check_filter_value(value, modulus, token)
        return TemporalFilter(divisor, modulus, value)
    elif len(fields) == 3:
        divisor, modulus = parse_radix(fields[0], fields[1], token)
        if fields[2] == SLOT:
            value = SLOT
        else:
            value = parse_integer(fields[2], 'filter value', 0)
            check_filter_value(value, modulus, token)
        return ValueFilter(divisor, modulus, value)
    else:
        raise InvalidSpecificationError(f'unrecognized filter "{token}"')


def parse_extractor(token: str, implied_divisor: int) -> Extractor:
    fields = token.split(FIELD_SEPARATOR)
    if len(fields) == 3:
        implied = True
        fields.insert(0, str(implied_divisor))
    elif len(fields) == 4:
        implied = False
    else:
        raise InvalidSpecificationError(
            f'extractor "{token}" should be "[DIVISOR:]MODULUS:OFFSET:SLOPE"'
        )

    divisor, modulus = parse_radix(fields[0], fields[1], token)
    offset = parse_number(fields[2], 'offset')
    slope = parse_number(fields[3], 'slope')
    return Extractor(divisor, modulus, offset, slope, implied=implied)


def parse_radix(divisor: str, modulus: str, token: str) -> Tuple[int, int]:
    divisor = parse_integer(divisor, 'divisor', 1)
    modulus = parse_integer(modulus, 'modulus', 2)
    if divisor * modulus > RAW_CEILING:
        raise InvalidSpecificationError(
            f'divisor times modulus of "{token}" exceeds the largest raw value {RAW_CEILING}'
        )
    return divisor, modulus


def check_filter_value(value: int, modulus: int, token: str):
    if value >= modulus:
        raise InvalidSpecificationError(f'value of filter "{token}" should be less than its modulus')


def parse_integer(value: str, name: str, minimum: int) -> int:
    try:
        value = int(value)
    except ValueError:
        raise InvalidSpecificationError(f'{name} "{value}" is not an integer')
    if value < minimum:
        raise InvalidSpecificationError(f'{name} must be an integer >= {minimum}, not {value}')
    return value


def parse_number(value: str, name: str) -> Union[int, float]:
    try:
        if '.' in value or 'e' in value:
            number = float(value)
        else:
            number = int(value)
    except ValueError:
        raise InvalidSpecificationError(f'{name} "{value}" is not a number')
    # overflowing exponents would be written back as `inf`
    if isinstance(number, float) and not math.isfinite(number):
        raise InvalidSpecificationError(f'{name} "{value}" is out of range')
    return number


def parse_annotations(
    annotations: Optional[str], name: str, pattern: re.Pattern, maximum_length: int, count: int
) -> Tuple[Optional[str], ...]:
    entries = split_annotations(annotations, name, count)
    for entry in entries:
        if entry is None:
            continue
        if len(entry) > maximum_length:
            raise InvalidSpecificationError(
                f'length of {name} "{entry}" cannot exceed {maximum_length}'
            )
        if not pattern.match(entry):
            raise InvalidSpecificationError(f'{name} "{entry}" contains invalid characters')
    return entries


def parse_resolutions(resolutions: Optional[str], count: int) -> Tuple[Optional[int], ...]:
    entries = []
    for entry in split_annotations(resolutions, 'resolution', count):
        if entry is not None:
            entry = parse_integer(entry, 'resolution', 0)
            if entry > MAXIMUM_RESOLUTION:
                raise InvalidSpecificationError(
                    f'resolution should be between 0 and {MAXIMUM_RESOLUTION}, not {entry}'
                )
        entries.append(entry)
    return tuple(entries)


def split_annotations(annotations: Optional[str], name: str, count: int) -> Tuple[Optional[str], ...]:
    if annotations is None or len(annotations) == 0:
        return ()
    entries: List[Optional[str]] = [
        entry if len(entry) > 0 else None for entry in annotations.split(ITEM_SEPARATOR)
    ]
    if len(entries) > count:
        raise InvalidSpecificationError(
            f'{len(entries)} {name} entries given for {count} extracted values'
        )
    return tuple(entries)
