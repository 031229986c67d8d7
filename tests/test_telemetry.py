from datetime import datetime

import pytest

from wsprtrack.telemetry import (
    Decoder,
    evaluate,
    Extractor,
    InvalidSpecificationError,
    parse_extended_telemetry,
    RAW_CEILING,
    sequence_number,
    ShorthandFilter,
    SLOT,
    SlotFilter,
    TemporalFilter,
    ValueFilter,
)

VALID_SPECIFICATIONS = [
    'et0:0_8:-50:1,10:0:0.5',
    's:2_1:100:0:1',
    'et3_16:0:1.5,4:0:1~et0:1_320:1000:0:0.25',
    '1:2:0,4:5:s,t:30:2:1_320:64:-32:0.125',
    '_1:2:0:1',
    f'_1:{RAW_CEILING}:0:1',
    '1:4:0,4:5:s,20:16:3_320:1000:0:0.00001',
]


def test_parse():
    spec = parse_extended_telemetry(
        'et0:0_8:-50:1,10:0:0.5~s:3_1:100:0:2',
        labels='temp,,alt',
        units='C,V',
        resolutions='0,2',
    )

    assert spec.extractor_count == 3
    assert spec.offsets == [0, 2]
    assert spec.decoders[0].filters == (ShorthandFilter('et0', 0),)
    assert spec.decoders[0].extractors == (
        Extractor(320, 8, -50, 1),
        Extractor(2560, 10, 0, 0.5),
    )
    assert spec.decoders[1] == Decoder((SlotFilter(3),), (Extractor(1, 100, 0, 2),))

    assert spec.label(0) == 'temp'
    assert spec.label(1) == 'ET1'
    assert spec.label(2) == 'alt'
    assert spec.long_label(0) == 'temp'
    assert spec.unit(1) == 'V'
    assert spec.unit(2) == ''
    assert spec.format_value(1, 4.126) == '4.13V'
    assert spec.format_value(0, -12.0) == '-12C'


def test_parse_filters():
    spec = parse_extended_telemetry('4:5:s,t:30:2:1,et3_1:2:0:1')

    assert spec.decoders[0].filters == (
        ValueFilter(4, 5, SLOT),
        TemporalFilter(30, 2, 1),
        ShorthandFilter('et3'),
    )
    assert spec.decoders[0].extractors[0].divisor == 1
    assert parse_extended_telemetry('et3_2:0:1').decoders[0].extractors[0].divisor == 4


def test_round_trip():
    for text in VALID_SPECIFICATIONS:
        spec = parse_extended_telemetry(text)
        assert parse_extended_telemetry(spec.serialize()) == spec
        assert spec.serialize() == text

    assert parse_extended_telemetry('_1:2:0:1E-05').serialize() == '_1:2:0:0.00001'

    spec = parse_extended_telemetry('ET0:0_8:-50:1', labels='Temp', long_labels='Temperature inside', resolutions='1')
    assert parse_extended_telemetry(**spec.parameters) == spec


def test_invalid_specifications():
    invalid_specifications = [
        '',
        'et0:0',
        'et0:0_',
        'et0:16_8:0:1',
        'et0_8:0:1',
        'et3:1_8:0:1',
        's:5_8:0:1',
        '1:1:0_8:0:1',
        '0:2:0_8:0:1',
        '1:2:2_8:0:1',
        f'2:{RAW_CEILING}:0_8:0:1',
        '_0:8:0:1',
        '_1:1:0:1',
        f'_1:{RAW_CEILING + 1}:0:1',
        '_8:0',
        '_8:a:1',
        '_8:0:1~',
        'x:1_8:0:1',
        '_8:0:1_8:0:1',
        '_8:0:1;',
        '_2:0:1e400',
        '_2:-1e400:1',
    ]

    for text in invalid_specifications:
        with pytest.raises(InvalidSpecificationError):
            parse_extended_telemetry(text)


def test_invalid_annotations():
    with pytest.raises(InvalidSpecificationError):
        parse_extended_telemetry('_8:0:1', labels='a,b')
    with pytest.raises(InvalidSpecificationError):
        parse_extended_telemetry('_8:0:1', labels='x' * 33)
    with pytest.raises(InvalidSpecificationError):
        parse_extended_telemetry('_8:0:1', long_labels='x' * 65)
    with pytest.raises(InvalidSpecificationError):
        parse_extended_telemetry('_8:0:1', labels='a-b')
    with pytest.raises(InvalidSpecificationError):
        parse_extended_telemetry('_8:0:1', units='metres/sec')
    with pytest.raises(InvalidSpecificationError):
        parse_extended_telemetry('_8:0:1', units='m2')
    with pytest.raises(InvalidSpecificationError):
        parse_extended_telemetry('_8:0:1', resolutions='7')
    with pytest.raises(InvalidSpecificationError):
        parse_extended_telemetry('_8:0:1', resolutions='x')

    spec = parse_extended_telemetry('_8:0:1', labels='a' * 32, units='°C', resolutions='6')
    assert spec.unit(0) == '°C'
    assert spec.resolution(0) == 6


def test_sequence_number():
    assert sequence_number(datetime(2025, 7, 1, 0, 0)) == 0
    assert sequence_number(datetime(2025, 7, 1, 0, 11)) == 5
    assert sequence_number(datetime(2025, 7, 2, 1, 8)) == (24 + 1) * 30 + 4
    assert sequence_number(datetime(2025, 7, 31, 23, 58)) == 31 * 24 * 30 - 1


def test_evaluate_offsets():
    spec = parse_extended_telemetry('s:1_10:0:1,10:0:1~s:2_100:-50:0.5')
    # digits 7 and 3, read from the lowest digit up
    raw = 37

    values = evaluate([None, None, raw, None, None], 0, spec)

    assert values == [None, None, 37 * 0.5 - 50]

    values = evaluate([None, raw, raw, None, None], 0, spec)

    assert values == [7, 3, 37 * 0.5 - 50]


def test_evaluate_first_match():
    spec = parse_extended_telemetry('_10:0:1~_10:0:2')

    assert evaluate([5], 0, spec) == [5, None]


def test_evaluate_higher_slot_wins():
    spec = parse_extended_telemetry('1:4:0_4:10:0:1')

    assert evaluate([None, 4, 8], 0, spec) == [2]


def test_evaluate_shorthands():
    spec = parse_extended_telemetry('et0:3_8:-50:1~et3_4:0:1')
    user_defined = 2 * 4 + 3 * 20 + 6 * 320
    vendor = 3 + 2 * 4

    assert evaluate([None, None, user_defined], 0, spec) == [-44, None]
    assert evaluate([None, None, vendor], 0, spec) == [None, 2]
    assert evaluate([None, vendor], 0, spec) == [None, None]
    assert evaluate([None, user_defined], 0, spec) == [None, None]


def test_evaluate_temporal():
    spec = parse_extended_telemetry('t:1:2:1_10:0:1')

    assert evaluate([3], 1, spec) == [3]
    assert evaluate([3], 2, spec) == [None]
