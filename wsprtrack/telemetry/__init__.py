from wsprtrack.telemetry.evaluation import evaluate, evaluate_spot, sequence_number
from wsprtrack.telemetry.parsing import InvalidSpecificationError, parse_extended_telemetry
from wsprtrack.telemetry.traquito import parse_message_definition, parse_traquito_spec, read_traquito_json
from wsprtrack.telemetry.spec import (
    Decoder,
    ExtendedTelemetrySpec,
    Extractor,
    RAW_CEILING,
    ShorthandFilter,
    SLOT,
    SlotFilter,
    TemporalFilter,
    ValueFilter,
)

__all__ = [
    'evaluate',
    'evaluate_spot',
    'sequence_number',
    'InvalidSpecificationError',
    'parse_extended_telemetry',
    'parse_message_definition',
    'parse_traquito_spec',
    'read_traquito_json',
    'Decoder',
    'ExtendedTelemetrySpec',
    'Extractor',
    'RAW_CEILING',
    'ShorthandFilter',
    'SLOT',
    'SlotFilter',
    'TemporalFilter',
    'ValueFilter',
]
