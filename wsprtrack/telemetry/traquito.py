"""
import of Traquito user-defined message definitions

A Traquito message definition is a list of field objects (`name`, `unit`, `lowValue`, `highValue`, `stepSize`)
written as JSON object literals separated by commas, optionally with `//` comments and a trailing comma. Each
definition describes the user-defined message (type 0) of one extended telemetry slot; its fields are packed in order
above the message header.
"""

import json
import math
from os import PathLike
import re
from typing import Dict, List, Mapping, Union

from wsprtrack.telemetry.parsing import InvalidSpecificationError, parse_extended_telemetry
from wsprtrack.telemetry.spec import ExtendedTelemetrySpec, format_number

COMMENT_PATTERN = re.compile(r'//.*$', re.MULTILINE)

# Traquito numbers its slots from 1, with slot 1 the primary transmission
TRAQUITO_SLOTS = {f'slot{slot + 1}MsgDef': slot for slot in range(2, 5)}

FIELD_KEYS = ['name', 'lowValue', 'highValue', 'stepSize']


def parse_message_definition(definition: str) -> List[dict]:
    """
    parse the text of a Traquito message definition into its field objects

    :param definition: comma-separated JSON objects
    :return: field objects
    """

    text = COMMENT_PATTERN.sub('', definition).strip().rstrip(',')
    try:
        fields = json.loads(f'[{text}]')
    except json.JSONDecodeError as error:
        raise InvalidSpecificationError(f'invalid message definition - {error}')

    for field in fields:
        if not isinstance(field, Mapping):
            raise InvalidSpecificationError(f'message definition field "{field}" is not an object')
        missing_keys = [key for key in FIELD_KEYS if key not in field]
        if len(missing_keys) > 0:
            raise InvalidSpecificationError(f'message definition field "{field}" is missing {missing_keys}')
        if not field['stepSize'] > 0 or not field['highValue'] >= field['lowValue']:
            raise InvalidSpecificationError(f'message definition field "{field["name"]}" has an empty range')

    return fields


def parse_traquito_spec(definitions: Mapping[int, Union[str, List[dict]]]) -> ExtendedTelemetrySpec:
    """
    Build an extended telemetry specification from Traquito message definitions. The definition of each slot becomes
    a decoder of user-defined messages of type 0 in that slot, extracting each field with
    `modulus = ceil((highValue - lowValue) / stepSize) + 1`, `offset = lowValue` and `slope = stepSize`.

    >>> spec = parse_traquito_spec({2: '{"name": "Altitude", "unit": "m", "lowValue": 0, "highValue": 21340, "stepSize": 20}'})
    >>> spec.serialize()
    'et0:0,s:2_1068:0:20'

    :param definitions: message definition (text or field objects) by slot index (2 - 4)
    :return: extended telemetry specification
    """

    decoders = []
    labels = []
    units = []
    for slot in sorted(definitions):
        if slot not in TRAQUITO_SLOTS.values():
            raise InvalidSpecificationError(f'user-defined messages are sent in slots 2 - 4, not {slot}')

        fields = definitions[slot]
        if isinstance(fields, str):
            fields = parse_message_definition(fields)
        if len(fields) == 0:
            continue

        extractors = []
        for field in fields:
            modulus = math.ceil((field['highValue'] - field['lowValue']) / field['stepSize']) + 1
            extractors.append(
                ':'.join(
                    format_number(value) for value in (modulus, field['lowValue'], field['stepSize'])
                )
            )
            labels.append(field['name'])
            units.append(field.get('unit') or '')
        decoders.append(f'et0:0,s:{slot}_{",".join(extractors)}')

    if len(decoders) == 0:
        raise InvalidSpecificationError('no message definitions given')

    return parse_extended_telemetry('~'.join(decoders), labels=','.join(labels), units=','.join(units))


def read_traquito_json(filename: PathLike) -> ExtendedTelemetrySpec:
    """
    read an extended telemetry specification from a Traquito configuration export, with message definitions under
    `slot3MsgDef`, `slot4MsgDef` and `slot5MsgDef`

    :param filename: path to JSON file
    :return: extended telemetry specification
    """

    with open(filename) as input_file:
        configuration = json.load(input_file)

    definitions: Dict[int, str] = {
        slot: configuration[key]
        for key, slot in TRAQUITO_SLOTS.items()
        if configuration.get(key)
    }
    return parse_traquito_spec(definitions)
