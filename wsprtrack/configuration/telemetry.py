from pathlib import Path
from typing import Any

from wsprtrack.configuration.base import ConfigurationSection, ConfigurationYAML
from wsprtrack.telemetry import ExtendedTelemetrySpec, parse_extended_telemetry, read_traquito_json


class ExtendedTelemetryConfiguration(ConfigurationYAML, ConfigurationSection):
    name = 'telemetry'
    fields = {
        'decoders': str,
        'labels': str,
        'long_labels': str,
        'units': str,
        'resolutions': str,
        'traquito': Path,
    }

    def convert(self, key: str, value: Any) -> Any:
        # annotations may also be given as YAML lists
        if isinstance(value, (list, tuple)):
            value = ','.join('' if entry is None else str(entry) for entry in value)
        return super().convert(key, value)

    def validate(self, key: str, value: Any) -> Any:
        if key == 'decoders' and value is not None:
            value = value.strip()
            if len(value) == 0:
                return None
            parse_extended_telemetry(value)
        elif key == 'traquito' and value is not None:
            value = value.expanduser()
        return value

    @property
    def spec(self) -> ExtendedTelemetrySpec:
        """
        parsed extended telemetry specification, or `None` if no decoders are configured;
        decoders given directly take precedence over an exported Traquito configuration
        """

        if self['decoders'] is None:
            if self['traquito'] is not None:
                return read_traquito_json(self['traquito'])
            return None
        return parse_extended_telemetry(
            self['decoders'],
            labels=self['labels'],
            long_labels=self['long_labels'],
            units=self['units'],
            resolutions=self['resolutions'],
        )
