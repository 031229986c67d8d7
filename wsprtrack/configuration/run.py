from datetime import datetime
from pathlib import Path
from typing import Any

from wsprtrack.bands import band_info
from wsprtrack.channels import Channel, CALLSIGN_PATTERN
from wsprtrack.configuration.base import ConfigurationYAML
from wsprtrack.configuration.telemetry import ExtendedTelemetryConfiguration
from wsprtrack.protocols import Protocol

CHANNEL_FIELDS = ['callsign', 'band', 'channel', 'protocol', 'version']


class RunConfiguration(ConfigurationYAML):
    fields = {
        'callsign': str,
        'band': str,
        'channel': int,
        'protocol': str,
        'version': int,
        'time': {'start': datetime, 'end': datetime},
        'reports': {'filenames': [Path]},
        'telemetry': ExtendedTelemetryConfiguration,
        'track': {'detach_grid4': bool},
        'output': {'filename': Path},
        'log': {'filename': Path},
    }

    defaults = {
        'band': '20m',
        'channel': 0,
        'protocol': Protocol.U4B.tag,
        'time': {'start': None, 'end': None},
        'reports': {'filenames': []},
        'telemetry': {},
        'track': {'detach_grid4': False},
        'output': {'filename': None},
        'log': {'filename': None},
    }

    def validate(self, key: str, value: Any) -> Any:
        if value is None:
            return value

        if key == 'callsign':
            value = value.strip().upper()
            if not CALLSIGN_PATTERN.match(value):
                raise ValueError(f'unrecognized callsign format: "{value}"')
        elif key == 'band':
            value = value.strip().lower()
            band_info(value)
        elif key == 'protocol':
            value = Protocol.from_string(value).tag
        elif key == 'time':
            if value.get('start') is not None and value.get('end') is not None:
                if value['start'] > value['end']:
                    value['start'], value['end'] = value['end'], value['start']
        elif key == 'output':
            value['filename'] = prepare_filename(value.get('filename'), 'wsprtrack_output', '.geojson')
        elif key == 'log':
            value['filename'] = prepare_filename(value.get('filename'), 'wsprtrack_log', '.txt')

        return value

    def __setitem__(self, key: str, value: Any):
        super().__setitem__(key, value)

        # channel numbers and versions are only meaningful for the protocol they are given with
        if key in CHANNEL_FIELDS and all(
            field in self and self[field] is not None for field in ['band', 'channel', 'protocol']
        ):
            self.validate_channel()

    @property
    def channel_configuration(self) -> Channel:
        return self.validate_channel()

    def validate_channel(self) -> Channel:
        """ build the configured channel, raising `ValueError` if its fields do not fit together """
        return Channel(
            band=self['band'],
            number=self['channel'],
            protocol=self['protocol'],
            callsign=self['callsign'],
            version=self['version'],
        )


def prepare_filename(filename: Path, prefix: str, suffix: str) -> Path:
    """ expand the given path, naming a new file inside of it if it is a directory, and create its parent directory """

    if filename is None:
        return None

    filename = Path(filename).expanduser()
    if filename.is_dir() or (not filename.exists() and filename.suffix == ''):
        filename = filename / f'{prefix}_{datetime.now():%Y%m%dT%H%M%S}{suffix}'
    if not filename.parent.exists():
        filename.parent.mkdir(parents=True, exist_ok=True)
    return filename
