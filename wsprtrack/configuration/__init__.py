from wsprtrack.configuration.base import (
    Configuration,
    ConfigurationSection,
    ConfigurationYAML,
    convert_key_pairs,
    update_none,
)
from wsprtrack.configuration.run import RunConfiguration
from wsprtrack.configuration.telemetry import ExtendedTelemetryConfiguration

__all__ = [
    'Configuration',
    'ConfigurationSection',
    'ConfigurationYAML',
    'convert_key_pairs',
    'update_none',
    'RunConfiguration',
    'ExtendedTelemetryConfiguration',
]
