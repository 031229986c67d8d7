from abc import ABC, abstractmethod
from copy import deepcopy
from os import PathLike
from pathlib import Path
from typing import Any, Collection, Dict, Generator, Mapping

import typepigeon
import yaml


class Configuration(ABC, Mapping):
    """
    mapping of typed fields, converting assigned values to the declared type of their field and filling unset fields
    from defaults
    """

    fields: Dict[str, type]
    defaults: Dict[str, Any] = None

    def __init__(self, **configuration):
        self.__values = {field: None for field in self.fields}
        if self.defaults is not None:
            configuration = deepcopy(configuration)
            update_none(configuration, deepcopy(self.defaults))
        if len(configuration) > 0:
            self.update(configuration)

    @classmethod
    def from_file(cls, filename: PathLike) -> 'Configuration':
        raise NotImplementedError()

    @abstractmethod
    def to_file(self, filename: PathLike = None, overwrite: bool = False):
        raise NotImplementedError()

    def validate(self, key: str, value: Any) -> Any:
        """ check a converted value before it is stored, returning the value to store """
        return value

    def convert(self, key: str, value: Any) -> Any:
        if key not in self.fields or value is None:
            return value

        field_type = self.fields[key]
        if isinstance(field_type, type) and issubclass(field_type, Configuration):
            return value if isinstance(value, field_type) else field_type(**value)
        elif isinstance(field_type, Mapping):
            return convert_key_pairs(value, field_type)
        elif isinstance(field_type, type) and isinstance(value, field_type):
            return value
        return typepigeon.convert_value(value, field_type)

    def __copy__(self) -> 'Configuration':
        return self.__class__(**deepcopy(self.__values))

    def __contains__(self, key: str) -> bool:
        return key in self.__values

    def __getitem__(self, key: str) -> Any:
        return self.__values[key]

    def __setitem__(self, key: str, value: Any):
        if key not in self.fields:
            self.fields[key] = type(value)
        self.__values[key] = self.validate(key, self.convert(key, value))

    def update(self, other: Mapping):
        for key, value in other.items():
            if key in self and isinstance(self[key], Configuration) and value is not None:
                self[key].update(value)
            else:
                self[key] = value

    @property
    def values_dict(self) -> Dict[str, Any]:
        return {
            key: value.values_dict if isinstance(value, Configuration) else value
            for key, value in self.__values.items()
        }

    def __eq__(self, other: 'Configuration') -> bool:
        return isinstance(other, Configuration) and other.values_dict == self.values_dict

    def __repr__(self):
        values = ', '.join(f'{key}={repr(value)}' for key, value in self.__values.items())
        return f'{self.__class__.__name__}({values})'

    def __len__(self) -> int:
        return len(self.__values)

    def __iter__(self) -> Generator:
        yield from self.__values

    def __delitem__(self, key):
        del self.__values[key]


class ConfigurationSection:
    """ configuration nested under its own key in a run configuration """

    name: str


class ConfigurationYAML(Configuration):
    @classmethod
    def from_file(cls, filename: PathLike) -> 'Configuration':
        with open(filename) as input_file:
            configuration = yaml.safe_load(input_file)
        if configuration is None:
            configuration = {}
        return cls(**configuration)

    def to_file(self, filename: PathLike = None, overwrite: bool = True):
        if not isinstance(filename, Path):
            filename = Path(filename)
        if overwrite or not filename.exists():
            content = typepigeon.convert_to_json(self.values_dict)
            with open(filename, 'w') as output_file:
                yaml.safe_dump(content, output_file)


def convert_key_pairs(value_mapping: Mapping, type_mapping: Mapping[str, type]) -> Dict[str, Any]:
    """
    convert the values of a nested mapping to the types of a mapping of the same shape

    :param value_mapping: values
    :param type_mapping: types of values, by key
    :return: converted values (keys without a type are left as they are)
    """

    converted = dict(**value_mapping)
    for key, value in converted.items():
        if key not in type_mapping or value is None:
            continue
        value_type = type_mapping[key]
        if isinstance(value_type, Mapping) and isinstance(value, Mapping):
            converted[key] = convert_key_pairs(value, value_type)
        elif not isinstance(value_type, Collection) and issubclass(value_type, Configuration):
            converted[key] = value if isinstance(value, value_type) else value_type(**value)
        else:
            converted[key] = typepigeon.convert_value(value, value_type)
    return converted


def update_none(values: Dict[str, Any], defaults: Mapping[str, Any]):
    """ fill keys of the given mapping that are missing or `None` from the defaults, descending into nested mappings """

    for key, default_value in defaults.items():
        if key not in values or values[key] is None:
            values[key] = default_value
        elif isinstance(values[key], Mapping) and isinstance(default_value, Mapping):
            update_none(values[key], default_value)
