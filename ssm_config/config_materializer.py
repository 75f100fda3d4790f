from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional, Union


@dataclass(frozen=True)
class Parameter:
    name: str
    value: str
    type: str = "String"
    version: Optional[int] = None
    last_modified: Optional[datetime] = None
    arn: Optional[str] = None

    @classmethod
    def from_response(cls, entry: Mapping) -> "Parameter":
        # one item of the Parameters list in a get_parameters response
        return cls(
            name=entry["Name"],
            value=entry["Value"],
            type=entry.get("Type", "String"),
            version=entry.get("Version"),
            last_modified=entry.get("LastModifiedDate"),
            arn=entry.get("ARN"),
        )


def _name_and_value(parameter: Union[Parameter, Mapping]):
    if isinstance(parameter, Parameter):
        return parameter.name, parameter.value
    return parameter["Name"], parameter["Value"]


def materialize(parameters: Iterable[Union[Parameter, Mapping]]) -> dict:
    """Turn a list of fetched parameters into a name -> value config mapping.

    Values must already be decrypted. Type is ignored, so String and
    SecureString parameters end up alike. A name seen twice keeps the value
    of its last occurrence.
    """
    config = {}
    for parameter in parameters:
        name, value = _name_and_value(parameter)
        config[name] = value
    return config


def to_parameters(config: Mapping[str, str]) -> list:
    return [Parameter(name=name, value=value) for name, value in config.items()]
