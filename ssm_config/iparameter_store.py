from abc import ABC, abstractmethod
from typing import Iterable


FIELD_TYPES = ("String", "StringList", "SecureString")


# interface for a parameter store
class IParameterStore(ABC):
    @abstractmethod
    def put(
        self,
        path: str,
        value: str,
        field_type: str = "String",
        overwrite: bool = True,
        key_id: str = None,
    ) -> dict:
        ...

    @abstractmethod
    def get(self, path: str, with_decryption: bool = True) -> str:
        ...

    @abstractmethod
    def get_parameters(
        self, paths: Iterable[str], with_decryption: bool = True
    ) -> dict:
        """Bulk read in the get_parameters response shape:
        {"Parameters": [...], "InvalidParameters": [...]}"""
        ...


def check_field_type(field_type: str, key_id: str = None):
    if field_type not in FIELD_TYPES:
        raise ValueError(
            f"Unknown field_type {field_type}. Must be one of {', '.join(FIELD_TYPES)}"
        )
    if key_id and field_type != "SecureString":
        raise ValueError(f"key_id only applies to SecureString, not {field_type}")
