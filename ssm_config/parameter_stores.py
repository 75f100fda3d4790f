# external packages
import logging
from datetime import datetime
from typing import Iterable

import boto3
import pytz
from botocore.exceptions import ClientError

# my modules
from ssm_config.iparameter_store import IParameterStore, check_field_type


log_wp = logging.getLogger("parameter_stores")
hdlr = logging.StreamHandler()
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)20s - %(message)s"
)
hdlr.setFormatter(formatter)
log_wp.addHandler(hdlr)


class StoreExceptions:
    class ParameterNotFound(Exception):
        ...

    class ParameterAlreadyExists(Exception):
        ...


def _unique(paths: Iterable[str]) -> list:
    # get_parameters rejects a request naming the same parameter twice
    return list(dict.fromkeys(paths))


class Ssm(IParameterStore):
    # service limit for a single get_parameters call
    BATCH_SIZE = 10
    exceptions = StoreExceptions

    def __init__(self, region_name: str = None, client=None):
        if client is None:
            client = boto3.client("ssm", region_name=region_name)
        self.store = client

    def put(
        self,
        path: str,
        value: str,
        field_type: str = "String",
        overwrite: bool = True,
        key_id: str = None,
    ) -> dict:
        check_field_type(field_type, key_id)
        kwargs = {
            "Name": path,
            "Value": value,
            "Type": field_type,
            "Overwrite": overwrite,
        }
        if key_id:
            kwargs["KeyId"] = key_id

        try:
            response = self.store.put_parameter(**kwargs)
        except ClientError as e:
            if e.response["Error"]["Code"] == "ParameterAlreadyExists":
                raise self.exceptions.ParameterAlreadyExists(
                    f"{path} already exists in Parameter Store"
                ) from e
            raise

        log_wp.debug(f"Put {path} as {field_type}, version {response.get('Version')}")
        return response

    def get(self, path: str, with_decryption: bool = True) -> str:
        try:
            return self.store.get_parameter(Name=path, WithDecryption=with_decryption)[
                "Parameter"
            ]["Value"]
        except ClientError as e:
            if e.response["Error"]["Code"] == "ParameterNotFound":
                raise self.exceptions.ParameterNotFound(
                    f"{path} not found in Parameter Store"
                ) from e
            raise

    def get_parameters(
        self, paths: Iterable[str], with_decryption: bool = True
    ) -> dict:
        names = _unique(paths)
        merged = {"Parameters": [], "InvalidParameters": []}

        for start in range(0, len(names), self.BATCH_SIZE):
            batch = names[start : start + self.BATCH_SIZE]
            log_wp.debug(f"Requesting {len(batch)} parameters starting at {batch[0]}")
            response = self.store.get_parameters(
                Names=batch, WithDecryption=with_decryption
            )
            merged["Parameters"].extend(response.get("Parameters", []))
            merged["InvalidParameters"].extend(response.get("InvalidParameters", []))

        return merged


class LocalStore(IParameterStore):
    MAX_VALUE_LENGTH = 4096
    MASKED_VALUE = "****"
    exceptions = StoreExceptions

    def __init__(self):
        self.store = {}

    def put(
        self,
        path: str,
        value: str,
        field_type: str = "String",
        overwrite: bool = True,
        key_id: str = None,
    ) -> dict:
        check_field_type(field_type, key_id)
        if len(value) > self.MAX_VALUE_LENGTH:
            raise ValueError(
                f"Length of {path} exceeds {self.MAX_VALUE_LENGTH} characters"
            )

        existing = self.store.get(path)
        if existing is not None and not overwrite:
            raise self.exceptions.ParameterAlreadyExists(
                f"{path} already exists in Parameter Store"
            )

        version = existing["Version"] + 1 if existing else 1
        self.store[path] = {
            "Name": path,
            "Value": value,
            "Type": field_type,
            "Version": version,
            "LastModifiedDate": datetime.now().astimezone(pytz.utc),
            "ARN": f"arn:aws:ssm:local:000000000000:parameter/{path.lstrip('/')}",
        }
        return {"Version": version, "Tier": "Standard"}

    def _read(self, path: str, with_decryption: bool) -> dict:
        record = dict(self.store[path])
        if record["Type"] == "SecureString" and not with_decryption:
            record["Value"] = self.MASKED_VALUE
        return record

    def get(self, path: str, with_decryption: bool = True) -> str:
        if path not in self.store:
            raise self.exceptions.ParameterNotFound(
                f"{path} not found in Parameter Store"
            )

        return self._read(path, with_decryption)["Value"]

    def get_parameters(
        self, paths: Iterable[str], with_decryption: bool = True
    ) -> dict:
        found = []
        invalid = []
        for path in _unique(paths):
            if path in self.store:
                found.append(self._read(path, with_decryption))
            else:
                invalid.append(path)

        return {"Parameters": found, "InvalidParameters": invalid}

    def bootstrap(self, source: IParameterStore, *paths):
        # copy parameters from another store, e.g. seed a local store from SSM
        response = source.get_parameters(paths, with_decryption=True)
        for parameter in response["Parameters"]:
            self.put(
                path=parameter["Name"],
                value=parameter["Value"],
                field_type=parameter.get("Type", "String"),
            )

        for path in response["InvalidParameters"]:
            log_wp.warning(f"{path} not found in source store, not bootstrapped")
