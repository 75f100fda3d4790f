# external packages
import logging
import os
from typing import Iterable

# my modules
from ssm_config.config_materializer import materialize
from ssm_config.iparameter_store import IParameterStore
from ssm_config.parameter_stores import LocalStore, Ssm


log_wp = logging.getLogger("config_loader")
hdlr = logging.StreamHandler()
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)20s - %(message)s"
)
hdlr.setFormatter(formatter)
log_wp.addHandler(hdlr)


class MissingParametersError(Exception):
    def __init__(self, names):
        self.names = sorted(names)
        super().__init__(f"Parameters not found: {', '.join(self.names)}")


def load_config(
    store: IParameterStore,
    names: Iterable[str],
    with_decryption: bool = True,
    strip_prefix: str = None,
    required: bool = False,
) -> dict:
    """Fetch names from store and return them as a config mapping.

    Names the store could not resolve are logged and left out of the mapping,
    unless required is set, in which case MissingParametersError is raised.
    Errors from the store itself propagate untouched.
    """
    response = store.get_parameters(names, with_decryption=with_decryption)

    invalid = response.get("InvalidParameters", [])
    for name in invalid:
        log_wp.warning(f"{name} was not found in the parameter store")

    if required and invalid:
        raise MissingParametersError(invalid)

    config = materialize(response["Parameters"])
    if not strip_prefix:
        return config

    stripped = {}
    for key, value in config.items():
        if key.startswith(strip_prefix):
            key = key[len(strip_prefix) :]
        stripped[key] = value
    return stripped


class LoaderConfig:
    STORE_TYPES = ("ssm", "local")
    ENV_PREFIX = "SSM_CONFIG_PREFIX"

    prefix: str
    region: str
    with_decryption: bool = True
    store_type: str = "ssm"
    store: IParameterStore = None

    def __init__(
        self,
        prefix: str = None,
        region: str = None,
        with_decryption: bool = True,
        store_type: str = "ssm",
    ):
        if store_type not in self.STORE_TYPES:
            raise ValueError(
                f"Unknown store_type {store_type}. Must be either 'ssm' or 'local'"
            )

        if prefix is None:
            prefix = os.environ.get(self.ENV_PREFIX, "")
        if region is None:
            region = os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION")

        self.prefix = prefix.strip("/")
        self.region = region
        self.with_decryption = with_decryption
        self.store_type = store_type

    @classmethod
    def from_args(cls, args):
        return cls(
            prefix=getattr(args, "prefix", None),
            region=getattr(args, "region", None),
            with_decryption=getattr(args, "with_decryption", True),
            store_type=getattr(args, "store", "ssm"),
        )

    @property
    def path_prefix(self) -> str:
        if not self.prefix:
            return ""
        return f"/{self.prefix}/"

    def path(self, name: str) -> str:
        # absolute names are left alone
        if name.startswith("/") or not self.prefix:
            return name
        return f"{self.path_prefix}{name}"

    def make_store(self) -> IParameterStore:
        if self.store is None:
            if self.store_type == "ssm":
                self.store = Ssm(region_name=self.region)
            else:
                self.store = LocalStore()
        return self.store

    def load(self, names: Iterable[str], **kwargs) -> dict:
        kwargs.setdefault("with_decryption", self.with_decryption)
        return load_config(
            self.make_store(), [self.path(name) for name in names], **kwargs
        )
