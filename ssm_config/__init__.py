from ssm_config.config_materializer import Parameter, materialize, to_parameters
from ssm_config.config_loader import LoaderConfig, MissingParametersError, load_config
from ssm_config.parameter_stores import LocalStore, Ssm

__all__ = [
    "LoaderConfig",
    "LocalStore",
    "MissingParametersError",
    "Parameter",
    "Ssm",
    "load_config",
    "materialize",
    "to_parameters",
]
