import logging

import pytest
from botocore.exceptions import ClientError

from ssm_config.config_loader import LoaderConfig, MissingParametersError, load_config
from ssm_config.parameter_stores import LocalStore, Ssm


def test_load_config(f_local_store):
    config = load_config(f_local_store, ["/app/username", "/app/password"])
    assert config == {"/app/username": "admin", "/app/password": "hunter2"}


def test_load_config_omits_invalid(f_local_store, caplog):
    with caplog.at_level(logging.WARNING, logger="config_loader"):
        config = load_config(f_local_store, ["/app/username", "/app/missing"])
    assert config == {"/app/username": "admin"}
    assert "/app/missing" in caplog.text


def test_load_config_required(f_local_store):
    with pytest.raises(MissingParametersError) as e:
        load_config(f_local_store, ["/b/missing", "/app/username", "/a/missing"], required=True)
    assert e.value.names == ["/a/missing", "/b/missing"]


def test_load_config_strip_prefix(f_local_store):
    config = load_config(
        f_local_store, ["/app/username", "/app/hosts"], strip_prefix="/app/"
    )
    assert config == {"username": "admin", "hosts": "a,b,c"}


def test_load_config_strip_prefix_collision_last_wins():
    store = LocalStore()
    store.put("/app/k", "1")
    store.put("k", "2")
    config = load_config(store, ["/app/k", "k"], strip_prefix="/app/")
    assert config == {"k": "2"}


def test_load_config_without_decryption(f_local_store):
    config = load_config(f_local_store, ["/app/password"], with_decryption=False)
    assert config == {"/app/password": "****"}


def test_load_config_upstream_failure(f_ssm, f_stubber):
    f_stubber.add_client_error("get_parameters", service_error_code="AccessDeniedException")
    with pytest.raises(ClientError):
        load_config(f_ssm, ["/app/username"])


def test_load_config_over_ssm(f_ssm, f_stubber, f_make_parameter):
    f_stubber.add_response(
        "get_parameters",
        {
            "Parameters": [
                f_make_parameter("/app/username", "admin"),
                f_make_parameter("/app/password", "admin", field_type="SecureString"),
            ],
        },
        {"Names": ["/app/username", "/app/password"], "WithDecryption": True},
    )
    config = load_config(f_ssm, ["/app/username", "/app/password"])
    assert config == {"/app/username": "admin", "/app/password": "admin"}


def test_loader_config_paths():
    config = LoaderConfig(prefix="/app/", store_type="local")
    assert config.prefix == "app"
    assert config.path("username") == "/app/username"
    assert config.path("/other/username") == "/other/username"


def test_loader_config_no_prefix():
    config = LoaderConfig(store_type="local")
    assert config.path("username") == "username"


def test_loader_config_env(monkeypatch):
    monkeypatch.setenv("SSM_CONFIG_PREFIX", "svc")
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    config = LoaderConfig()
    assert config.prefix == "svc"
    assert config.region == "eu-west-1"


def test_loader_config_unknown_store():
    with pytest.raises(ValueError):
        LoaderConfig(store_type="vault")


def test_loader_config_make_store():
    assert isinstance(LoaderConfig(store_type="local").make_store(), LocalStore)
    assert isinstance(LoaderConfig(region="us-east-1").make_store(), Ssm)


def test_loader_config_load():
    config = LoaderConfig(prefix="app", store_type="local")
    store = config.make_store()
    store.put("/app/username", "admin")
    assert config.load(["username"], strip_prefix="/app/") == {"username": "admin"}
