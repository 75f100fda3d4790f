import boto3
import pytest
from botocore.stub import Stubber

from ssm_config.parameter_stores import LocalStore, Ssm


@pytest.fixture(autouse=True)
def f_fake_credentials(monkeypatch):
    # stubbed clients never reach AWS but botocore still wants a region
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-southeast-2")
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("SSM_CONFIG_PREFIX", raising=False)


@pytest.fixture
def f_ssm_client():
    return boto3.client("ssm", region_name="ap-southeast-2")


@pytest.fixture
def f_stubber(f_ssm_client):
    with Stubber(f_ssm_client) as stubber:
        yield stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def f_ssm(f_ssm_client, f_stubber):
    return Ssm(client=f_ssm_client)


@pytest.fixture
def f_local_store():
    store = LocalStore()
    store.put("/app/username", "admin")
    store.put("/app/password", "hunter2", field_type="SecureString")
    store.put("/app/hosts", "a,b,c", field_type="StringList")
    return store


@pytest.fixture
def f_make_parameter():
    return make_parameter


def make_parameter(name, value, field_type="String", version=1):
    return {
        "Name": name,
        "Type": field_type,
        "Value": value,
        "Version": version,
        "ARN": f"arn:aws:ssm:ap-southeast-2:123456789012:parameter/{name.lstrip('/')}",
    }
