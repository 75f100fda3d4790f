# external packages
import argparse
import json
import logging
import sys

from botocore.exceptions import BotoCoreError, ClientError

# my modules
from ssm_config import policies
from ssm_config.config_loader import LoaderConfig, MissingParametersError
from ssm_config.iparameter_store import FIELD_TYPES
from ssm_config.parameter_stores import StoreExceptions


log_wp = logging.getLogger("ssm_config")
hdlr = logging.StreamHandler()
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(funcName)20s - %(message)s"
)
hdlr.setFormatter(formatter)
log_wp.addHandler(hdlr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ssm-config", description="Read and write Parameter Store configuration"
    )
    parser.add_argument("--region", default=None, help="AWS region of the parameter store")
    parser.add_argument(
        "--prefix",
        default=None,
        help="Path prefix that relative parameter names are placed under",
    )
    parser.add_argument(
        "--store",
        default="ssm",
        choices=LoaderConfig.STORE_TYPES,
        help="Parameter store backend. 'local' is in-memory and only useful for testing",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    put = subparsers.add_parser("put", help="Create or update a parameter")
    put.add_argument("name")
    put.add_argument("value")
    put.add_argument("--type", dest="field_type", default="String", choices=FIELD_TYPES)
    put.add_argument(
        "--key-id", default=None, help="KMS key for SecureString, defaults to aws/ssm"
    )
    put.add_argument(
        "--overwrite",
        default=True,
        action=argparse.BooleanOptionalAction,
        help="Replace the value if the parameter already exists",
    )

    get = subparsers.add_parser("get", help="Print parameters as a JSON config mapping")
    get.add_argument("names", nargs="+")
    get.add_argument(
        "--decrypt",
        dest="with_decryption",
        default=True,
        action=argparse.BooleanOptionalAction,
        help="Decrypt SecureString values",
    )
    get.add_argument(
        "--strip-prefix", default=None, help="Remove this prefix from the printed keys"
    )
    get.add_argument(
        "--required",
        default=False,
        action="store_true",
        help="Fail if any parameter is missing",
    )

    policy = subparsers.add_parser("policy", help="Print an IAM policy for a path")
    policy.add_argument("path")
    policy.add_argument("--account-id", required=True)
    policy.add_argument("--kms-key-arn", default=None)
    policy.add_argument(
        "--write", default=False, action="store_true", help="Include write access"
    )

    return parser


def _put(args, config: LoaderConfig):
    store = config.make_store()
    response = store.put(
        path=config.path(args.name),
        value=args.value,
        field_type=args.field_type,
        overwrite=args.overwrite,
        key_id=args.key_id,
    )
    print(json.dumps({"Name": config.path(args.name), "Version": response.get("Version")}))


def _get(args, config: LoaderConfig):
    result = config.load(
        args.names, strip_prefix=args.strip_prefix, required=args.required
    )
    print(json.dumps(result, indent=2, sort_keys=True))


def _policy(args, config: LoaderConfig):
    if not config.region:
        raise ValueError("--region (or AWS_REGION) is required to build a policy")

    build = policies.write_policy if args.write else policies.read_policy
    document = build(
        region=config.region,
        account_id=args.account_id,
        path=config.path(args.path),
        kms_key_arn=args.kms_key_arn,
    )
    print(json.dumps(document, indent=2))


COMMANDS = {"put": _put, "get": _get, "policy": _policy}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.getLogger().setLevel(args.log_level)
    for name in ("ssm_config", "parameter_stores", "config_loader"):
        logging.getLogger(name).setLevel(args.log_level)

    try:
        config = LoaderConfig.from_args(args)
        COMMANDS[args.command](args, config)
    except MissingParametersError as e:
        log_wp.error(str(e))
        return 1
    except (StoreExceptions.ParameterNotFound, StoreExceptions.ParameterAlreadyExists) as e:
        log_wp.error(str(e))
        return 1
    except ClientError as e:
        log_wp.error(e.response["Error"].get("Message", str(e)))
        return 1
    except BotoCoreError as e:
        # no credentials, no region, connection failures
        log_wp.error(str(e))
        return 1
    except ValueError as e:
        log_wp.error(str(e))
        return 1

    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
