"""IAM policy documents granting access to a parameter path."""

POLICY_VERSION = "2012-10-17"

READ_ACTIONS = [
    "ssm:GetParameter",
    "ssm:GetParameters",
    "ssm:GetParametersByPath",
]
WRITE_ACTIONS = ["ssm:PutParameter"]


def parameter_arn(region: str, account_id: str, path: str) -> str:
    path = path.strip("/")
    if path:
        path = f"{path}/"
    return f"arn:aws:ssm:{region}:{account_id}:parameter/{path}*"


def _policy(actions, kms_actions, region, account_id, path, kms_key_arn):
    statements = [
        {
            "Effect": "Allow",
            "Action": actions,
            "Resource": parameter_arn(region, account_id, path),
        }
    ]
    if kms_key_arn:
        statements.append(
            {"Effect": "Allow", "Action": kms_actions, "Resource": kms_key_arn}
        )
    return {"Version": POLICY_VERSION, "Statement": statements}


def read_policy(
    region: str, account_id: str, path: str, kms_key_arn: str = None
) -> dict:
    """Read access to everything under path.

    kms_key_arn is only needed for SecureString parameters encrypted with a
    customer managed key; the aws/ssm key is usable without a grant.
    """
    return _policy(
        READ_ACTIONS, ["kms:Decrypt"], region, account_id, path, kms_key_arn
    )


def write_policy(
    region: str, account_id: str, path: str, kms_key_arn: str = None
) -> dict:
    return _policy(
        READ_ACTIONS + WRITE_ACTIONS,
        ["kms:Decrypt", "kms:Encrypt", "kms:GenerateDataKey"],
        region,
        account_id,
        path,
        kms_key_arn,
    )
