"""
AWS integrations layer.
"""
from thriftfinder.aws.client import get_aws_client, get_cognito
from thriftfinder.aws.cognito import CognitoIdentityProviderWrapper
from thriftfinder.aws.secrets import get_secret

__all__ = [
    "get_aws_client",
    "get_cognito",
    "CognitoIdentityProviderWrapper",
    "get_secret",
]
