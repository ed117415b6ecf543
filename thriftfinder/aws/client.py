"""
AWS client factory - centralized boto3 client creation.
"""
import boto3
from typing import Optional
from thriftfinder.core.config import settings


def get_aws_client(service_name: str, region_name: Optional[str] = None):
    """
    Create and return a boto3 client for an AWS service.

    Args:
        service_name: AWS service name ('cognito-idp' or 'secretsmanager')
        region_name: AWS region name (defaults to COGNITO_REGION from settings)
    """
    region = region_name or settings.COGNITO_REGION
    return boto3.client(service_name, region_name=region)


def get_cognito():
    """Cognito wrapper for the configured user pool and app client."""
    from thriftfinder.aws.cognito import CognitoIdentityProviderWrapper

    return CognitoIdentityProviderWrapper(
        cognito_client=get_aws_client('cognito-idp'),
        user_pool_id=settings.COGNITO_USER_POOL_ID,
        client_id=settings.COGNITO_CLIENT_ID,
        client_secret=settings.COGNITO_CLIENT_SECRET,
    )
