"""
AWS Secrets Manager wrapper.
"""
import json
import boto3
import logging

logger = logging.getLogger(__name__)


class GetSecretWrapper:
    """Encapsulates AWS Secrets Manager actions."""

    def __init__(self, secretsmanager_client):
        self.client = secretsmanager_client

    def get_secret(self, secret_name: str) -> str:
        """
        Retrieve a secret string from AWS Secrets Manager.

        Raises:
            ClientError: If secret retrieval fails
        """
        try:
            response = self.client.get_secret_value(SecretId=secret_name)
            logger.info(f"Secret retrieved: {secret_name}")
            return response["SecretString"]
        except self.client.exceptions.ResourceNotFoundException:
            logger.error(f"The requested secret {secret_name} was not found.")
            raise


def get_secret(secret_name: str, region_name: str = "us-east-1") -> dict:
    """Get a JSON secret from AWS Secrets Manager and parse it."""
    session = boto3.session.Session()
    client = session.client(service_name="secretsmanager", region_name=region_name)
    secret_string = GetSecretWrapper(client).get_secret(secret_name)
    return json.loads(secret_string)
