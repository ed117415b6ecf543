"""
AWS Cognito wrapper class using boto3. Cognito is the identity provider:
it issues the ID tokens that the session layer maps to a ThriftFinder user.
"""
import base64
import hashlib
import hmac
from typing import Dict, Any, Optional
from botocore.exceptions import ClientError
import logging

logger = logging.getLogger(__name__)


class CognitoIdentityProviderWrapper:
    """
    Encapsulates Amazon Cognito Identity Provider actions.
    """

    def __init__(
        self,
        cognito_client,
        user_pool_id: str,
        client_id: str,
        client_secret: Optional[str] = None
    ):
        self.cognito_client = cognito_client
        self.user_pool_id = user_pool_id
        self.client_id = client_id
        self.client_secret = client_secret

    def _secret_hash(self, username: str) -> Optional[str]:
        """SECRET_HASH for Cognito requests when the app client has a secret."""
        if not self.client_secret:
            return None

        message = bytes(username + self.client_id, 'utf-8')
        key = bytes(self.client_secret, 'utf-8')
        return base64.b64encode(
            hmac.new(key, message, digestmod=hashlib.sha256).digest()
        ).decode()

    def admin_create_user(self, email: str, password: str, display_name: str = "") -> Dict[str, Any]:
        """
        Create a confirmed user with a permanent password.

        Signup is server-driven, so no verification email is sent and the
        user can log in immediately.

        Returns:
            Dict with the Cognito username (sub), used as the ThriftFinder uid

        Raises:
            ClientError: If creation fails (e.g. UsernameExistsException)
        """
        attributes = [
            {'Name': 'email', 'Value': email},
            {'Name': 'email_verified', 'Value': 'true'},
        ]
        if display_name:
            attributes.append({'Name': 'name', 'Value': display_name})

        try:
            response = self.cognito_client.admin_create_user(
                UserPoolId=self.user_pool_id,
                Username=email,
                UserAttributes=attributes,
                MessageAction='SUPPRESS',
            )
            self.cognito_client.admin_set_user_password(
                UserPoolId=self.user_pool_id,
                Username=email,
                Password=password,
                Permanent=True,
            )
            user = response['User']
            attrs = {a['Name']: a['Value'] for a in user.get('Attributes', [])}
            logger.info(f"User created: {email}")
            return {
                'username': user['Username'],
                'uid': attrs.get('sub', user['Username']),
            }
        except ClientError as e:
            logger.error(f"User creation failed for {email}: {e.response['Error']['Message']}")
            raise

    def initiate_auth(self, email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate user using admin auth flow.

        Returns:
            Dict containing authentication tokens

        Raises:
            ClientError: If authentication fails
        """
        try:
            kwargs = {
                'UserPoolId': self.user_pool_id,
                'ClientId': self.client_id,
                'AuthFlow': 'ADMIN_USER_PASSWORD_AUTH',
                'AuthParameters': {
                    'USERNAME': email,
                    'PASSWORD': password
                }
            }

            if self.client_secret:
                kwargs['AuthParameters']['SECRET_HASH'] = self._secret_hash(email)

            response = self.cognito_client.admin_initiate_auth(**kwargs)

            auth_result = response['AuthenticationResult']
            logger.info(f"User authenticated: {email}")

            return {
                'id_token': auth_result['IdToken'],
                'access_token': auth_result['AccessToken'],
                'refresh_token': auth_result.get('RefreshToken'),
                'expires_in': auth_result['ExpiresIn'],
                'token_type': auth_result['TokenType']
            }
        except ClientError as e:
            logger.error(f"Authentication failed for {email}: {e.response['Error']['Message']}")
            raise

    def global_sign_out(self, access_token: str) -> bool:
        """
        Sign out user globally (invalidate all tokens).

        Raises:
            ClientError: If sign out fails
        """
        try:
            self.cognito_client.global_sign_out(AccessToken=access_token)
            logger.info("User signed out globally")
            return True
        except ClientError as e:
            logger.error(f"Global sign out failed: {e.response['Error']['Message']}")
            raise
