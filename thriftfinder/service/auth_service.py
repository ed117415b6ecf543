"""
Authentication service.
"""
from sqlalchemy.orm import Session
from botocore.exceptions import ClientError
from thriftfinder.aws import get_cognito, CognitoIdentityProviderWrapper
from thriftfinder.core.exceptions import BadRequest, EmailAlreadyExists, InvalidCredentials
from thriftfinder.session import create_session, remove_session
from thriftfinder.crud import user_crud
from thriftfinder.model.user import SIGNUP_ROLES
from thriftfinder.schema.auth import UserRegister, UserLogin, LoginResponse, SignupResponse, UserInfo
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """Handles user authentication operations."""

    def __init__(self, db: Session, cognito: CognitoIdentityProviderWrapper = None):
        self.db = db
        self.cognito = cognito or get_cognito()

    def register_user(self, user_data: UserRegister) -> SignupResponse:
        """Register a new user in Cognito and the local DB."""
        if user_data.role not in SIGNUP_ROLES:
            raise BadRequest(message="Invalid role", code="INVALID_ROLE")
        if user_crud.get_by_email(self.db, user_data.email):
            raise EmailAlreadyExists()

        try:
            created = self.cognito.admin_create_user(
                email=user_data.email,
                password=user_data.password,
                display_name=user_data.name,
            )
        except ClientError as e:
            if e.response['Error']['Code'] == 'UsernameExistsException':
                raise EmailAlreadyExists()
            raise BadRequest(message=e.response['Error']['Message'], code="SIGNUP_FAILED")

        user = user_crud.create_from_dict(
            self.db,
            obj_in={
                "uid": created['uid'],
                "email": user_data.email,
                "display_name": user_data.name,
                "role": user_data.role,
                "cognito_username": created['username'],
            },
        )
        logger.info(f"User registered: {user.email} ({user.role})")
        return SignupResponse(
            uid=user.uid,
            email=user.email,
            message="User created successfully",
        )

    def login(self, login_data: UserLogin) -> LoginResponse:
        """Authenticate via Cognito, create session, return the bearer token."""
        try:
            tokens = self.cognito.initiate_auth(
                email=login_data.email,
                password=login_data.password
            )
        except ClientError as e:
            if e.response['Error']['Code'] in ['NotAuthorizedException', 'UserNotFoundException']:
                raise InvalidCredentials()
            raise InvalidCredentials(message=e.response['Error']['Message'])

        user = user_crud.get_by_email(self.db, login_data.email)
        if not user:
            raise InvalidCredentials(message="User not found in local database")

        id_token = tokens['id_token']
        create_session(id_token, {
            "uid": user.uid,
            "email": user.email,
            "role": user.role,
            "access_token": tokens['access_token'],  # kept for global sign out
        })
        logger.info(f"User logged in: {user.email}")

        return LoginResponse(
            message="Login successful",
            access_token=id_token,
            user=UserInfo.model_validate(user),
        )

    def logout(self, token: str, session: dict) -> bool:
        """Sign out from Cognito and remove local session."""
        access_token = session.get('access_token')
        if access_token:
            try:
                self.cognito.global_sign_out(access_token)
            except ClientError as e:
                logger.warning(f"Cognito sign out failed: {e.response['Error']['Message']}")
        return remove_session(token)
