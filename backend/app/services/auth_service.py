"""
Authentication service for user management, login and password resets.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from ldap3.core.exceptions import (
    LDAPCommunicationError,
    LDAPException,
    LDAPInvalidCredentialsResult,
)
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from app.config import get_settings
from app.core.errors import (
    AccountLockedError,
    ActivationPendingError,
    AuthFailedError,
    InvalidActivationKeyError,
    InvalidPasswordError,
    InvalidResetDetailsError,
    InvalidResetKeyError,
    InvalidUsernameError,
    LDAPError,
    LDAPServerDownError,
    UsernameTakenError,
)
from app.core.ldap import LDAPAuthenticator, LDAPEmptyPasswordError, LDAPUserNotFoundError
from app.core.mailer import Mailer
from app.core.rate_limit import (
    check_user_lockout,
    clear_user_lockout,
    increment_failed_login,
    reset_failed_attempts,
    set_user_lockout,
)
from app.core.security import (
    create_reset_key,
    decode_reset_key,
    hash_password,
    verify_password,
)
from app.database.databases import auth_db
from app.models.password_reset import ResetKeyStatus
from app.models.user import AuthSource, User
from app.schemas.auth import RegisterRequest, RegisterResponse

logger = logging.getLogger(__name__)


def to_object_id(value) -> Optional[ObjectId]:
    """Parse an ObjectId, returning None for malformed input."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def as_utc(value: datetime) -> datetime:
    """MongoDB returns naive UTC datetimes; make them timezone-aware."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _doc_to_user(user_doc: dict) -> User:
    user_doc["_id"] = str(user_doc["_id"])
    return User(**user_doc)


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        ldap: Optional[LDAPAuthenticator] = None,
        mailer: Optional[Mailer] = None,
    ):
        """Initialize with auth database and optional LDAP / mail backends."""
        self.db = db
        self.users_collection = db[auth_db.Collections.USERS]
        self.resets_collection = db[auth_db.Collections.PASSWORD_RESETS]
        self.settings = get_settings()
        self.ldap = ldap or LDAPAuthenticator(self.settings)
        self.mailer = mailer or Mailer(self.settings)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def authenticate(self, username: str, password: str) -> User:
        """
        Authenticate a user against LDAP or the local store, depending on
        configuration.

        Args:
            username: Username as typed by the user
            password: Plain text password

        Returns:
            The authenticated User

        Raises:
            AuthError subclass describing why authentication failed
        """
        if self.settings.auth_use_ldap:
            return await self._authenticate_ldap(username, password)
        return await self._authenticate_local(username, password)

    async def _authenticate_ldap(self, username: str, password: str) -> User:
        try:
            await self.ldap.authenticate(username, password)
        except LDAPCommunicationError as e:
            logger.error(
                f"LDAP AUTHENTICATION FAILED - LDAP SERVER DOWN (ldap_server={self.ldap.url}): {e}"
            )
            raise LDAPServerDownError()
        except (LDAPInvalidCredentialsResult, LDAPUserNotFoundError, LDAPEmptyPasswordError) as e:
            logger.error(
                f"LDAP AUTHENTICATION FAILED - INVALID CREDENTIALS (name={username}): {e}"
            )
            raise AuthFailedError()
        except LDAPException as e:
            logger.warning(
                f"LDAP AUTHENTICATION FAILED - UNKNOWN ERROR (name={username}, "
                f"ldap_error={type(e).__name__}): {e}"
            )
            raise LDAPError()

        return await self.find_or_create_ldap_user(username)

    async def _authenticate_local(self, username: str, password: str) -> User:
        name = username.lower()
        user_doc = await self.users_collection.find_one({"username": name})

        if not user_doc:
            logger.warning(f"AUTHENTICATION - INVALID USERNAME (username={username})")
            raise InvalidUsernameError()

        if await check_user_lockout(name):
            logger.warning(f"AUTHENTICATION - ACCOUNT LOCKED (username={username})")
            raise AccountLockedError()

        if not user_doc.get("activated", False):
            logger.warning(f"AUTHENTICATION - ACTIVATION PENDING (username={username})")
            raise ActivationPendingError()

        if not verify_password(password, user_doc.get("hashed_password")):
            logger.warning(f"AUTHENTICATION - INVALID PASSWORD (username={username})")
            failed_count = await increment_failed_login(name)
            if failed_count >= self.settings.user_lockout_threshold:
                await set_user_lockout(name, self.settings.user_lockout_duration_minutes)
            raise InvalidPasswordError()

        await reset_failed_attempts(name)
        return _doc_to_user(user_doc)

    async def is_username_valid(self, username: str) -> bool:
        """Check whether a user with this name exists."""
        user_doc = await self.users_collection.find_one(
            {"username": username.lower()}, {"_id": 1}
        )
        return user_doc is not None

    async def username_exists(self, username: str) -> bool:
        """Count-based existence check used during signup."""
        count = await self.users_collection.count_documents(
            {"username": username.lower()}, limit=1
        )
        return count > 0

    async def find_or_create_ldap_user(self, username: str) -> User:
        """
        Return the local record for a directory user, creating it on first
        login.
        """
        name = username.lower()
        existing = await self.users_collection.find_one({"username": name})
        if existing:
            return _doc_to_user(existing)

        user_doc = User(
            username=name,
            auth_source=AuthSource.LDAP,
            activated=True,
        ).model_dump(exclude={"id"})
        try:
            result = await self.users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            # Created by a concurrent first login
            existing = await self.users_collection.find_one({"username": name})
            return _doc_to_user(existing)

        logger.info(f"LDAP USER CREATED IN DB (username={name})")
        user_doc["_id"] = result.inserted_id
        return _doc_to_user(user_doc)

    # ------------------------------------------------------------------
    # Signup and activation
    # ------------------------------------------------------------------

    async def register_user(self, request: RegisterRequest) -> RegisterResponse:
        """
        Register a new, not yet activated, local user.

        Raises:
            ValueError: If passwords don't match
            UsernameTakenError: If the username exists
        """
        if not request.passwords_match():
            raise ValueError("Passwords do not match")

        name = request.username.lower()
        if await self.username_exists(name):
            raise UsernameTakenError()

        user_doc = User(
            username=name,
            email=request.email,
            hashed_password=hash_password(request.password),
            auth_source=AuthSource.LOCAL,
            security_question=request.security_question,
            security_answer=request.security_answer,
        ).model_dump(exclude={"id"})

        try:
            result = await self.users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            raise UsernameTakenError()

        user_id = str(result.inserted_id)
        logger.info(f"SIGNUP - USER DOC CREATED IN DB (username={name}, user_id={user_id})")

        return RegisterResponse(
            user_id=user_id,
            username=name,
            activation_key=user_id,
        )

    async def activate_user(self, user_id: str) -> int:
        """
        Activate a user account.

        Args:
            user_id: User ObjectId as string (the activation key)

        Returns:
            Number of records modified, 0 if the account was already active

        Raises:
            InvalidActivationKeyError: If no user has this ID
        """
        oid = to_object_id(user_id)
        if oid is None or not await self.users_collection.find_one({"_id": oid}, {"_id": 1}):
            raise InvalidActivationKeyError()

        result = await self.users_collection.update_one(
            {"_id": oid, "activated": False},
            {"$set": {"activated": True}},
        )
        logger.info(f"ACTIVATION - USER DOC UPDATED (user_id={user_id}, records_updated={result.modified_count})")
        return result.modified_count

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    async def validate_reset_key(self, reset_key: str) -> ResetKeyStatus:
        """
        Check a reset key and its age.

        Returns:
            INVALID_KEY if no ticket exists, USED if it was consumed,
            SUCCESS if issued within the validity window, FAILURE otherwise
        """
        entry = await self.resets_collection.find_one({"reset_key": reset_key})
        if entry is None:
            return ResetKeyStatus.INVALID_KEY

        if entry.get("used"):
            return ResetKeyStatus.USED

        age = datetime.now(timezone.utc) - as_utc(entry["date"])
        age_hours = abs(age.total_seconds()) / 3600
        if age_hours <= self.settings.reset_validity_hours:
            return ResetKeyStatus.SUCCESS
        return ResetKeyStatus.FAILURE

    async def send_reset_key(
        self,
        username: str,
        security_question: str,
        security_answer: str,
        domain: str,
        ip: str,
        user_cookie: Optional[str] = None,
    ) -> str:
        """
        Issue a reset key if the security details match, store the ticket
        and mail the key to the user's address.

        Returns:
            The issued reset key

        Raises:
            InvalidResetDetailsError: If no user matches the details
        """
        user_doc = await self.users_collection.find_one({
            "username": username.lower(),
            "security_question": security_question,
            "security_answer": security_answer,
        })
        if not user_doc:
            logger.warning(f"RESET PASSWORD - INVALID DETAILS (username={username}, ip={ip})")
            raise InvalidResetDetailsError()

        reset_key = create_reset_key(str(user_doc["_id"]))
        await self.resets_collection.insert_one({
            "reset_key": reset_key,
            "user_id": user_doc["_id"],
            "date": datetime.now(timezone.utc),
            "used": False,
        })
        logger.info(f"RESET PASSWORD - RESET KEY DOC CREATED IN DB (username={username})")

        await self.mailer.mail_reset_key(
            domain, ip, user_cookie, username, reset_key, user_doc.get("email")
        )
        return reset_key

    async def reset_password(self, reset_key: str, new_password: str) -> bool:
        """
        Consume a reset key and store the new password.

        Raises:
            InvalidResetKeyError: If the key is unknown, used, expired or forged
        """
        status = await self.validate_reset_key(reset_key)
        if status != ResetKeyStatus.SUCCESS:
            raise InvalidResetKeyError(status.value)

        user_id = to_object_id(decode_reset_key(reset_key))
        if user_id is None:
            raise InvalidResetKeyError(ResetKeyStatus.INVALID_KEY.value)

        ticket = await self.resets_collection.find_one_and_update(
            {"reset_key": reset_key, "used": False},
            {"$set": {"used": True, "used_at": datetime.now(timezone.utc)}},
        )
        if ticket is None:
            raise InvalidResetKeyError(ResetKeyStatus.USED.value)
        if ticket["user_id"] != user_id:
            raise InvalidResetKeyError(ResetKeyStatus.INVALID_KEY.value)
        logger.info("RESET PASSWORD - RESET KEY DOC INVALIDATED IN DB")

        result = await self.users_collection.update_one(
            {"_id": user_id},
            {"$set": {"hashed_password": hash_password(new_password)}},
        )
        logger.info(
            f"RESET PASSWORD - USER DOC UPDATED IN DB WITH NEW HASH "
            f"(user_id={user_id}, records_updated={result.modified_count})"
        )

        user_doc = await self.users_collection.find_one({"_id": user_id}, {"username": 1})
        if user_doc:
            await clear_user_lockout(user_doc["username"])
        return True

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_user_id_from_name(self, username: str) -> Optional[ObjectId]:
        user_doc = await self.users_collection.find_one(
            {"username": username.lower()}, {"_id": 1}
        )
        return user_doc["_id"] if user_doc else None

    async def save_last_seen(self, username: str) -> ObjectId:
        """
        Record that the user has just been seen.

        Raises:
            InvalidUsernameError: If the user does not exist
        """
        user_id = await self.get_user_id_from_name(username)
        if user_id is None:
            raise InvalidUsernameError()

        await self.users_collection.update_one(
            {"_id": user_id},
            {"$set": {"last_seen": datetime.now(timezone.utc)}},
        )
        return user_id

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Returns:
            User model or None if not found
        """
        oid = to_object_id(user_id)
        if oid is None:
            return None

        user_doc = await self.users_collection.find_one({"_id": oid})
        if not user_doc:
            return None
        return _doc_to_user(user_doc)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        user_doc = await self.users_collection.find_one({"username": username.lower()})
        if not user_doc:
            return None
        return _doc_to_user(user_doc)
