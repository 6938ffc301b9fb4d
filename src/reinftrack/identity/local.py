"""Identity provider backed by the application database.

Passwords are hashed with Argon2 through passlib; bearer tokens are HS256
JWTs signed with python-jose.
"""

import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from reinftrack.database.base import Database
from reinftrack.domain.entities import Credential
from reinftrack.identity.base import IdentityProvider

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_TYPE = "access"


class LocalIdentityProvider(IdentityProvider):
    """IdentityProvider storing credentials in the reinftrack database."""

    def __init__(
        self,
        db: Database,
        secret_key: str,
        token_minutes: int = 60,
        argon2_time_cost: int = 2,
        argon2_memory_cost: int = 65536,
    ):
        """Initialize the provider.

        Args:
            db: Database instance holding the auth_accounts table
            secret_key: Key used to sign bearer tokens
            token_minutes: Token lifetime in minutes
            argon2_time_cost: Argon2 iterations
            argon2_memory_cost: Argon2 memory in KiB
        """
        self.db = db
        self.secret_key = secret_key
        self.token_lifetime = timedelta(minutes=token_minutes)
        self.pwd_context = CryptContext(
            schemes=["argon2"],
            deprecated="auto",
            argon2__time_cost=argon2_time_cost,
            argon2__memory_cost=argon2_memory_cost,
            argon2__parallelism=1,
        )

    def hash_password(self, password: str) -> str:
        return self.pwd_context.hash(password)

    def create_account(self, email: str, password: str) -> str:
        """Create an account. Returns the account ID."""
        return self.db.create_credential(email, self.hash_password(password))

    def get_account_by_email(self, email: str) -> Optional[Credential]:
        """Find an account by email."""
        return self.db.get_credential_by_email(email)

    def set_password(self, account_id: str, password: str) -> None:
        """Replace an account's password."""
        self.db.update_credential_password(account_id, self.hash_password(password))

    def delete_account(self, account_id: str) -> bool:
        """Delete an account. Returns False if it did not exist."""
        return self.db.delete_credential(account_id)

    def verify_password(self, email: str, password: str) -> Optional[str]:
        """Return the account ID if the password matches, else None."""
        credential = self.db.get_credential_by_email(email)
        if credential is None:
            # Hash anyway so unknown emails take as long as wrong passwords
            self.pwd_context.dummy_verify()
            return None
        if not self.pwd_context.verify(password, credential.password_hash):
            return None
        return credential.id

    def issue_token(self, account_id: str) -> str:
        """Issue a signed bearer token for an account."""
        now = datetime.now(UTC)
        claims = {
            "sub": account_id,
            "iat": now,
            "exp": now + self.token_lifetime,
            "type": TOKEN_TYPE,
        }
        return jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> Optional[str]:
        """Return the account ID of a valid, unexpired token, else None."""
        try:
            claims = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            logger.info("token_rejected", extra={"reason": str(e)})
            return None
        if claims.get("type") != TOKEN_TYPE or not claims.get("sub"):
            return None
        if self.db.get_credential(claims["sub"]) is None:
            return None
        return claims["sub"]
