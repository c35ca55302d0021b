from passlib.context import CryptContext
from userbase.core.config import settings

# CryptContext handles password hashing using bcrypt
# bcrypt generates a random salt per hash and stores it inside the hash string,
# so the same password hashes differently every time but always verifies
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash using constant-time comparison"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    return pwd_context.hash(password)


def dummy_verify() -> None:
    """Spend the time of one verification without a real hash"""
    # Used when the login email is unknown, so response timing does not
    # reveal which emails are registered
    pwd_context.dummy_verify()
