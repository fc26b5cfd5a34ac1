from argon2 import PasswordHasher
from jose import JWTError,jwt
from argon2.exceptions import VerifyMismatchError, InvalidHashError
from datetime import datetime,timedelta,timezone
from typing import Optional
from decimal import Decimal
from config import SECRET_KEY,ALGORITHM,ACCESS_TOKEN_EXPIRE_MINUTES,RESET_TOKEN_EXPIRE_MINUTES

# Argon2 password hasher (OWASP recommended)
pwd_hasher = PasswordHasher(
    time_cost=2,
    memory_cost=102400,  # 100 MB
    parallelism=8,
    hash_len=32,
    salt_len=16,
)

PASSWORD_RESET_PURPOSE = "password_reset"

def hash_password(password: str) -> str:
    return pwd_hasher.hash(password)

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_hasher.verify(hashed_password, plain_password)
    except (VerifyMismatchError, InvalidHashError):
        return False

# Token Logic
def create_access_token(data: dict, expires_minutes: Optional[int] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes or ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({'exp':expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def create_password_reset_token(email: str) -> str:
    return create_access_token(
        {"sub": email, "purpose": PASSWORD_RESET_PURPOSE},
        expires_minutes=RESET_TOKEN_EXPIRE_MINUTES,
    )

def read_password_reset_token(token: str) -> Optional[str]:
    """Returns the e-mail the reset token was issued for, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    if payload.get("purpose") != PASSWORD_RESET_PURPOSE:
        return None
    return payload.get("sub")

def format_cost(cost) -> str:
    """15.99 -> '15.99', 4.00 -> '4'"""
    value = Decimal(str(cost)).normalize()
    return format(value, "f")
