from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from voting_bracket.models.user import CallerPayload

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


class AuthManager:
    """Decodes caller tokens issued by the identity provider.

    The token's ``sub`` claim is the caller's stable id; ``username``,
    ``first_name`` and ``last_name`` are optional display claims.
    """

    def __init__(self, jwt_secret, jwt_algorithm):
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm

    def create_access_token(
        self, data: dict, expires_delta: Optional[timedelta] = None
    ):
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(minutes=60 * 24 * 7)
        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(
            to_encode, self.jwt_secret, algorithm=self.jwt_algorithm
        )
        return encoded_jwt

    def get_current_caller(self, token: str = Depends(oauth2_scheme)) -> CallerPayload:
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
            )
            subject = payload.get("sub")
            if subject is None:
                raise credentials_exception

            return CallerPayload(
                user_id=int(subject),
                username=payload.get("username"),
                first_name=payload.get("first_name"),
                last_name=payload.get("last_name"),
            )
        except (JWTError, ValidationError, ValueError):
            raise credentials_exception
