from fastapi import APIRouter, Depends, HTTPException, status, Response
from fastapi.responses import RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from typing import Any
from urllib.parse import urlencode

from app.database import get_db
from app.crud import user as crud_user
from app.utils.utils import verify_password, create_access_token
from app.schemas.user import UserLogin
from config import ACCESS_TOKEN_EXPIRE_MINUTES, GOOGLE_CLIENT_ID, GOOGLE_REDIRECT_URI

router = APIRouter(tags=["login"])

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"


def set_session_cookie(response: Response, access_token: str):
    response.set_cookie(
        key="access_token",
        value=f"{access_token}",
        httponly=True,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        expires=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
        secure=False # Set to True in production (HTTPS)
    )


def _authenticate(db: Session, email: str, password: str):
    user = crud_user.get_user_by_email(db, email=email)
    if not user or not verify_password(password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.post("/login", response_model=Any)
def login_for_access_token(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    user = _authenticate(db, form_data.username, form_data.password)
    access_token = create_access_token(data={"sub": user.email})
    set_session_cookie(response, access_token)
    return {"access_token": access_token, "token_type": "bearer", "user_id": user.id}

@router.post("/login/json", response_model=Any)
def login_json(
    response: Response,
    login_data: UserLogin,
    db: Session = Depends(get_db)
):
    """
    JSON-based login for API clients that prefer JSON body over Form Data.
    """
    user = _authenticate(db, login_data.email, login_data.password)
    access_token = create_access_token(data={"sub": user.email})
    set_session_cookie(response, access_token)
    return {"access_token": access_token, "token_type": "bearer", "user_id": user.id}

@router.post("/login/logout")
def logout(response: Response):
    """
    Logout the user by clearing the access_token cookie.
    """
    response.delete_cookie("access_token")
    return {"message": "Logged out successfully"}

@router.get("/login/google")
def google_sign_in():
    """
    Starts Google sign-in by redirecting to the provider.
    The callback is handled by the identity provider integration, not here.
    """
    if not GOOGLE_CLIENT_ID:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google sign-in is not configured"
        )
    params = {
        "client_id": GOOGLE_CLIENT_ID,
        "redirect_uri": GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": "openid email profile",
        "access_type": "offline",
        "prompt": "consent",
    }
    return RedirectResponse(f"{GOOGLE_AUTH_URL}?{urlencode(params)}")
