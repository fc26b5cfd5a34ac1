import re
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.crud import user as crud_user
from app.schemas.user import EMAIL_REGX, EmailExistsResponse, PasswordResetRequest, PasswordUpdate
from app.services.email_service import email_service
from app.utils.utils import create_password_reset_token, read_password_reset_token
from config import FRONTEND_URL

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

NO_ACCOUNT_MESSAGE = (
    "No account found with this email address. "
    "Please check your email or create a new account."
)


@router.get("/email-exists", response_model=EmailExistsResponse)
def email_exists(email: str = Query(...), db: Session = Depends(get_db)):
    """
    Existence probe used by the reset form before it enables submission.
    Note: this discloses which addresses have accounts.
    """
    email = email.strip().lower()
    if not re.match(EMAIL_REGX, email):
        return {"email": email, "valid": False, "exists": False}
    return {"email": email, "valid": True, "exists": crud_user.get_user_by_email(db, email) is not None}


@router.post("/reset-password")
def reset_password(request: PasswordResetRequest, db: Session = Depends(get_db)):
    user = crud_user.get_user_by_email(db, request.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NO_ACCOUNT_MESSAGE)

    token = create_password_reset_token(user.email)
    reset_link = f"{FRONTEND_URL}/reset-password?token={token}"
    if not email_service.send_password_reset(user.email, reset_link):
        logger.warning(f"Password reset e-mail for {user.email} was not delivered")

    return {"message": "Password reset email sent"}


@router.post("/update-password")
def update_password(payload: PasswordUpdate, db: Session = Depends(get_db)):
    email = read_password_reset_token(payload.token)
    if not email:
        raise HTTPException(status_code=400, detail="Reset link is invalid or has expired")

    user = crud_user.get_user_by_email(db, email)
    if not user:
        raise HTTPException(status_code=400, detail="Reset link is invalid or has expired")

    crud_user.update_password(db, user, payload.password)
    return {"message": "Password updated successfully"}
