from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.orm import Session

from app.utils.utils import create_access_token
from app.database import get_db
from app.schemas.user import UserCreate, UserResponse, UserSignupResponse
from app.crud import user as crud_user
from app.crud import user_plan as crud_user_plan
from app.models.user import User
from app.api.auth import get_current_user
from app.api.login import set_session_cookie

router = APIRouter(prefix="/users", tags=["users"])

# POST - Signup (Create new user + Login)
# Password length and confirmation are checked by UserCreate before we get here.
@router.post("/signup", response_model=UserSignupResponse, status_code=status.HTTP_201_CREATED)
def signup(
    response: Response,
    user: UserCreate,
    db: Session = Depends(get_db)
):
    # Check if email already exists
    db_user = crud_user.get_user_by_email(db, email=user.email)
    if db_user:
        raise HTTPException(
            status_code=400,
            detail="Email already registered"
        )

    # Create user, every account starts on the free plan
    new_user = crud_user.create_user(db=db, user=user)
    crud_user_plan.get_or_create_plan(db, new_user.id)

    # Generate Token
    access_token = create_access_token(
        data={"sub": new_user.email}
    )
    set_session_cookie(response, access_token)

    return {
        "user": new_user,
        "access_token": access_token,
        "token_type": "bearer"
    }

# GET - Get current user
@router.get("/me", response_model=UserResponse)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user

# DELETE - Delete current user
@router.delete("/me")
def delete_me(
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    crud_user.delete_user(db, user_id=current_user.id)
    response.delete_cookie("access_token")
    return {"message": "User deleted successfully"}
