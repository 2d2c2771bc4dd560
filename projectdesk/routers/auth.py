from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from projectdesk.database import get_db
from projectdesk.errors import Unauthorized
from projectdesk.schemas.user import UserLogin
from projectdesk.schemas.tokens import Token
from projectdesk.utils.auth import authenticate_user
from projectdesk.utils.security import create_user_token

router = APIRouter()


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise Unauthorized("Invalid email or password")

    return {
        "message": "Login successful",
        "access_token": create_user_token(user),
        "token_type": "bearer",
        "user": user,
    }
