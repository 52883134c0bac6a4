from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from book_recommender.core.database import get_db
from book_recommender.schemas.user import LoginRequest, LoginResult, UserCreate
from book_recommender.services import user_service

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db),
):
    """Register a new user."""
    if not user_service.register_user(db, user_data):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username, email or national id already registered",
        )
    return {"username": user_data.username}


@router.post("/login", response_model=LoginResult)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
):
    """Check a username and credential pair."""
    if not user_service.authenticate(db, credentials.username, credentials.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )
    return LoginResult(authenticated=True)


@router.get("/{username}/exists")
def username_exists(
    username: str,
    db: Session = Depends(get_db),
):
    return {"exists": user_service.username_exists(db, username)}
