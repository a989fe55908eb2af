from fastapi import APIRouter, HTTPException, status, Depends
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from jose import JWTError
from pydantic import BaseModel, EmailStr, Field
from datetime import timedelta
from typing import Optional

from core.config import settings
from core.security import create_access_token, decode_token, verify_password, get_password_hash
from core.database import db
from models.user import User, UserPublic
from bson import ObjectId
from bson.errors import InvalidId

router = APIRouter(prefix="/auth", tags=["Auth"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

class Token(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str

class RefreshTokenRequest(BaseModel):
    refresh_token: str

class UserCreate(BaseModel):
    full_name: str = "Habit Builder"
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)

def _credentials_exception():
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

async def _find_user(user_id: str):
    try:
        return await db.users.find_one({"_id": ObjectId(user_id)})
    except InvalidId:
        return None

async def get_current_user(token: str = Depends(oauth2_scheme)) -> User:
    """Identity collaborator: resolves the bearer token to the signed-in user."""
    credentials_exception = _credentials_exception()
    try:
        payload = decode_token(token)
        user_id: str = payload.get("sub")
        if user_id is None or payload.get("refresh"):
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user_data = await _find_user(user_id)
    if user_data is None:
        raise credentials_exception
    user = User(**user_data)
    if not user.is_active:
        raise HTTPException(status_code=400, detail="User account is disabled.")
    return user

@router.post("/register", response_model=UserPublic, status_code=201)
async def register(user_in: UserCreate):
    if await db.users.find_one({"email": user_in.email}):
        raise HTTPException(status_code=400, detail="Email already registered")
    if await db.users.find_one({"username": user_in.username}):
        raise HTTPException(status_code=400, detail="Username already exists")

    new_user = User(
        full_name=user_in.full_name,
        username=user_in.username,
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
    )
    result = await db.users.insert_one(new_user.model_dump(by_alias=True, exclude={"id"}))
    new_user.id = str(result.inserted_id)
    return new_user

@router.post("/login", response_model=Token)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    remember_me: bool = False
):
    user_data = await db.users.find_one({"username": form_data.username})
    if not user_data or not verify_password(form_data.password, user_data["hashed_password"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = User(**user_data)
    if not user.is_active:
        raise HTTPException(status_code=400, detail="User account is disabled.")

    access_token = create_access_token(
        subject=user.id, expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    # remember_me keeps the refresh token for REFRESH_TOKEN_EXPIRE_DAYS, otherwise one day
    refresh_expires_days = settings.REFRESH_TOKEN_EXPIRE_DAYS if remember_me else 1
    refresh_token = create_access_token(
        subject=user.id, expires_delta=timedelta(days=refresh_expires_days), refresh=True
    )

    return {"access_token": access_token, "refresh_token": refresh_token, "token_type": "bearer"}

@router.post("/refresh", response_model=Token)
async def refresh_token_endpoint(request: RefreshTokenRequest):
    refresh_token = request.refresh_token
    credentials_exception = _credentials_exception()
    try:
        payload = decode_token(refresh_token)
        user_id: str = payload.get("sub")
        if user_id is None or not payload.get("refresh", False):
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    if not await _find_user(user_id):
        raise credentials_exception

    access_token = create_access_token(
        subject=user_id, expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "refresh_token": refresh_token, "token_type": "bearer"}

@router.get("/me", response_model=UserPublic)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user
