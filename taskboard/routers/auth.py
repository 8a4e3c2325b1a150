from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import ids
from ..config import ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY
from ..database import get_db
from ..exceptions import InvalidIdentifier
from ..models import User
from ..schemas.user import AuthResponse, TokenData, User as UserSchema, UserCreate

router = APIRouter()

ALGORITHM = "HS256"
TOKEN_COOKIE = "token"

# bcrypt only looks at the first 72 bytes.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def create_access_token(owner_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token whose subject is the owner id (UUID string)."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return jwt.encode({"sub": owner_id, "exp": expire}, SECRET_KEY, algorithm=ALGORITHM)


def _decode_token(token: str) -> Optional[TokenData]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not subject or not ids.is_valid(subject):
        return None
    return TokenData(owner_id=subject)


def _token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get(TOKEN_COOKIE)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _issue_token(response: Response, user: User) -> dict:
    """Sign a token for ``user``, set it as the session cookie and build the body."""
    access_token = create_access_token(ids.decode(user.id))
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=access_token,
        httponly=True,
        secure=False,  # Set to True in production with HTTPS
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return {"access_token": access_token, "token_type": "bearer", "user": user}


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from a bearer header or the session cookie."""
    token = _token_from_request(request)
    if not token:
        raise _unauthorized("Not authenticated")

    token_data = _decode_token(token)
    if token_data is None:
        raise _unauthorized("Could not validate credentials")

    try:
        user = db.get(User, ids.encode(token_data.owner_id))
    except InvalidIdentifier:
        user = None
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_owner_id(current_user: User = Depends(get_current_user)) -> str:
    """The caller's id as a UUID string; the only source of ownerId."""
    return ids.decode(current_user.id)


@router.post("/signup", response_model=AuthResponse)
def signup(
    user: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    if db.query(User.id).filter(User.email == user.email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    db_user = User(
        id=ids.generate(),
        email=user.email,
        hashed_password=get_password_hash(user.password),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        # same email registered concurrently
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")
    db.refresh(db_user)
    return _issue_token(response, db_user)


@router.post("/signin", response_model=AuthResponse)
def signin(
    user: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    db_user = db.query(User).filter(User.email == user.email).first()
    if db_user is None or not verify_password(user.password, db_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    return _issue_token(response, db_user)


@router.post("/signout")
async def signout(response: Response):
    response.delete_cookie(key=TOKEN_COOKIE)
    return {"success": True}


@router.get("/me", response_model=UserSchema)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user
