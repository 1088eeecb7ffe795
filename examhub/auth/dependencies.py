from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from ..database import get_storage
from ..models.core import Account, Student
from ..schemas.auth import TokenData
from ..storage.base import Storage
from .security import decode_access_token, verify_password


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def authenticate_account(storage: Storage, email: str, password: str) -> Account | None:
    account = storage.get_account_by_email(email)
    if not account or not verify_password(password, account.password):
        return None
    return account


def get_token_data(token: str = Depends(oauth2_scheme)) -> TokenData:
    token_data = decode_access_token(token)
    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token_data


def get_current_account(
    token_data: TokenData = Depends(get_token_data),
    storage: Storage = Depends(get_storage),
) -> Account:
    # the id survives an email change, the email claim does not
    if token_data.account_id is not None:
        account = storage.get_account(token_data.account_id)
    else:
        account = storage.get_account_by_email(token_data.email)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return account


def require_admin(current_account: Account = Depends(get_current_account)) -> Account:
    if current_account.role != "admin" and not current_account.is_admin:
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return current_account


def get_current_student(
    token_data: TokenData = Depends(get_token_data),
    storage: Storage = Depends(get_storage),
) -> Student:
    if token_data.role != "student" or token_data.student_id is None:
        raise HTTPException(status_code=403, detail="Student access required")
    student = storage.get_student(token_data.student_id)
    if student is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Student not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return student
