from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from ..auth.dependencies import authenticate_account, get_current_account, require_admin
from ..auth.security import ACCESS_TOKEN_EXPIRE_MINUTES, create_access_token, get_password_hash
from ..database import get_storage
from ..models.core import Account, NotificationPreferences
from ..schemas.auth import AccountCreate, AccountOut, AccountUpdate, StudentLoginRequest, Token
from ..storage.base import Storage
from ..storage.errors import DuplicateEmailError

router = APIRouter()


def _token_for(account: Account) -> Token:
    claims = {"sub": account.email, "role": account.role, "account_id": account.id}
    if account.student_id is not None:
        claims["student_id"] = account.student_id
    access_token = create_access_token(
        data=claims, expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return Token(access_token=access_token)


@router.post("/register", response_model=AccountOut)
def register_account(
    payload: AccountCreate,
    storage: Storage = Depends(get_storage),
    _: Account = Depends(require_admin),
):
    if payload.student_id is not None and storage.get_student(payload.student_id) is None:
        raise HTTPException(status_code=400, detail="Linked student does not exist")

    preferences = payload.notification_preferences
    if preferences is None and payload.role == "student":
        preferences = NotificationPreferences(
            email_exam_results=True,
            email_upcoming_exams=True,
            sms_exam_results=False,
            sms_upcoming_exams=False,
        )

    data = payload.model_dump(exclude={"password", "notification_preferences"})
    data.update(
        password=get_password_hash(payload.password),
        is_admin=payload.role == "admin",
        notification_preferences=preferences or NotificationPreferences(),
    )
    try:
        return storage.create_account(data)
    except DuplicateEmailError:
        raise HTTPException(status_code=400, detail="Email already exists")


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    storage: Storage = Depends(get_storage),
):
    account = authenticate_account(storage, form_data.username, form_data.password)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_for(account)


@router.post("/student/login", response_model=Token)
def student_login(payload: StudentLoginRequest, storage: Storage = Depends(get_storage)):
    student = storage.authenticate_student(payload.email, payload.password)
    if not student:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    access_token = create_access_token(
        data={"sub": student.email, "role": "student", "student_id": student.id}
    )
    return Token(access_token=access_token)


@router.get("/me", response_model=AccountOut)
def read_me(current_account: Account = Depends(get_current_account)):
    return current_account


@router.patch("/me", response_model=AccountOut)
def update_me(
    payload: AccountUpdate,
    current_account: Account = Depends(get_current_account),
    storage: Storage = Depends(get_storage),
):
    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not data:
        return current_account
    try:
        return storage.update_account(current_account.id, data)
    except DuplicateEmailError:
        raise HTTPException(status_code=400, detail="Email already exists")
