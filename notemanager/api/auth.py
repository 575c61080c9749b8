from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from notemanager.config import data_dir
from notemanager.models.auth import LoginRequest, LoginResponse, SignupRequest
from notemanager.storage.users_store import UsersStore
from notemanager.utils.auth_hash import hash_password, verify_password
from notemanager.utils.jwt_auth import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

DATA_DIR = data_dir()
users = UsersStore(DATA_DIR)


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(req: SignupRequest) -> dict:
    if users.exists(req.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")

    try:
        users.create(req.email, hash_password(req.password))
    except FileExistsError:
        # lost a race with a concurrent signup for the same address
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already in use")

    logger.info("user registered: %s", req.email)
    return {"message": "User created successfully"}


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest) -> LoginResponse:
    rec = users.get(req.email)
    if rec is None or not verify_password(req.password, rec.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email or password")

    return LoginResponse(token=create_access_token(rec.email), email=rec.email)
