# parkwatch/routers/auth.py
"""Login / logout for residents and visitors, plus staff (admin) login."""

from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from parkwatch.database import get_db
from parkwatch.errors import Unauthorized
from parkwatch.schemas.user import StaffLogin, UserLogin, UserOut
from parkwatch.services import auth_service
from parkwatch.services.session_store import SessionStore, get_session_store, new_session_token

router = APIRouter()


def current_user_id(
    x_session_token: Optional[str] = Header(None),
    store: SessionStore = Depends(get_session_store),
) -> int:
    """Resolve the caller from the X-Session-Token header."""
    user_id = store.get(x_session_token) if x_session_token else None
    if user_id is None:
        raise Unauthorized("Not logged in")
    return user_id


@router.post("/login", summary="Resident / visitor login")
def login(body: UserLogin, db: Session = Depends(get_db),
          store: SessionStore = Depends(get_session_store)):
    user = auth_service.authenticate(db, body.phone, body.password)
    token = new_session_token()
    store.set(token, user.id)
    return {"success": True, "token": token, "user": UserOut.model_validate(user)}


@router.post("/logout", summary="End the current session")
def logout(x_session_token: Optional[str] = Header(None),
           store: SessionStore = Depends(get_session_store)):
    if x_session_token:
        store.clear(x_session_token)
    return {"success": True}


@router.get("/me", summary="Currently logged-in user")
def me(user_id: int = Depends(current_user_id), db: Session = Depends(get_db)):
    return {"success": True, "user": UserOut.model_validate(auth_service.get_user(db, user_id))}


@router.post("/admin/login", summary="Staff login by staff ID")
def admin_login(body: StaffLogin, db: Session = Depends(get_db),
                store: SessionStore = Depends(get_session_store)):
    staff, user = auth_service.authenticate_staff(db, body.staff_id, body.password)
    token = new_session_token()
    store.set(token, user.id)
    return {"success": True, "token": token,
            "data": {"staffId": staff.staff_id, "name": user.name, "lotId": staff.lot_id}}
