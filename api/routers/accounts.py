"""Signup, login and profile endpoints for company and self-employed accounts."""
from __future__ import annotations

from fastapi import APIRouter, Body

from api.core.errors import ValidationError
from api.db.models import AccountKind
from api.services.account_service import AccountService, parse_kind

router = APIRouter(prefix="/api", tags=["accounts"])
account_service = AccountService()


def _echo(payload: dict) -> dict:
    return {key: value for key, value in payload.items() if key != "password"}


def _signup(kind: AccountKind, payload: dict) -> dict:
    account_service.signup(kind, payload)
    return {
        "success": True,
        "message": f"{kind.label} signed up successfully",
        "received": _echo(payload),
    }


@router.post("/company/signup")
def company_signup(payload: dict = Body(...)):
    return _signup(AccountKind.COMPANY, payload)


@router.post("/self-employed/signup")
def self_employed_signup(payload: dict = Body(...)):
    return _signup(AccountKind.SELF_EMPLOYED, payload)


@router.post("/login")
def login(payload: dict = Body(...)):
    result = account_service.login(payload.get("business_email"), payload.get("password"))
    return {
        "success": True,
        "message": "Login successful",
        "user": result.account.to_public_dict(),
        "type": result.kind.value,
    }


@router.post("/user/update")
def update_user(payload: dict = Body(...)):
    kind = parse_kind(payload.get("type"))
    account = account_service.update(kind, payload.get("business_email"), payload.get("updates"))
    return {"success": True, "message": "Profile updated successfully", "user": account.to_public_dict()}


@router.get("/user/profile")
def get_profile(type: str = "", business_email: str = ""):
    if not type or not business_email:
        raise ValidationError("type and business_email are required")
    account = account_service.get_profile(parse_kind(type), business_email)
    return {"success": True, "user": account.to_public_dict()}


@router.get("/users")
def list_users():
    accounts = account_service.list_accounts()
    return {
        "success": True,
        "companies": [a.to_public_dict() for a in accounts[AccountKind.COMPANY]],
        "self_employed": [a.to_public_dict() for a in accounts[AccountKind.SELF_EMPLOYED]],
    }


@router.delete("/user/delete")
def delete_user(payload: dict = Body(...)):
    if not payload.get("business_email") or not payload.get("type"):
        raise ValidationError("business_email and type are required")
    kind = parse_kind(payload.get("type"))
    account_service.delete(kind, payload.get("business_email"))
    return {"success": True, "message": f"{kind.label} deleted successfully"}
