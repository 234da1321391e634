"""
Client payload validation.

Pure functions over a mapping of the fields the caller actually supplied.
An empty error list means the payload may be written.
"""
import re
from typing import Any, Dict, List, Mapping, Optional

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_RE = re.compile(r"[0-9+()\-.\s]{7,20}")

NAME_MAX_LENGTH = 100
OPTIONAL_TEXT_FIELDS = ("email", "phone", "address")


def normalize_status(value: Any) -> str:
    """Only a case-insensitive 'inactive' stays inactive; everything else is active."""
    if value is None:
        return "active"
    return "inactive" if str(value).strip().lower() == "inactive" else "active"


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _check_contact(payload: Mapping[str, Any], errors: List[str]) -> None:
    email = payload.get("email")
    if email and not EMAIL_RE.fullmatch(str(email)):
        errors.append("invalid email")
    phone = payload.get("phone")
    if phone and not PHONE_RE.fullmatch(str(phone)):
        errors.append("invalid phone")


def validate_create(payload: Mapping[str, Any]) -> List[str]:
    errors: List[str] = []
    name = payload.get("name")
    if _blank(name):
        errors.append("name required")
    elif len(str(name).strip()) > NAME_MAX_LENGTH:
        errors.append("name too long")
    _check_contact(payload, errors)
    return errors


def validate_update(payload: Mapping[str, Any]) -> List[str]:
    """Same rules as create, applied only to keys present in the payload."""
    errors: List[str] = []
    if "name" in payload:
        name = payload["name"]
        if _blank(name):
            errors.append("name required if provided")
        elif len(str(name).strip()) > NAME_MAX_LENGTH:
            errors.append("name too long")
    _check_contact(payload, errors)
    return errors


def _optional_text(value: Any) -> Optional[str]:
    return str(value) if value else None


def clean_create(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Row values for a validated create payload."""
    fields = {
        "name": str(payload["name"]).strip(),
        "status": normalize_status(payload.get("status")),
    }
    for key in OPTIONAL_TEXT_FIELDS:
        fields[key] = _optional_text(payload.get(key))
    return fields


def clean_update(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Row values for a validated partial update.

    Only supplied keys come back. An empty email/phone/address clears the column.
    """
    fields: Dict[str, Any] = {}
    if "name" in payload:
        fields["name"] = str(payload["name"]).strip()
    if "status" in payload:
        fields["status"] = normalize_status(payload["status"])
    for key in OPTIONAL_TEXT_FIELDS:
        if key in payload:
            fields[key] = _optional_text(payload[key])
    return fields
