"""Field rules for the developer's application form.

``validate`` is pure: it never touches storage or the network and returns a
mapping keyed only by the fields that fail.
"""
from __future__ import annotations
import re
from typing import Dict, Optional

from .assets import validate_archive
from .models import SubmissionDraft

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NON_DIGIT_RE = re.compile(r"[^0-9]")

NAME_MIN, NAME_MAX = 2, 100
LOCATION_MIN, LOCATION_MAX = 2, 100
HOBBIES_MIN, HOBBIES_MAX = 20, 1000
PHONE_DIGITS_MIN, PHONE_DIGITS_MAX = 7, 15


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value or ""))


def is_valid_phone_number(value: str) -> bool:
    digits = NON_DIGIT_RE.sub("", value or "")
    return PHONE_DIGITS_MIN <= len(digits) <= PHONE_DIGITS_MAX


def _check_length(value: str, low: int, high: int, label: str, required_msg: str) -> Optional[str]:
    text = (value or "").strip()
    if not text:
        return required_msg
    if len(text) < low:
        return f"{label} must be at least {low} characters"
    if len(text) > high:
        return f"{label} must be less than {high} characters"
    return None


def _check_hobbies(value: str) -> Optional[str]:
    text = (value or "").strip()
    if not text:
        return "Please tell us about your hobbies and interests"
    if len(text) < HOBBIES_MIN:
        return f"Please provide more detail (at least {HOBBIES_MIN} characters)"
    if len(text) > HOBBIES_MAX:
        return f"Please keep your response under {HOBBIES_MAX} characters"
    return None


def validate(draft: SubmissionDraft) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    msg = _check_length(draft.full_name, NAME_MIN, NAME_MAX, "Full name", "Full name is required")
    if msg:
        errors["full_name"] = msg

    if not (draft.phone_number or "").strip():
        errors["phone_number"] = "Phone number is required"
    elif not is_valid_phone_number(draft.phone_number):
        errors["phone_number"] = "Please enter a valid phone number"

    msg = _check_length(draft.location, LOCATION_MIN, LOCATION_MAX, "Location", "Location is required")
    if msg:
        errors["location"] = msg

    email = (draft.email or "").strip()
    if not email:
        errors["email"] = "Email address is required"
    elif not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"

    msg = _check_hobbies(draft.hobbies)
    if msg:
        errors["hobbies"] = msg

    if draft.profile_image is None:
        errors["profile_image"] = "Profile picture is required"

    if draft.source_archive is None:
        errors["source_archive"] = "Source code file is required"
    else:
        msg = validate_archive(draft.source_archive)
        if msg:
            errors["source_archive"] = msg

    return errors
