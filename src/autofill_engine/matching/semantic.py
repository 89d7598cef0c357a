"""Best-effort guess of what kind of personal data a field expects."""

from __future__ import annotations

from typing import Optional, Tuple

from ..core.dom import input_type
from ..core.models import FieldDescriptor

INPUT_TYPE_HINTS = {
    "email": "email",
    "tel": "phone",
    "password": "password",
    "url": "url",
    "date": "birthday",
}

AUTOCOMPLETE_HINTS = {
    "email": "email",
    "tel": "phone",
    "given-name": "name",
    "family-name": "name",
    "name": "name",
    "street-address": "address",
    "address-line1": "address",
    "address-line2": "address",
    "locality": "city",
    "address-level2": "city",
    "region": "state",
    "address-level1": "state",
    "postal-code": "zip",
    "country": "country",
    "cc-number": "creditcard",
    "cc-csc": "cvv",
    "cc-exp": "expiry",
    "username": "username",
    "current-password": "password",
    "new-password": "password",
    "bday": "birthday",
}

# Checked in order; the first group with a keyword in the field text wins.
KEYWORD_HINTS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("email", ("email", "e-mail", "mail", "@")),
    ("phone", ("phone", "tel", "mobile", "cell", "contact", "number")),
    ("name", ("name", "full name", "first name", "last name", "given", "family", "surname")),
    ("address", ("address", "street", "addr", "location", "residence")),
    ("city", ("city", "town", "locality", "municipality")),
    ("state", ("state", "province", "region", "prefecture")),
    ("zip", ("zip", "postal", "postcode", "zipcode", "post code")),
    ("country", ("country", "nation", "nationality")),
    ("birthday", ("birth", "birthday", "born", "dob", "date of birth", "age")),
    ("creditcard", ("card", "credit", "payment", "cc-number", "cardnumber")),
    ("expiry", ("expiry", "expiration", "exp", "expires", "valid")),
)

DEFAULT_SEMANTIC_TYPE = "text"


def autocomplete_hint(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    # "shipping postal-code" style tokens carry the field name last
    parts = token.strip().lower().split()
    if not parts:
        return None
    return AUTOCOMPLETE_HINTS.get(parts[-1])


def infer_semantic_type(field: FieldDescriptor) -> str:
    hint = INPUT_TYPE_HINTS.get(input_type(field.element))
    if hint:
        return hint

    hint = autocomplete_hint(field.attributes.get("autocomplete"))
    if hint:
        return hint

    text = " ".join(
        value
        for value in (
            field.attributes.get("name"),
            field.attributes.get("id"),
            field.label,
            field.attributes.get("placeholder"),
            field.attributes.get("aria-label"),
            field.identifier,
        )
        if value
    ).lower()

    for semantic_type, keywords in KEYWORD_HINTS:
        if any(keyword in text for keyword in keywords):
            return semantic_type
    return DEFAULT_SEMANTIC_TYPE
