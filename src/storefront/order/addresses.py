"""Order addresses.

An address reaches the order either as a structured record (street, city,
state, postal code, country) or as free text. It is decoded into an
``OrderAddress`` once, when the order is placed, and kept tagged with its
kind so that display code never has to guess at the shape of a string.
"""

import json
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String, Text

from storefront.domain import storefront

MIN_PHONE_LENGTH = 8


class AddressKind(Enum):
    STRUCTURED = "Structured"
    RAW = "Raw"


@storefront.value_object(part_of="Order")
class OrderAddress:
    """A shipping or billing address as captured on the order.

    Once recorded it never changes, even if the customer later moves.
    """

    kind = String(required=True, choices=AddressKind)
    street = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)
    text = Text()
    phone = String(max_length=30)

    @invariant.post
    def structured_address_must_have_street_city_and_country(self):
        if self.kind == AddressKind.STRUCTURED.value:
            missing = [name for name in ("street", "city", "country") if not getattr(self, name)]
            if missing:
                raise ValidationError({"address": [f"Missing address fields: {', '.join(missing)}"]})

    @invariant.post
    def raw_address_must_have_text(self):
        if self.kind == AddressKind.RAW.value and not (self.text or "").strip():
            raise ValidationError({"address": ["Address text is required"]})

    @invariant.post
    def phone_must_be_long_enough(self):
        if self.phone is not None and len(self.phone.strip()) < MIN_PHONE_LENGTH:
            raise ValidationError({"phone_number": [f"Phone number must be at least {MIN_PHONE_LENGTH} characters"]})

    @property
    def is_structured(self):
        return self.kind == AddressKind.STRUCTURED.value

    def formatted(self) -> str:
        """Single-line rendering for order listings and exports."""
        if self.is_structured:
            locality = " ".join(part for part in (self.state, self.postal_code) if part)
            parts = [self.street, self.city, locality, self.country]
        else:
            parts = [self.text.strip()]

        if self.phone:
            parts.append(f"Phone: {self.phone.strip()}")
        return ", ".join(part for part in parts if part)

    def to_dict(self) -> dict:
        if self.is_structured:
            return {
                "kind": "structured",
                "street": self.street,
                "city": self.city,
                "state": self.state,
                "postal_code": self.postal_code,
                "country": self.country,
                "phone": self.phone,
            }
        return {"kind": "raw", "text": self.text, "phone": self.phone}


def decode_address(value, phone=None, field="shipping_address"):
    """Turn address input into an ``OrderAddress``.

    ``value`` may be a JSON string, a dict tagged with ``kind``, a dict with
    structured fields, or plain text. ``phone`` overrides any phone number
    carried inside the address. Returns None for empty input.
    """
    if value is None:
        return None
    if isinstance(value, OrderAddress):
        return value

    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            value = json.loads(stripped)
        except ValueError:
            value = stripped
        if not isinstance(value, (dict, str)):
            value = stripped

    phone = phone.strip() if isinstance(phone, str) and phone.strip() else None

    if isinstance(value, str):
        return OrderAddress(kind=AddressKind.RAW.value, text=value, phone=phone)

    if not isinstance(value, dict):
        raise ValidationError({field: ["Address must be text or an object"]})

    kind = str(value.get("kind") or "").lower()
    phone = phone or value.get("phone") or value.get("phone_number")
    if kind == "raw" or (not kind and "text" in value and "street" not in value):
        return OrderAddress(kind=AddressKind.RAW.value, text=value.get("text"), phone=phone)

    return OrderAddress(
        kind=AddressKind.STRUCTURED.value,
        street=value.get("street"),
        city=value.get("city"),
        state=value.get("state"),
        postal_code=value.get("postal_code") or value.get("zip_code"),
        country=value.get("country"),
        phone=phone,
    )
