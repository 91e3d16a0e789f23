"""Domain models for the restaurant console."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field, fields
from typing import Any

WireDict = dict[str, Any]

# Fields typed as numbers on the wire; console input arrives as text.
NUMERIC_FIELDS = {"rating", "price", "ratings", "discounts"}


def _wire_id(data: WireDict) -> str | None:
    raw = data.get("id", data.get("_id"))
    if raw is None:
        return None
    return str(raw)


def parse_number(value: Any) -> float:
    """Convert wire or typed input to a finite float; blank is zero."""
    if value in (None, ""):
        return 0.0
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Not a finite number: {value!r}")
    return number


@dataclass
class Address:
    """Postal address and coordinates of a restaurant."""

    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    landmark: str | None = None
    latitude: str | float | None = None
    longitude: str | float | None = None

    _WIRE_NAMES = {
        "street_address": "streetAddress",
        "city": "city",
        "state": "state",
        "pincode": "pincode",
        "landmark": "landmark",
        "latitude": "latitude",
        "longitude": "longitude",
    }

    @classmethod
    def from_wire(cls, data: WireDict | None) -> Address | None:
        if data is None:
            return None
        return cls(**{attr: data.get(key) for attr, key in cls._WIRE_NAMES.items()})

    def to_wire(self) -> WireDict:
        return {key: getattr(self, attr) for attr, key in self._WIRE_NAMES.items()}


@dataclass
class Restaurant:
    """The single restaurant record owned by the signed-in user."""

    id: str | None
    name: str = ""
    phone_number: str = ""
    opening_hours: str = ""
    gstin: str = ""
    fssai: str = ""
    rating: float | None = None
    address: Address | None = None
    extra: WireDict = field(default_factory=dict)

    _WIRE_NAMES = {
        "name": "name",
        "phone_number": "phoneNumber",
        "opening_hours": "openingHours",
        "gstin": "gstin",
        "fssai": "FSSAI",
        "rating": "rating",
    }

    @classmethod
    def from_wire(cls, data: WireDict) -> Restaurant:
        known = set(cls._WIRE_NAMES.values()) | {"id", "_id", "address"}
        rating = data.get("rating")
        return cls(
            id=_wire_id(data),
            name=data.get("name") or "",
            phone_number=data.get("phoneNumber") or "",
            opening_hours=data.get("openingHours") or "",
            gstin=data.get("gstin") or "",
            fssai=data.get("FSSAI") or "",
            rating=parse_number(rating) if rating not in (None, "") else None,
            address=Address.from_wire(data.get("address")),
            extra={key: value for key, value in data.items() if key not in known},
        )

    def to_wire(self) -> WireDict:
        body: WireDict = dict(self.extra)
        if self.id is not None:
            body["id"] = self.id
        for attr, key in self._WIRE_NAMES.items():
            body[key] = getattr(self, attr)
        body["address"] = self.address.to_wire() if self.address is not None else None
        return body


@dataclass
class MenuItem:
    """A menu row; ``id`` is assigned by the store on creation."""

    id: str | None
    name: str = ""
    description: str = ""
    price: float = 0.0
    ratings: float = 0.0
    discounts: float = 0.0
    image_link: str = ""
    extra: WireDict = field(default_factory=dict)

    _WIRE_NAMES = {
        "name": "name",
        "description": "description",
        "price": "price",
        "ratings": "ratings",
        "discounts": "discounts",
        "image_link": "imageLink",
    }

    @classmethod
    def from_wire(cls, data: WireDict) -> MenuItem:
        known = set(cls._WIRE_NAMES.values()) | {"id", "_id"}
        return cls(
            id=_wire_id(data),
            name=data.get("name") or "",
            description=data.get("description") or "",
            price=parse_number(data.get("price")),
            ratings=parse_number(data.get("ratings")),
            discounts=parse_number(data.get("discounts")),
            image_link=data.get("imageLink") or "",
            extra={key: value for key, value in data.items() if key not in known},
        )

    def to_wire(self) -> WireDict:
        body: WireDict = dict(self.extra)
        if self.id is not None:
            body["id"] = self.id
        for attr, key in self._WIRE_NAMES.items():
            body[key] = getattr(self, attr)
        return body


@dataclass
class MenuItemDraft:
    """Add-item form state."""

    name: str = ""
    description: str = ""
    price: float = 0.0
    ratings: float = 0.0
    discounts: float = 0.0
    image_link: str = ""

    def is_valid(self) -> bool:
        return bool(self.name) and bool(self.description) and math.isfinite(self.price) and self.price > 0

    def set_from_text(self, name: str, text: str) -> None:
        """Store typed form input; a blank answer puts the field back to its default."""
        if name not in {f.name for f in fields(self)}:
            raise ValueError(f"Unknown field: {name}")
        text = text.strip()
        if name in NUMERIC_FIELDS:
            setattr(self, name, parse_number(text))
        else:
            setattr(self, name, text)

    def reset(self) -> None:
        self.name = ""
        self.description = ""
        self.price = 0.0
        self.ratings = 0.0
        self.discounts = 0.0
        self.image_link = ""

    def to_wire(self) -> WireDict:
        return MenuItem(
            id=None,
            name=self.name,
            description=self.description,
            price=self.price,
            ratings=self.ratings,
            discounts=self.discounts,
            image_link=self.image_link,
        ).to_wire()


@dataclass(frozen=True)
class OrderSummary:
    """Order payload embedded in a notification."""

    total: float
    extra: WireDict = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Notification:
    """An order-arrival notice shown until dismissed."""

    id: str
    timestamp: str | int | float
    message: str
    order: OrderSummary

    @property
    def display_key(self) -> tuple[str, str]:
        return (self.id, str(self.timestamp))

    @classmethod
    def from_event(cls, event: WireDict) -> Notification:
        """Build a notification from an order event; raises on a malformed event."""
        order = dict(event["order"])
        total = parse_number(order.pop("total", None))
        return cls(
            id=str(event["id"]),
            timestamp=event["timestamp"],
            message=str(event.get("message") or "New order received"),
            order=OrderSummary(total=total, extra=order),
        )


@dataclass(frozen=True)
class ConsoleSession:
    """Credentials of the signed-in owner, threaded into the store client."""

    restaurant_id: str
    token: str


def set_field(target: Any, name: str, value: Any) -> None:
    """Assign ``value`` to a dataclass field, following ``address.<field>`` paths.

    Text input for numeric fields is converted; an unknown field raises ValueError.
    """
    if "." in name:
        head, _, rest = name.partition(".")
        if head != "address" or not isinstance(target, Restaurant):
            raise ValueError(f"Unknown field: {name}")
        if target.address is None:
            target.address = Address()
        set_field(target.address, rest, value)
        return

    allowed = {f.name for f in fields(target)} - {"id", "extra", "address"}
    if name not in allowed:
        raise ValueError(f"Unknown field: {name}")
    if name in NUMERIC_FIELDS:
        value = parse_number(value)
    setattr(target, name, value)


def snapshot(entity: Any) -> Any:
    """Deep copy used for working copies."""
    return copy.deepcopy(entity)
