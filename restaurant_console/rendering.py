"""Rendering helpers for restaurant, menu and notification panes."""

from __future__ import annotations

from datetime import datetime, timezone

from rich.text import Text

from restaurant_console.models import MenuItem, Notification, Restaurant

RESTAURANT_FIELDS: list[tuple[str, str]] = [
    ("name", "Name"),
    ("phone_number", "Phone"),
    ("opening_hours", "Opening hours"),
    ("gstin", "GSTIN"),
    ("fssai", "FSSAI"),
    ("rating", "Rating"),
    ("address.street_address", "Street"),
    ("address.city", "City"),
    ("address.state", "State"),
    ("address.pincode", "Pincode"),
    ("address.landmark", "Landmark"),
    ("address.latitude", "Latitude"),
    ("address.longitude", "Longitude"),
]

MENU_FIELDS: list[tuple[str, str]] = [
    ("name", "Name"),
    ("description", "Description"),
    ("price", "Price"),
    ("ratings", "Ratings"),
    ("discounts", "Discounts"),
    ("image_link", "Image"),
]


def badge_style(mode: str) -> str:
    """Return a consistent badge style for mode tags."""
    if mode == "EDIT":
        return "bold #ffffff on #b23a48"
    if mode == "NEW":
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def field_value(entity: object, path: str) -> object:
    """Read a possibly ``address.``-prefixed attribute, None when missing."""
    target = entity
    for part in path.split("."):
        if target is None:
            return None
        target = getattr(target, part, None)
    return target


def format_money(amount: float) -> str:
    return f"${amount:.2f}"


def format_timestamp(value: str | int | float) -> str:
    """Human readable event time; epoch numbers are milliseconds."""
    try:
        if isinstance(value, (int, float)):
            moment = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        else:
            moment = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return str(value)
    return moment.strftime("%b %d, %Y, %I:%M %p")


def format_restaurant(restaurant: Restaurant, editing: bool, cursor: int | None = None) -> Text:
    text = Text()
    mode = "EDIT" if editing else "VIEW"
    text.append(mode, style=badge_style(mode))
    text.append(f" {restaurant.name or '(unnamed)'}", style="bold")

    for idx, (path, label) in enumerate(RESTAURANT_FIELDS):
        value = field_value(restaurant, path)
        pointer = "➤ " if editing and idx == cursor else "  "
        text.append(f"\n{pointer}{label}: ")
        text.append("" if value is None else str(value), style="white")
    return text


def format_menu_row(item: MenuItem, editing: bool, field_cursor: int | None = None) -> Text:
    text = Text()
    if editing:
        text.append("EDIT", style=badge_style("EDIT"))
        text.append(" ")
    text.append(item.name, style="bold")
    text.append(f"  {format_money(item.price)}")
    if item.discounts:
        text.append(f"  -{item.discounts:g}%", style="green")
    if item.ratings:
        text.append(f"  ★ {item.ratings:g}", style="yellow")
    if item.description:
        text.append(f"\n      {item.description}", style="dim")

    if editing:
        for idx, (path, label) in enumerate(MENU_FIELDS):
            pointer = "➤ " if idx == field_cursor else "  "
            text.append(f"\n      {pointer}{label}: {field_value(item, path)}")
    return text


def format_notifications(notifications: tuple[Notification, ...], cursor: int | None = None) -> Text | None:
    """Render the notification panel, or None when there is nothing to show."""
    if not notifications:
        return None

    text = Text()
    text.append(f"🔔 New Orders ({len(notifications)})", style="bold")
    for idx, notification in enumerate(notifications):
        pointer = "➤ " if idx == cursor else "  "
        text.append(f"\n{pointer}{notification.message}", style="bold #ffd866")
        text.append(f"\n    Total: {format_money(notification.order.total)}")
        text.append(f"\n    {format_timestamp(notification.timestamp)}", style="dim")
    return text
