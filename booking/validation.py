"""Input cleaning shared by the stores, the orchestrator and the routes.

Every helper either returns a normalized value or raises ``ValidationError``
with a message fit to show the person who typed the input.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from booking.errors import ValidationError

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

CENT = Decimal("0.01")


def parse_date(value) -> date:
    if isinstance(value, date):
        return value
    raw = (value or "").strip() if isinstance(value, str) else ""
    if not DATE_RE.match(raw):
        raise ValidationError("Invalid date. Use YYYY-MM-DD", field="date")
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError("Invalid date. Use YYYY-MM-DD", field="date")


def parse_time_label(value) -> str:
    raw = (value or "").strip() if isinstance(value, str) else ""
    if not TIME_RE.match(raw):
        raise ValidationError("Invalid time. Use HH:MM (24h)", field="time")
    return raw


def parse_grid(value) -> tuple:
    """Turn a comma-separated string or a sequence into a validated slot grid."""
    if isinstance(value, str):
        labels = [part.strip() for part in value.split(",") if part.strip()]
    else:
        labels = list(value or [])
    if not labels:
        raise ValidationError("Slot grid must not be empty", field="grid")

    grid = tuple(parse_time_label(label) for label in labels)
    # HH:MM labels sort lexically in clock order
    if any(a >= b for a, b in zip(grid, grid[1:])):
        raise ValidationError("Slot grid must be unique and in ascending order", field="grid")
    return grid


def required_text(data: dict, field: str, max_len: int = 255) -> str:
    value = data.get(field)
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(f"{field} is required", field=field)
    if len(text) > max_len:
        raise ValidationError(f"{field} is too long", field=field)
    return text


def optional_text(data: dict, field: str, max_len: int = 2000):
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be text", field=field)
    text = value.strip()
    if len(text) > max_len:
        raise ValidationError(f"{field} is too long", field=field)
    return text or None


def parse_price(value) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError("price must be a number", field="price")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("price must be a number", field="price")
    if not price.is_finite() or price < 0:
        raise ValidationError("price must be zero or positive", field="price")
    return price.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_duration(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("duration_min must be a whole number of minutes", field="duration_min")
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ValidationError("duration_min must be a whole number of minutes", field="duration_min")
    if minutes != value and str(minutes) != str(value).strip():
        raise ValidationError("duration_min must be a whole number of minutes", field="duration_min")
    if minutes <= 0:
        raise ValidationError("duration_min must be positive", field="duration_min")
    return minutes


def _reject_unknown(data: dict, allowed) -> None:
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(unknown)}", fields=unknown)


SERVICE_FIELDS = ("title", "description", "price", "duration_min", "image_url")
PROFESSIONAL_FIELDS = ("name", "specialty", "bio", "photo_url")
APPOINTMENT_EDIT_FIELDS = ("client_name", "client_phone", "date", "time", "professional_id", "service_id")
SITE_CONFIG_FIELDS = ("hero_image_url", "contact_phone", "address")


def clean_service(data: dict, partial: bool = False) -> dict:
    if not isinstance(data, dict):
        raise ValidationError("Expected an object")
    _reject_unknown(data, SERVICE_FIELDS)

    out = {}
    if not partial or "title" in data:
        out["title"] = required_text(data, "title", 160)
    if "description" in data:
        out["description"] = optional_text(data, "description")
    if not partial or "price" in data:
        out["price"] = parse_price(data.get("price", 0))
    if not partial or "duration_min" in data:
        out["duration_min"] = parse_duration(data.get("duration_min"))
    if "image_url" in data:
        out["image_url"] = optional_text(data, "image_url", 500)
    return out


def clean_professional(data: dict, partial: bool = False) -> dict:
    if not isinstance(data, dict):
        raise ValidationError("Expected an object")
    _reject_unknown(data, PROFESSIONAL_FIELDS)

    out = {}
    if not partial or "name" in data:
        out["name"] = required_text(data, "name", 120)
    if not partial or "specialty" in data:
        out["specialty"] = required_text(data, "specialty", 160)
    if "bio" in data:
        out["bio"] = optional_text(data, "bio")
    if "photo_url" in data:
        out["photo_url"] = optional_text(data, "photo_url", 500)
    return out


def clean_appointment_patch(data: dict) -> dict:
    if not isinstance(data, dict):
        raise ValidationError("Expected an object")
    if "status" in data:
        raise ValidationError("Use the status endpoint to change status", field="status")
    _reject_unknown(data, APPOINTMENT_EDIT_FIELDS)

    out = {}
    if "client_name" in data:
        out["client_name"] = required_text(data, "client_name", 120)
    if "client_phone" in data:
        out["client_phone"] = required_text(data, "client_phone", 40)
    if "date" in data:
        out["date"] = parse_date(data["date"])
    if "time" in data:
        out["time"] = parse_time_label(data["time"])
    if "professional_id" in data:
        out["professional_id"] = required_text(data, "professional_id", 32)
    if "service_id" in data:
        out["service_id"] = required_text(data, "service_id", 32)
    return out


def clean_site_config(data: dict) -> dict:
    if not isinstance(data, dict):
        raise ValidationError("Expected an object")
    _reject_unknown(data, SITE_CONFIG_FIELDS)
    return {
        "hero_image_url": required_text(data, "hero_image_url", 500),
        "contact_phone": optional_text(data, "contact_phone", 40),
        "address": optional_text(data, "address", 255),
    }
