# dailyspend/helpers.py
import re
from datetime import date, datetime

DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y", "%Y/%m/%d", "%d/%m/%Y"]
ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
PIN_RE = re.compile(r"[0-9]{6}")

MAX_AMOUNT = 10_000_000


def today():
    return date.today()


def parse_date(s):
    """Try multiple date formats, returns a date or None"""
    if not s:
        return None
    s = str(s).strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(s).date()
    except ValueError:
        return None


def parse_iso_date(s):
    """Strict YYYY-MM-DD parsing for query bounds."""
    if not isinstance(s, str) or not ISO_DATE_RE.fullmatch(s.strip()):
        return None
    try:
        return datetime.strptime(s.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def is_valid_pin(pin):
    return isinstance(pin, str) and bool(PIN_RE.fullmatch(pin))


def parse_amount(value, allow_zero=False):
    """Returns (amount, error)."""
    if isinstance(value, bool):
        return None, "Invalid amount format"
    amount_str = str(value).strip()
    try:
        amount = float(amount_str)
    except ValueError:
        return None, "Invalid amount format"
    if amount != amount or amount in (float("inf"), float("-inf")):
        return None, "Invalid amount format"
    if amount < 0 or (amount == 0 and not allow_zero):
        return None, "Amount must be a positive number"
    if amount > MAX_AMOUNT:
        return None, f"Amount too large: {amount}"
    return amount, None


def parse_int(value):
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def get_json_body(request):
    """Returns (payload, error). The payload must be a JSON object."""
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return None, "Request body must be a JSON object"
    return data, None
