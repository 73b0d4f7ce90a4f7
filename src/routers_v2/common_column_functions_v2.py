# Common Column Functions V2 - Reusable column descriptors and value formatters for list screens

import datetime
from typing import Any, Dict, List, Optional

from hardcoded_config import TABLE_HARDCODED_CONFIG
from routers_v2.common_table_functions_v2 import Column, resolve_accessor_path
from routers_v2.common_ui_functions_v2 import RawHtml, generate_button, generate_status_badge

NA = TABLE_HARDCODED_CONFIG.MISSING_VALUE_SENTINEL

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "INR": "₹", "JPY": "¥"}

# ----------------------------------------- START: Formatters ----------------------------------------------------------------

def parse_timestamp(value: Any) -> Optional[datetime.datetime]:
  """Parse ISO 8601 strings (with 'Z' suffix) and pass datetime/date through. Invalid input -> None."""
  if value is None or value == "": return None
  if isinstance(value, datetime.datetime): return value
  if isinstance(value, datetime.date): return datetime.datetime(value.year, value.month, value.day)
  if not isinstance(value, str): return None
  text = value.strip()
  if text.endswith("Z"): text = text[:-1] + "+00:00"
  try: return datetime.datetime.fromisoformat(text)
  except ValueError: return None

def format_date(value: Any) -> str:
  """'Mar 5, 2024'"""
  dt = parse_timestamp(value)
  if dt is None: return NA
  return f"{dt:%b} {dt.day}, {dt.year}"

def format_date_time(value: Any) -> str:
  """'Mar 5, 2024 3:07 PM'"""
  dt = parse_timestamp(value)
  if dt is None: return NA
  hour = dt.hour % 12 or 12
  return f"{dt:%b} {dt.day}, {dt.year} {hour}:{dt:%M} {dt:%p}"

def _is_number(value: Any) -> bool:
  return isinstance(value, (int, float)) and not isinstance(value, bool) and value == value

def format_number_with_unit(value: Any, unit: str = "", decimals: int = 2) -> str:
  """'12.50 kWh'; non-numeric input -> 'N/A'"""
  if not _is_number(value): return NA
  return f"{value:.{decimals}f}" + (f" {unit}" if unit else "")

def format_currency(amount: Any, currency_code: str = "USD") -> str:
  """'$1,234.50' for known symbols, '1,234.50 CHF' otherwise."""
  if not _is_number(amount): return NA
  code = (currency_code or "USD").upper()
  symbol = CURRENCY_SYMBOLS.get(code)
  if symbol is None: return f"{amount:,.2f} {code}"
  sign = "-" if amount < 0 else ""
  return f"{sign}{symbol}{abs(amount):,.2f}"

def format_duration(start: Any, end: Any = None) -> str:
  """Duration between two timestamps: '2h 5m', '45 min'; open sessions show '(ongoing)'."""
  start_dt = parse_timestamp(start)
  if start_dt is None: return NA
  end_dt = parse_timestamp(end)
  ongoing = end_dt is None
  if ongoing:
    end_dt = datetime.datetime.now(start_dt.tzinfo)
  elif (start_dt.tzinfo is None) != (end_dt.tzinfo is None):
    end_dt = end_dt.replace(tzinfo=start_dt.tzinfo)
  total_minutes = max(int((end_dt - start_dt).total_seconds() // 60), 0)
  hours, minutes = divmod(total_minutes, 60)
  text = f"{hours}h {minutes}m" if hours > 0 else f"{minutes} min"
  return f"{text} (ongoing)" if ongoing else text

def format_status(status: Any) -> str:
  """'IN_PROGRESS' -> 'In Progress'"""
  if not status: return NA
  return " ".join(word.capitalize() for word in str(status).replace("_", " ").split())

def get_status_variant(status: Any) -> str:
  """Map a status text to a badge variant: success, warning, danger, info or neutral."""
  if not status: return "neutral"
  normalized = str(status).lower()
  # Negative states first: 'unavailable' contains 'available', 'inactive' contains 'active'
  if any(s in normalized for s in ["error", "failed", "unavailable", "inactive", "faulted", "expired", "rejected", "cancelled"]): return "danger"
  if any(s in normalized for s in ["warning", "pending", "occupied", "partial", "in_progress", "preparing", "suspended"]): return "warning"
  if any(s in normalized for s in ["active", "available", "completed", "success", "operational"]): return "success"
  if any(s in normalized for s in ["info", "processing", "reserved", "charging"]): return "info"
  return "neutral"

# ----------------------------------------- END: Formatters ------------------------------------------------------------------


# ----------------------------------------- START: Column Helpers ------------------------------------------------------------

def create_id_column(key: str = "id", header: str = "ID") -> Column:
  return Column(header=header, accessor_key=key, class_name="col-id", max_width="120px")

def create_name_column(key: str = "name", header: str = "Name") -> Column:
  return Column(header=header, accessor_key=key)

def create_description_column(key: str = "description", header: str = "Description", max_width: str = "320px") -> Column:
  return Column(header=header, accessor_key=key, enable_tooltip=True, max_width=max_width)

def create_date_column(key: str, header: str = "Date") -> Column:
  return Column(header=header, accessor_key=key, cell=lambda row: format_date(resolve_accessor_path(row, key)))

def create_date_time_column(key: str, header: str = "Date & Time") -> Column:
  return Column(header=header, accessor_key=key, cell=lambda row: format_date_time(resolve_accessor_path(row, key)))

def create_number_column(key: str, header: str, unit: str = "", decimals: int = 2) -> Column:
  return Column(header=header, accessor_key=key, cell=lambda row: format_number_with_unit(resolve_accessor_path(row, key), unit, decimals))

def create_currency_column(key: str, header: str = "Amount", currency_key: str = "currency", default_currency: str = "USD") -> Column:
  def cell(row: Any) -> str:
    currency = resolve_accessor_path(row, currency_key) or default_currency
    return format_currency(resolve_accessor_path(row, key), currency)
  return Column(header=header, accessor_key=key, cell=cell)

def create_status_column(key: str = "status", header: str = "Status", status_map: Optional[Dict[str, str]] = None) -> Column:
  """Status badge column; status_map overrides the default variant lookup per status value."""
  def cell(row: Any) -> RawHtml:
    status = str(resolve_accessor_path(row, key) or NA)
    variant = status_map[status] if status_map and status in status_map else get_status_variant(status)
    return generate_status_badge(status, variant)
  return Column(header=header, accessor_key=key, cell=cell)

def create_actions_column(actions: List[Dict], router_prefix: str = "", id_key: str = "id", header: str = "Actions") -> Column:
  """
  Column of per-row action buttons.

  Each action is a button config understood by generate_button() ('text', 'href' or 'onclick',
  'class', 'confirm_message') plus an optional 'show' predicate receiving the row.
  """
  def cell(row: Any) -> RawHtml:
    item_id = resolve_accessor_path(row, id_key)
    visible = [a for a in actions if not callable(a.get("show")) or a["show"](row)]
    return RawHtml(" ".join(generate_button(a, router_prefix, item_id) for a in visible))
  return Column(header=header, accessor_key=id_key, cell=cell, class_name="actions")

# ----------------------------------------- END: Column Helpers --------------------------------------------------------------
