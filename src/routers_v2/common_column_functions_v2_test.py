# Test script for common_column_functions_v2.py
# Run: python -m routers_v2.common_column_functions_v2_test
# Or:  python src/routers_v2/common_column_functions_v2_test.py
# Or:  pytest src/routers_v2/common_column_functions_v2_test.py

import datetime, sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from routers_v2 import common_column_functions_v2 as cf
from routers_v2.common_table_functions_v2 import CellContent, render_table
from routers_v2.common_ui_functions_v2 import RawHtml, generate_table

# ----------------------------------------- START: Test Infrastructure ------------------------------------------------

test_count = 0
pass_count = 0
fail_count = 0

def check(name: str, condition: bool, details: str = ""):
  global test_count, pass_count, fail_count
  test_count += 1
  if condition:
    pass_count += 1
    print(f"  OK: {name}")
  else:
    fail_count += 1
    print(f"  FAIL: {name}" + (f" -> {details}" if details else ""))
  assert condition, f"{name}" + (f" -> {details}" if details else "")

def section(name: str):
  print(f"\n{'=' * 60}\n{name}\n{'=' * 60}")

SESSION = {
  "id": 11,
  "transaction_id": 5001,
  "start_timestamp": "2024-03-05T15:07:00Z",
  "end_timestamp": "2024-03-05T17:12:00Z",
  "energy_delivered": 12.5,
  "cost": 1234.5,
  "currency": "EUR",
  "status": "Completed",
  "notes": "Cable replaced after the session"
}

# ----------------------------------------- END: Test Infrastructure --------------------------------------------------


# ----------------------------------------- START: Test Cases ---------------------------------------------------------

def test_date_formatters():
  section("Date formatters")

  check("D1: ISO string with Z", cf.format_date("2024-03-05T15:07:00Z") == "Mar 5, 2024")
  check("D2: date time", cf.format_date_time("2024-03-05T15:07:00Z") == "Mar 5, 2024 3:07 PM", cf.format_date_time("2024-03-05T15:07:00Z"))
  check("D3: midnight is 12 AM", cf.format_date_time("2024-12-31T00:05:00") == "Dec 31, 2024 12:05 AM")
  check("D4: datetime object", cf.format_date(datetime.datetime(2023, 1, 9, 8, 0)) == "Jan 9, 2023")
  check("D5: date object", cf.format_date(datetime.date(2023, 1, 9)) == "Jan 9, 2023")
  check("D6: None -> N/A", cf.format_date(None) == "N/A" and cf.format_date_time("") == "N/A")
  check("D7: invalid -> N/A", cf.format_date("not a date") == "N/A" and cf.format_date(42) == "N/A")

def test_number_formatters():
  section("Number and currency formatters")

  check("N1: number with unit", cf.format_number_with_unit(12.5, "kWh") == "12.50 kWh")
  check("N2: decimals", cf.format_number_with_unit(7, "kW", 0) == "7 kW")
  check("N3: no unit", cf.format_number_with_unit(3.14159) == "3.14")
  check("N4: non-numeric -> N/A", cf.format_number_with_unit("12", "kWh") == "N/A" and cf.format_number_with_unit(None) == "N/A")
  check("N5: bool is not a number", cf.format_number_with_unit(True) == "N/A")
  check("N6: NaN -> N/A", cf.format_number_with_unit(float("nan")) == "N/A")

  check("C1: USD default", cf.format_currency(1234.5) == "$1,234.50")
  check("C2: known symbol", cf.format_currency(10, "inr") == "₹10.00")
  check("C3: unknown code appended", cf.format_currency(1234.5, "CHF") == "1,234.50 CHF")
  check("C4: negative amount", cf.format_currency(-5, "EUR") == "-€5.00")
  check("C5: missing amount", cf.format_currency(None) == "N/A")

def test_duration_and_status():
  section("Duration and status formatters")

  check("T1: hours and minutes", cf.format_duration("2024-03-05T15:07:00Z", "2024-03-05T17:12:00Z") == "2h 5m")
  check("T2: minutes only", cf.format_duration("2024-03-05T15:00:00Z", "2024-03-05T15:45:30Z") == "45 min")
  check("T3: open session", cf.format_duration("2024-03-05T15:00:00Z", None).endswith("(ongoing)"))
  check("T4: missing start", cf.format_duration(None, "2024-03-05T15:00:00Z") == "N/A")
  check("T5: end before start clamps to 0", cf.format_duration("2024-03-05T15:00:00Z", "2024-03-05T14:00:00Z") == "0 min")
  check("T6: mixed timezone awareness", cf.format_duration("2024-03-05T15:00:00Z", "2024-03-05T16:00:00") == "1h 0m")

  check("S1: status text", cf.format_status("IN_PROGRESS") == "In Progress" and cf.format_status(None) == "N/A")
  check("S2: success variant", cf.get_status_variant("Available") == "success" and cf.get_status_variant("Completed") == "success")
  check("S3: danger variant", cf.get_status_variant("Faulted") == "danger" and cf.get_status_variant("Unavailable") == "danger")
  check("S4: warning variant", cf.get_status_variant("Preparing") == "warning" and cf.get_status_variant("SuspendedEV") == "warning")
  check("S5: info variant", cf.get_status_variant("Charging") == "info")
  check("S6: neutral variant", cf.get_status_variant("Unknown") == "neutral" and cf.get_status_variant(None) == "neutral")

def test_column_helpers():
  section("Column helpers")

  id_column = cf.create_id_column("transaction_id", "Transaction ID")
  check("H1: id column", id_column.header == "Transaction ID" and id_column.accessor_key == "transaction_id" and id_column.cell is None)

  description = cf.create_description_column("notes", "Notes")
  content = render_table([description], [SESSION], key_field="id").rows[0].cells[0].content
  check("H2: description has tooltip", isinstance(content, CellContent) and content.tooltip == "Cable replaced after the session")
  check("H3: description max width", description.max_width == "320px")

  check("H4: date column", cf.create_date_column("start_timestamp", "Start").cell(SESSION) == "Mar 5, 2024")
  check("H5: date time column", cf.create_date_time_column("start_timestamp").cell(SESSION) == "Mar 5, 2024 3:07 PM")
  check("H6: number column", cf.create_number_column("energy_delivered", "Energy", "kWh").cell(SESSION) == "12.50 kWh")
  check("H7: currency from record", cf.create_currency_column("cost", "Cost").cell(SESSION) == "€1,234.50")
  check("H8: default currency", cf.create_currency_column("cost", "Cost", default_currency="INR").cell({"cost": 5}) == "₹5.00")
  check("H9: name column", cf.create_name_column().accessor_key == "name")

  badge = cf.create_status_column().cell(SESSION)
  check("H10: status badge is trusted HTML", isinstance(badge, RawHtml) and "status-success" in badge and "Completed" in badge)
  mapped = cf.create_status_column("status", "Status", {"Completed": "info"}).cell(SESSION)
  check("H11: status map overrides variant", "status-info" in mapped)
  check("H12: missing status badge", "N/A" in cf.create_status_column().cell({}))

def test_actions_column():
  section("Actions column")

  actions = cf.create_actions_column([
    {"text": "View", "href": "{router_prefix}/sessions/get?session_id={itemId}&format=html"},
    {"text": "Stop", "onclick": "stopSession('{itemId}')", "show": lambda row: not row.get("end_timestamp")}
  ], "/v2")
  finished = actions.cell(SESSION)
  check("A1: href placeholders replaced", 'href="/v2/sessions/get?session_id=11&amp;format=html"' in finished)
  check("A2: hidden action skipped", "Stop" not in finished)
  ongoing = actions.cell({"id": 12, "end_timestamp": None})
  check("A3: shown action rendered", "stopSession(&#x27;12&#x27;)" in ongoing)
  check("A4: actions column class", actions.class_name == "actions")

  html = generate_table(render_table([actions], [SESSION], key_field="id"))
  check("A5: action buttons not escaped in table", "<a class=\"btn-small\"" in html)

# ----------------------------------------- END: Test Cases -----------------------------------------------------------


# ----------------------------------------- START: Main ---------------------------------------------------------------

def main():
  print("=" * 60)
  print("common_column_functions_v2 tests")
  print("=" * 60)

  for test_group in [test_date_formatters, test_number_formatters, test_duration_and_status, test_column_helpers, test_actions_column]:
    try: test_group()
    except AssertionError: pass

  # Summary
  print("\n" + "=" * 60)
  print(f"SUMMARY: {pass_count}/{test_count} tests passed")
  if fail_count > 0:
    print(f"         {fail_count} tests FAILED")
  print("=" * 60 + "\n")

  return 0 if fail_count == 0 else 1

if __name__ == "__main__":
  sys.exit(main())

# ----------------------------------------- END: Main -----------------------------------------------------------------
