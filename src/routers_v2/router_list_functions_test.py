# Test script for router_list_functions.py and the list routers built on it (chargers.py, sessions.py)
# Routers run in a FastAPI TestClient; backend responses come from httpx.MockTransport.
# Run: python -m routers_v2.router_list_functions_test
# Or:  python src/routers_v2/router_list_functions_test.py
# Or:  pytest src/routers_v2/router_list_functions_test.py

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from urllib.parse import parse_qs, urlparse

import httpx
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from routers_v2 import chargers, sessions
from routers_v2 import router_list_functions as rl
from routers_v2.common_backend_functions_v2 import BackendPage

# ----------------------------------------- START: Test Infrastructure ------------------------------------------------

@dataclass
class MockConfig:
  EV_BACKEND_BASE_URL: Optional[str] = "http://backend.test"
  EV_BACKEND_API_TOKEN: Optional[str] = "secret-token"
  EV_BACKEND_TIMEOUT_SECONDS: float = 5.0
  TABLE_DEFAULT_PAGE_SIZE: int = 10
  TABLE_PAGE_SIZE_OPTIONS: List[int] = field(default_factory=lambda: [10, 25, 50])
  TABLE_SIBLING_COUNT: int = 1
  TABLE_SHOW_FIRST_LAST: bool = True

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

CHARGERS = [
  {"id": i, "charger_id": f"CP-{i:03d}", "name": f"Charger {i}", "vendor": "ABB", "status": "Available" if i % 2 else "Faulted", "enabled": i != 2,
   "address": None if i == 3 else f"Street {i}", "location": {"latitude": 18.5204, "longitude": 73.8567}}
  for i in range(1, 26)
]

SESSIONS = [
  {"id": 1, "transaction_id": 5001, "charger_id": "CP-001", "connector_id": 1, "id_tag": "TAG1", "start_timestamp": "2024-03-05T15:07:00Z",
   "end_timestamp": "2024-03-05T17:12:00Z", "energy_delivered": 12.5, "cost": 250, "status": "Completed"},
  {"id": 2, "transaction_id": 5002, "charger_id": "CP-002", "connector_id": 2, "id_tag": "TAG2", "start_timestamp": "2024-03-06T09:00:00Z",
   "end_timestamp": None, "meter_start": 1000, "meter_stop": 4500, "cost": None, "status": "Charging"}
]

backend_requests = []

def backend_handler(request: httpx.Request) -> httpx.Response:
  backend_requests.append(request)
  path = request.url.path
  if path == "/api/ocpp/chargers/":
    page = int(request.url.params.get("page", "1"))
    size = int(request.url.params.get("page_size", "10"))
    return httpx.Response(200, json={"count": len(CHARGERS), "results": CHARGERS[(page - 1) * size:page * size]})
  if path == "/api/ocpp/chargers/5/":
    return httpx.Response(200, json=CHARGERS[4])
  if path == "/api/ocpp/charging-sessions/":
    # Unpaginated bare list
    return httpx.Response(200, json=SESSIONS)
  return httpx.Response(404, json={"detail": "Not found."})

def failing_handler(request: httpx.Request) -> httpx.Response:
  return httpx.Response(503, text="maintenance")

def create_client(config: MockConfig = None, handler=backend_handler) -> TestClient:
  config = config or MockConfig()
  app = FastAPI()
  app.include_router(chargers.router, prefix="/v2")
  app.include_router(sessions.router, prefix="/v2")
  chargers.set_config(config, "/v2")
  sessions.set_config(config, "/v2")
  chargers.backend_transport = httpx.MockTransport(handler)
  sessions.backend_transport = httpx.MockTransport(handler)
  return TestClient(app)

# ----------------------------------------- END: Test Infrastructure --------------------------------------------------


# ----------------------------------------- START: Test Cases ---------------------------------------------------------

def test_parse_list_query():
  section("parse_list_query()")

  config = MockConfig(TABLE_DEFAULT_PAGE_SIZE=25)
  query = rl.parse_list_query({"page": "3", "page_size": "50", "search": "  depot "}, config)
  check("Q1: values parsed", (query.page, query.page_size, query.search) == (3, 50, "depot"))
  query = rl.parse_list_query({}, config)
  check("Q2: defaults", (query.page, query.page_size, query.search) == (1, 25, ""))
  query = rl.parse_list_query({"page": "abc", "page_size": "-5"}, config)
  check("Q3: invalid values fall back", (query.page, query.page_size) == (1, 25))
  check("Q4: zero is invalid", rl.parse_positive_int("0", 7) == 7 and rl.parse_positive_int(None, 7) == 7)
  check("Q5: config without table settings", rl.parse_list_query({}, object()).page_size == 10)

def test_navigation_urls():
  section("Navigation URLs")

  check("U1: list url", rl.build_list_url("/v2/chargers", "ui", 2, 25) == "/v2/chargers?format=ui&page=2&page_size=25")
  check("U2: search encoded", rl.build_list_url("/v2/chargers", "fragment", 1, 10, "a b&c") == "/v2/chargers?format=fragment&page=1&page_size=10&search=a+b%26c")

  backend_page = BackendPage(items=[], current_page=2, total_pages=5, total_items=45, page_size=10)
  pagination = rl.build_table_pagination(backend_page, "/v2/chargers", rl.ListQuery(page=2, page_size=10, search="x"), MockConfig())
  check("U3: page change url", pagination.on_page_change(3) == "/v2/chargers?format=ui&page=3&page_size=10&search=x")
  check("U4: size change resets to page 1", pagination.on_page_size_change(50) == "/v2/chargers?format=ui&page=1&page_size=50&search=x")
  check("U5: options and flags from config", pagination.page_size_options == [10, 25, 50] and pagination.show_first_last and pagination.sibling_count == 1)
  check("U6: metadata from backend page", (pagination.current_page, pagination.total_pages, pagination.total_items) == (2, 5, 45))

def test_chargers_router():
  section("Chargers router")

  client = create_client()
  docs = client.get("/v2/chargers")
  check("C1: bare GET returns docs", docs.status_code == 200 and "Available Endpoints" in docs.text)

  backend_requests.clear()
  result = client.get("/v2/chargers", params={"format": "json", "page": "2", "page_size": "10"})
  body = result.json()
  check("C2: json ok", result.status_code == 200 and body["ok"] is True)
  check("C3: json items", [item["id"] for item in body["data"]["items"]] == list(range(11, 21)))
  check("C4: json pagination", body["data"]["pagination"] == {"current_page": 2, "total_pages": 3, "total_items": 25, "page_size": 10})
  check("C5: bearer token forwarded", backend_requests[0].headers["Authorization"] == "Bearer secret-token")

  ui = client.get("/v2/chargers", params={"format": "ui", "search": "abb"})
  check("C6: ui page starts loading", 'data-state="loading"' in ui.text and "Loading data..." in ui.text)
  check("C7: ui page loads fragment", 'hx-get="/v2/chargers?format=fragment&amp;page=1&amp;page_size=10&amp;search=abb"' in ui.text)

  fragment = client.get("/v2/chargers", params={"format": "fragment", "page": "3"})
  check("C8: fragment populated", 'data-state="populated"' in fragment.text)
  check("C9: fragment range summary", "Showing 21-25 of 25" in fragment.text)
  check("C10: rows link to detail", 'data-href="/v2/chargers/get?charger_id=21&amp;format=html"' in fragment.text)
  check("C11: status badge", "status-success" in fragment.text and "status-danger" in fragment.text)
  check("C12: page size selector", 'value="/v2/chargers?format=ui&amp;page=1&amp;page_size=25"' in fragment.text)

  first_page = client.get("/v2/chargers", params={"format": "fragment", "page": "1"}).text
  check("C13: disabled charger row class", "row-disabled" in first_page)
  check("C14: location fallback to coordinates", "18.520400, 73.856700" in first_page)

  html = client.get("/v2/chargers", params={"format": "html"})
  check("C15: html table", html.status_code == 200 and "<th>charger_id</th>" in html.text)

  unsupported = client.get("/v2/chargers", params={"format": "xml"})
  check("C16: unsupported format", unsupported.status_code == 400 and unsupported.json()["ok"] is False)

def test_chargers_get():
  section("Chargers router /get")

  client = create_client()
  check("D1: bare GET returns docs", "charger_id" in client.get("/v2/chargers/get").text)
  result = client.get("/v2/chargers/get", params={"charger_id": "5"})
  check("D2: json item", result.status_code == 200 and result.json()["data"]["charger_id"] == "CP-005")
  html = client.get("/v2/chargers/get", params={"charger_id": "5", "format": "html"})
  check("D3: html item", "Charger: 5" in html.text and "location.latitude" in html.text)
  missing = client.get("/v2/chargers/get", params={"charger_id": "99"})
  check("D4: missing item", missing.status_code == 400 and "HTTP 404" in missing.json()["error"])
  check("D5: missing parameter", client.get("/v2/chargers/get", params={"format": "json"}).json()["error"] == "Missing 'charger_id' parameter.")

def test_sessions_router():
  section("Sessions router")

  client = create_client()
  result = client.get("/v2/sessions", params={"format": "json", "page_size": "1", "page": "2"})
  body = result.json()
  check("S1: bare list paginated locally", [item["id"] for item in body["data"]["items"]] == [2])
  check("S2: local pagination metadata", body["data"]["pagination"]["total_pages"] == 2)

  fragment = client.get("/v2/sessions", params={"format": "fragment"}).text
  check("S3: energy from meter values", "3.50 kWh" in fragment)
  check("S4: energy delivered", "12.50 kWh" in fragment)
  check("S5: open session end", "In progress" in fragment and "(ongoing)" in fragment)
  check("S6: duration", "2h 5m" in fragment)
  check("S7: cost in default currency", "₹250.00" in fragment)
  check("S8: row class with index", "row-even" in fragment and "row-odd row-ongoing" in fragment)

def test_backend_failures():
  section("Backend failures")

  client = create_client(handler=failing_handler)
  fragment = client.get("/v2/chargers", params={"format": "fragment"})
  check("F1: fragment shows empty state", fragment.status_code == 200 and 'data-state="empty"' in fragment.text)
  check("F2: failure message", "Failed to load data: Backend returned HTTP 503" in fragment.text)
  result = client.get("/v2/sessions", params={"format": "json"})
  check("F3: json error", result.status_code == 400 and "HTTP 503" in result.json()["error"])

  unconfigured = create_client(MockConfig(EV_BACKEND_BASE_URL=None))
  result = unconfigured.get("/v2/chargers", params={"format": "json"})
  check("F4: missing backend url", result.json()["error"] == "EV_BACKEND_BASE_URL not configured")
  result = unconfigured.get("/v2/sessions/get", params={"session_id": "1"})
  check("F5: missing backend url on get", result.json()["error"] == "EV_BACKEND_BASE_URL not configured")

  empty = create_client(handler=lambda request: httpx.Response(200, json={"count": 0, "results": []}))
  fragment = empty.get("/v2/chargers", params={"format": "fragment"}).text
  check("F6: empty result message", "No chargers found" in fragment and 'class="pagination"' not in fragment)

# ----------------------------------------- END: Test Cases -----------------------------------------------------------


# ----------------------------------------- START: Main ---------------------------------------------------------------

def main():
  print("=" * 60)
  print("router_list_functions tests")
  print("=" * 60)

  for test_group in [test_parse_list_query, test_navigation_urls, test_chargers_router, test_chargers_get, test_sessions_router, test_backend_failures]:
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
