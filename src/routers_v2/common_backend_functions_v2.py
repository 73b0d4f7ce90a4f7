# Common Backend Functions V2 - REST client for the charging platform backend (Django REST API)
# Supplies list screens with one page of records plus pagination metadata.

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from routers_v2.common_logging_functions_v2 import MiddlewareLogger


class BackendError(Exception):
  """Backend unreachable, non-2xx response or unreadable payload."""


@dataclass
class BackendPage:
  items: List[Any] = field(default_factory=list)
  current_page: int = 1
  total_pages: int = 1
  total_items: int = 0
  page_size: int = 10

  def pagination_to_dict(self) -> Dict[str, int]:
    return {"current_page": self.current_page, "total_pages": self.total_pages, "total_items": self.total_items, "page_size": self.page_size}


# ----------------------------------------- START: Response Parsing ----------------------------------------------------------

def extract_records_from_response(data: Any) -> List[Any]:
  """
  Extract the record list from the response formats the backend uses:
  - bare list
  - paginated {"count": N, "results": [...]}
  - GeoJSON FeatureCollection (directly or under "results"), records are features[].properties
  Unknown formats yield an empty list.
  """
  if not data: return []
  if isinstance(data, list): return data
  if not isinstance(data, dict): return []

  results = data.get("results")
  if isinstance(results, list): return results
  if isinstance(results, dict) and isinstance(results.get("features"), list):
    return [feature.get("properties") for feature in results["features"] if isinstance(feature, dict)]

  if data.get("type") == "FeatureCollection" and isinstance(data.get("features"), list):
    return [feature.get("properties") for feature in data["features"] if isinstance(feature, dict)]
  return []

def build_backend_page(data: Any, page: int, page_size: int) -> BackendPage:
  """
  Build a BackendPage from a backend response.
  Responses with 'count' are already paginated by the backend; bare lists are paginated here.
  """
  page_size = page_size if page_size > 0 else 10
  records = extract_records_from_response(data)

  if isinstance(data, dict) and isinstance(data.get("count"), int):
    total_items = max(data["count"], 0)
    total_pages = max(math.ceil(total_items / page_size), 1)
    return BackendPage(items=records, current_page=min(max(page, 1), total_pages), total_pages=total_pages, total_items=total_items, page_size=page_size)

  total_items = len(records)
  total_pages = max(math.ceil(total_items / page_size), 1)
  current_page = min(max(page, 1), total_pages)
  start = (current_page - 1) * page_size
  return BackendPage(items=records[start:start + page_size], current_page=current_page, total_pages=total_pages, total_items=total_items, page_size=page_size)

# ----------------------------------------- END: Response Parsing ------------------------------------------------------------


# ----------------------------------------- START: HTTP Client ---------------------------------------------------------------

def create_backend_client(base_url: str, api_token: Optional[str] = None, timeout_seconds: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
  """Create an AsyncClient for the backend. Use as 'async with create_backend_client(...) as client:'."""
  headers = {"Accept": "application/json"}
  if api_token: headers["Authorization"] = f"Bearer {api_token}"
  return httpx.AsyncClient(base_url=base_url.rstrip("/"), headers=headers, timeout=httpx.Timeout(timeout_seconds), transport=transport)

async def _get_json(client: httpx.AsyncClient, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
  try:
    response = await client.get(path, params=params)
    response.raise_for_status()
    return response.json()
  except httpx.HTTPStatusError as e:
    raise BackendError(f"Backend returned HTTP {e.response.status_code} for '{path}'") from e
  except httpx.RequestError as e:
    raise BackendError(f"Backend request to '{path}' failed: {e}") from e
  except ValueError as e:
    raise BackendError(f"Backend response for '{path}' is not valid JSON") from e

async def fetch_backend_page(client: httpx.AsyncClient, resource_path: str, page: int, page_size: int, search: str = "", logger: Optional[MiddlewareLogger] = None) -> BackendPage:
  """Fetch one page of records. Raises BackendError."""
  if logger: logger.log_function_header("fetch_backend_page")
  try:
    params: Dict[str, Any] = {"page": page, "page_size": page_size}
    if search: params["search"] = search
    data = await _get_json(client, resource_path, params)
    backend_page = build_backend_page(data, page, page_size)
    if logger: logger.log_function_output(f"GET {resource_path} page={backend_page.current_page}/{backend_page.total_pages} items={len(backend_page.items)} total={backend_page.total_items}")
    return backend_page
  finally:
    if logger: logger.log_function_footer()

async def fetch_backend_item(client: httpx.AsyncClient, resource_path: str, item_id: str, logger: Optional[MiddlewareLogger] = None) -> Dict[str, Any]:
  """Fetch a single record from '{resource_path}{item_id}/'. Raises BackendError."""
  if logger: logger.log_function_header("fetch_backend_item")
  try:
    path = f"{resource_path.rstrip('/')}/{item_id}/"
    data = await _get_json(client, path)
    if not isinstance(data, dict): raise BackendError(f"Backend response for '{path}' is not an object")
    if logger: logger.log_function_output(f"GET {path} OK")
    return data
  finally:
    if logger: logger.log_function_footer()

# ----------------------------------------- END: HTTP Client -----------------------------------------------------------------
