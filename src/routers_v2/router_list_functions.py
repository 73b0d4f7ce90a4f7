# Shared flow of paginated list routers (chargers, sessions)
# Query parsing, page/page-size navigation URLs and backend page loading.

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx

from hardcoded_config import TABLE_HARDCODED_CONFIG
from routers_v2.common_backend_functions_v2 import BackendError, BackendPage, create_backend_client, fetch_backend_page
from routers_v2.common_logging_functions_v2 import MiddlewareLogger
from routers_v2.common_table_functions_v2 import TablePagination

@dataclass
class ListQuery:
  page: int
  page_size: int
  search: str = ""

# ----------------------------------------- START: Query Parsing -------------------------------------------------------------

# Parse a positive integer query value. Missing, non-numeric or non-positive values yield the default.
def parse_positive_int(value: Any, default: int) -> int:
  try: number = int(str(value).strip())
  except (TypeError, ValueError): return default
  return number if number > 0 else default

def get_default_page_size(config) -> int:
  return parse_positive_int(getattr(config, 'TABLE_DEFAULT_PAGE_SIZE', None), TABLE_HARDCODED_CONFIG.DEFAULT_PAGE_SIZE)

def get_page_size_options(config) -> List[int]:
  options = getattr(config, 'TABLE_PAGE_SIZE_OPTIONS', None)
  return list(options) if options else list(TABLE_HARDCODED_CONFIG.DEFAULT_PAGE_SIZE_OPTIONS)

def parse_list_query(request_params: Dict[str, str], config) -> ListQuery:
  return ListQuery(
    page=parse_positive_int(request_params.get("page"), 1),
    page_size=parse_positive_int(request_params.get("page_size"), get_default_page_size(config)),
    search=(request_params.get("search") or "").strip()
  )

# ----------------------------------------- END: Query Parsing ---------------------------------------------------------------


# ----------------------------------------- START: Navigation URLs -----------------------------------------------------------

# Build '{base_url}?format=..&page=..&page_size=..&search=..', search omitted when empty
def build_list_url(base_url: str, format_param: str, page: int, page_size: int, search: str = "") -> str:
  params = {"format": format_param, "page": page, "page_size": page_size}
  if search: params["search"] = search
  return f"{base_url}?{urlencode(params)}"

def build_table_pagination(backend_page: BackendPage, base_url: str, query: ListQuery, config) -> TablePagination:
  """
  Pagination props for render_table(). Handlers return the URL of the list page for the target page.
  Changing the page size resets to page 1.
  """
  return TablePagination(
    current_page=backend_page.current_page,
    total_pages=backend_page.total_pages,
    on_page_change=lambda page: build_list_url(base_url, "ui", page, backend_page.page_size, query.search),
    total_items=backend_page.total_items,
    page_size=backend_page.page_size,
    on_page_size_change=lambda size: build_list_url(base_url, "ui", 1, size, query.search),
    page_size_options=get_page_size_options(config),
    sibling_count=getattr(config, 'TABLE_SIBLING_COUNT', TABLE_HARDCODED_CONFIG.DEFAULT_SIBLING_COUNT),
    show_first_last=bool(getattr(config, 'TABLE_SHOW_FIRST_LAST', False))
  )

# ----------------------------------------- END: Navigation URLs -------------------------------------------------------------


# ----------------------------------------- START: Backend Loading -----------------------------------------------------------

def get_backend_base_url(config) -> str:
  return getattr(config, 'EV_BACKEND_BASE_URL', None) or ''

async def load_list_page(config, resource_path: str, query: ListQuery, logger: MiddlewareLogger, transport: Optional[httpx.AsyncBaseTransport] = None) -> BackendPage:
  """Fetch one page of records from the backend. Raises BackendError (also when the backend URL is not configured)."""
  base_url = get_backend_base_url(config)
  if not base_url: raise BackendError("EV_BACKEND_BASE_URL not configured")
  async with create_backend_client(base_url, getattr(config, 'EV_BACKEND_API_TOKEN', None), getattr(config, 'EV_BACKEND_TIMEOUT_SECONDS', 30.0), transport) as client:
    return await fetch_backend_page(client, resource_path, query.page, query.page_size, query.search, logger)

# ----------------------------------------- END: Backend Loading -------------------------------------------------------------
