# Chargers Router V2 - Paginated charger list and single charger view
# L(jhuf)G(jh): /v2/chargers
# Uses common_table_functions_v2.py, common_column_functions_v2.py and router_list_functions.py

import textwrap
from typing import Any, List
from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from hardcoded_config import TABLE_HARDCODED_CONFIG
from routers_v2.common_backend_functions_v2 import BackendError, create_backend_client, fetch_backend_item
from routers_v2.common_column_functions_v2 import create_actions_column, create_id_column, create_name_column, create_status_column
from routers_v2.common_logging_functions_v2 import MiddlewareLogger
from routers_v2.common_table_functions_v2 import Column, render_table, resolve_accessor_path
from routers_v2.common_ui_functions_v2 import generate_list_page, generate_router_docs_page, generate_search_form, generate_status_badge, generate_table_fragment, html_result, json_result
from routers_v2.router_list_functions import build_list_url, build_table_pagination, get_backend_base_url, load_list_page, parse_list_query

router = APIRouter()
config = None
router_prefix = None
router_name = "chargers"
main_page_nav_html = '<a href="/">Back to Main Page</a>'
# Set by tests to route backend calls through httpx.MockTransport
backend_transport = None

CHARGER_STATUS_VARIANTS = {
  "Available": "success",
  "Preparing": "warning",
  "SuspendedEVSE": "warning",
  "SuspendedEV": "warning",
  "Charging": "info",
  "Faulted": "danger",
  "Unavailable": "danger"
}

def set_config(app_config, prefix):
  global config, router_prefix
  config = app_config
  router_prefix = prefix


# ----------------------------------------- START: Columns -------------------------------------------------------------------

def format_charger_location(row: Any) -> str:
  """Address if present, otherwise 'lat, lon' with 6 decimals."""
  address = resolve_accessor_path(row, "address")
  if address: return str(address)
  latitude = resolve_accessor_path(row, "location.latitude")
  longitude = resolve_accessor_path(row, "location.longitude")
  if isinstance(latitude, (int, float)) and isinstance(longitude, (int, float)):
    return f"{latitude:.6f}, {longitude:.6f}"
  return "No location data"

def get_detail_url(row: Any) -> str:
  return f"{router_prefix}/{router_name}/get?charger_id={quote(str(resolve_accessor_path(row, 'id')), safe='')}&format=html"

def get_charger_columns() -> List[Column]:
  return [
    create_id_column("charger_id", "ID"),
    create_name_column(),
    Column(header="Vendor", accessor_key="vendor"),
    Column(header="Model", accessor_key="model"),
    Column(header="Type", accessor_key="type"),
    create_status_column("status", "Status", CHARGER_STATUS_VARIANTS),
    Column(
      header="Enabled",
      accessor_key="enabled",
      cell=lambda row: generate_status_badge("Enabled", "success") if resolve_accessor_path(row, "enabled") else generate_status_badge("Disabled", "danger")
    ),
    Column(header="Address", accessor_key="address", cell=format_charger_location, enable_tooltip=True, max_width="280px"),
    create_actions_column([
      {"text": "View", "href": "{router_prefix}/" + router_name + "/get?charger_id={itemId}&format=html", "class": "btn-small"},
      {"text": "JSON", "href": "{router_prefix}/" + router_name + "/get?charger_id={itemId}&format=json", "class": "btn-small"}
    ], router_prefix or "", id_key="id")
  ]

def get_charger_row_class(row: Any) -> str:
  return "" if resolve_accessor_path(row, "enabled") else "row-disabled"

# ----------------------------------------- END: Columns ---------------------------------------------------------------------


# ----------------------------------------- START: L(jhuf) - Router root / List ----------------------------------------------

@router.get(f"/{router_name}")
async def chargers_root(request: Request):
  """Chargers Router - Paginated list of chargers from the charging platform backend"""
  logger = MiddlewareLogger.create()
  logger.log_function_header("chargers_root")
  request_params = dict(request.query_params)

  # Bare GET returns self-documentation
  if len(request_params) == 0:
    logger.log_function_footer()
    endpoints = [
      {"path": "", "desc": "List chargers (params: page, page_size, search)", "formats": ["json", "html", "ui", "fragment"]},
      {"path": "/get", "desc": "Get single charger (param: charger_id)", "formats": ["json", "html"]}
    ]
    return HTMLResponse(generate_router_docs_page(
      title="Chargers",
      description=f"Chargers of the charging platform. Backend: EV_BACKEND_BASE_URL{TABLE_HARDCODED_CONFIG.BACKEND_CHARGERS_PATH}",
      router_prefix=f"{router_prefix}/{router_name}",
      endpoints=endpoints,
      navigation_html=main_page_nav_html
    ))

  format_param = request_params.get("format", "json")
  query = parse_list_query(request_params, config)
  base_url = f"{router_prefix}/{router_name}"
  columns = get_charger_columns()

  if format_param == "ui":
    logger.log_function_footer()
    loading_tree = render_table(columns, [], key_field="id", is_loading=True)
    html = generate_list_page(
      title="Chargers",
      loading_tree=loading_tree,
      fragment_url=build_list_url(base_url, "fragment", query.page, query.page_size, query.search),
      navigation_html=main_page_nav_html,
      search_html=generate_search_form(base_url, query.search, "Search chargers..."),
      table_id="chargers-table"
    )
    return HTMLResponse(html)

  if format_param not in ["json", "html", "fragment"]:
    logger.log_function_footer()
    return json_result(False, f"Format '{format_param}' not supported. Use: json, html, ui, fragment", {})

  try:
    backend_page = await load_list_page(config, TABLE_HARDCODED_CONFIG.BACKEND_CHARGERS_PATH, query, logger, backend_transport)
  except BackendError as e:
    logger.log_function_output(f"ERROR: {str(e)}")
    logger.log_function_footer()
    if format_param == "fragment":
      tree = render_table(columns, [], key_field="id", empty_message=f"Failed to load data: {str(e)}")
      return HTMLResponse(generate_table_fragment(tree, "chargers-table"))
    return json_result(False, str(e), {})

  if format_param == "json":
    logger.log_function_footer()
    return json_result(True, "", {"items": backend_page.items, "pagination": backend_page.pagination_to_dict()})

  if format_param == "html":
    logger.log_function_footer()
    return html_result("Chargers", backend_page.items, f'<a href="{base_url}">Back</a> | {main_page_nav_html}')

  tree = render_table(
    columns,
    backend_page.items,
    key_field="id",
    empty_message="No chargers found",
    row_class_name=get_charger_row_class,
    on_row_click=get_detail_url,
    pagination=build_table_pagination(backend_page, base_url, query, config)
  )
  logger.log_function_footer()
  return HTMLResponse(generate_table_fragment(tree, "chargers-table"))

# ----------------------------------------- END: L(jhuf) - Router root / List ------------------------------------------------


# ----------------------------------------- START: G(jh) - Get single --------------------------------------------------------

@router.get(f"/{router_name}/get")
async def chargers_get(request: Request):
  """
  Get a single charger by ID.

  Parameters:
  - charger_id: Backend ID of the charger (required)
  - format: Response format - json (default), html
  """
  logger = MiddlewareLogger.create()
  logger.log_function_header("chargers_get")

  if len(request.query_params) == 0:
    logger.log_function_footer()
    return PlainTextResponse(textwrap.dedent(chargers_get.__doc__).strip(), media_type="text/plain; charset=utf-8")

  request_params = dict(request.query_params)
  charger_id = request_params.get("charger_id", None)
  format_param = request_params.get("format", "json")

  if not charger_id:
    logger.log_function_footer()
    return json_result(False, "Missing 'charger_id' parameter.", {})

  base_url = get_backend_base_url(config)
  if not base_url:
    logger.log_function_footer()
    return json_result(False, "EV_BACKEND_BASE_URL not configured", {})

  try:
    async with create_backend_client(base_url, getattr(config, 'EV_BACKEND_API_TOKEN', None), getattr(config, 'EV_BACKEND_TIMEOUT_SECONDS', 30.0), backend_transport) as client:
      charger = await fetch_backend_item(client, TABLE_HARDCODED_CONFIG.BACKEND_CHARGERS_PATH, quote(charger_id, safe=''), logger)
  except BackendError as e:
    logger.log_function_output(f"ERROR: {str(e)}")
    logger.log_function_footer()
    return json_result(False, str(e), {})

  if format_param == "json":
    logger.log_function_footer()
    return json_result(True, "", charger)

  if format_param == "html":
    logger.log_function_footer()
    return html_result(f"Charger: {charger_id}", charger, f'<a href="{router_prefix}/{router_name}?format=ui">Back</a> | {main_page_nav_html}')

  logger.log_function_footer()
  return json_result(False, f"Format '{format_param}' not supported. Use: json, html", {})

# ----------------------------------------- END: G(jh) - Get single ----------------------------------------------------------
