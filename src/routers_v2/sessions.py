# Sessions Router V2 - Paginated charging session list and single session view
# L(jhuf)G(jh): /v2/sessions
# Uses common_table_functions_v2.py, common_column_functions_v2.py and router_list_functions.py

import textwrap
from typing import Any, List
from urllib.parse import quote

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

from hardcoded_config import TABLE_HARDCODED_CONFIG
from routers_v2.common_backend_functions_v2 import BackendError, create_backend_client, fetch_backend_item
from routers_v2.common_column_functions_v2 import NA, create_currency_column, create_date_time_column, create_id_column, create_status_column, format_date_time, format_duration, format_number_with_unit
from routers_v2.common_logging_functions_v2 import MiddlewareLogger
from routers_v2.common_table_functions_v2 import Column, render_table, resolve_accessor_path
from routers_v2.common_ui_functions_v2 import generate_list_page, generate_router_docs_page, generate_search_form, generate_table_fragment, html_result, json_result
from routers_v2.router_list_functions import build_list_url, build_table_pagination, get_backend_base_url, load_list_page, parse_list_query

router = APIRouter()
config = None
router_prefix = None
router_name = "sessions"
main_page_nav_html = '<a href="/">Back to Main Page</a>'
# Set by tests to route backend calls through httpx.MockTransport
backend_transport = None

SESSION_CURRENCY = "INR"


def set_config(app_config, prefix):
  global config, router_prefix
  config = app_config
  router_prefix = prefix


# ----------------------------------------- START: Columns -------------------------------------------------------------------

def format_session_energy(row: Any) -> str:
  """energy_delivered in kWh, else (meter_stop - meter_start) with meter values in Wh."""
  energy = resolve_accessor_path(row, "energy_delivered")
  if isinstance(energy, (int, float)) and not isinstance(energy, bool):
    return format_number_with_unit(energy, "kWh")
  meter_start = resolve_accessor_path(row, "meter_start")
  meter_stop = resolve_accessor_path(row, "meter_stop")
  if isinstance(meter_start, (int, float)) and isinstance(meter_stop, (int, float)):
    return format_number_with_unit((meter_stop - meter_start) / 1000, "kWh")
  return NA

def format_session_end(row: Any) -> str:
  end = resolve_accessor_path(row, "end_timestamp")
  return format_date_time(end) if end else "In progress"

def get_detail_url(row: Any) -> str:
  return f"{router_prefix}/{router_name}/get?session_id={quote(str(resolve_accessor_path(row, 'id')), safe='')}&format=html"

def get_session_columns() -> List[Column]:
  return [
    create_id_column("transaction_id", "Transaction ID"),
    create_id_column("charger_id", "Charger ID"),
    Column(header="Connector", accessor_key="connector_id"),
    Column(header="ID Tag", accessor_key="id_tag"),
    create_date_time_column("start_timestamp", "Start Time"),
    Column(header="End Time", accessor_key="end_timestamp", cell=format_session_end),
    Column(header="Duration", accessor_key="duration", cell=lambda row: format_duration(resolve_accessor_path(row, "start_timestamp"), resolve_accessor_path(row, "end_timestamp"))),
    Column(header="Energy", accessor_key="energy_delivered", cell=format_session_energy),
    create_currency_column("cost", "Cost", default_currency=SESSION_CURRENCY),
    create_status_column("status", "Status")
  ]

def get_session_row_class(row: Any, index: int) -> str:
  classes = ["row-odd" if index % 2 else "row-even"]
  if not resolve_accessor_path(row, "end_timestamp"): classes.append("row-ongoing")
  return " ".join(classes)

# ----------------------------------------- END: Columns ---------------------------------------------------------------------


# ----------------------------------------- START: L(jhuf) - Router root / List ----------------------------------------------

@router.get(f"/{router_name}")
async def sessions_root(request: Request):
  """Sessions Router - Paginated list of charging sessions from the charging platform backend"""
  logger = MiddlewareLogger.create()
  logger.log_function_header("sessions_root")
  request_params = dict(request.query_params)

  # Bare GET returns self-documentation
  if len(request_params) == 0:
    logger.log_function_footer()
    endpoints = [
      {"path": "", "desc": "List charging sessions (params: page, page_size, search)", "formats": ["json", "html", "ui", "fragment"]},
      {"path": "/get", "desc": "Get single charging session (param: session_id)", "formats": ["json", "html"]}
    ]
    return HTMLResponse(generate_router_docs_page(
      title="Charging Sessions",
      description=f"Charging sessions (OCPP transactions). Backend: EV_BACKEND_BASE_URL{TABLE_HARDCODED_CONFIG.BACKEND_SESSIONS_PATH}",
      router_prefix=f"{router_prefix}/{router_name}",
      endpoints=endpoints,
      navigation_html=main_page_nav_html
    ))

  format_param = request_params.get("format", "json")
  query = parse_list_query(request_params, config)
  base_url = f"{router_prefix}/{router_name}"
  columns = get_session_columns()

  if format_param == "ui":
    logger.log_function_footer()
    loading_tree = render_table(columns, [], key_field="id", is_loading=True)
    html = generate_list_page(
      title="Charging Sessions",
      loading_tree=loading_tree,
      fragment_url=build_list_url(base_url, "fragment", query.page, query.page_size, query.search),
      navigation_html=main_page_nav_html,
      search_html=generate_search_form(base_url, query.search, "Search by charger or ID tag..."),
      table_id="sessions-table"
    )
    return HTMLResponse(html)

  if format_param not in ["json", "html", "fragment"]:
    logger.log_function_footer()
    return json_result(False, f"Format '{format_param}' not supported. Use: json, html, ui, fragment", {})

  try:
    backend_page = await load_list_page(config, TABLE_HARDCODED_CONFIG.BACKEND_SESSIONS_PATH, query, logger, backend_transport)
  except BackendError as e:
    logger.log_function_output(f"ERROR: {str(e)}")
    logger.log_function_footer()
    if format_param == "fragment":
      tree = render_table(columns, [], key_field="id", empty_message=f"Failed to load data: {str(e)}")
      return HTMLResponse(generate_table_fragment(tree, "sessions-table"))
    return json_result(False, str(e), {})

  if format_param == "json":
    logger.log_function_footer()
    return json_result(True, "", {"items": backend_page.items, "pagination": backend_page.pagination_to_dict()})

  if format_param == "html":
    logger.log_function_footer()
    return html_result("Charging Sessions", backend_page.items, f'<a href="{base_url}">Back</a> | {main_page_nav_html}')

  tree = render_table(
    columns,
    backend_page.items,
    key_field="id",
    empty_message="No charging sessions found",
    row_class_name=get_session_row_class,
    on_row_click=get_detail_url,
    pagination=build_table_pagination(backend_page, base_url, query, config)
  )
  logger.log_function_footer()
  return HTMLResponse(generate_table_fragment(tree, "sessions-table"))

# ----------------------------------------- END: L(jhuf) - Router root / List ------------------------------------------------


# ----------------------------------------- START: G(jh) - Get single --------------------------------------------------------

@router.get(f"/{router_name}/get")
async def sessions_get(request: Request):
  """
  Get a single charging session by ID.

  Parameters:
  - session_id: Backend ID of the session (required)
  - format: Response format - json (default), html
  """
  logger = MiddlewareLogger.create()
  logger.log_function_header("sessions_get")

  if len(request.query_params) == 0:
    logger.log_function_footer()
    return PlainTextResponse(textwrap.dedent(sessions_get.__doc__).strip(), media_type="text/plain; charset=utf-8")

  request_params = dict(request.query_params)
  session_id = request_params.get("session_id", None)
  format_param = request_params.get("format", "json")

  if not session_id:
    logger.log_function_footer()
    return json_result(False, "Missing 'session_id' parameter.", {})

  base_url = get_backend_base_url(config)
  if not base_url:
    logger.log_function_footer()
    return json_result(False, "EV_BACKEND_BASE_URL not configured", {})

  try:
    async with create_backend_client(base_url, getattr(config, 'EV_BACKEND_API_TOKEN', None), getattr(config, 'EV_BACKEND_TIMEOUT_SECONDS', 30.0), backend_transport) as client:
      session = await fetch_backend_item(client, TABLE_HARDCODED_CONFIG.BACKEND_SESSIONS_PATH, quote(session_id, safe=''), logger)
  except BackendError as e:
    logger.log_function_output(f"ERROR: {str(e)}")
    logger.log_function_footer()
    return json_result(False, str(e), {})

  if format_param == "json":
    logger.log_function_footer()
    return json_result(True, "", session)

  if format_param == "html":
    logger.log_function_footer()
    return html_result(f"Charging Session: {session_id}", session, f'<a href="{router_prefix}/{router_name}?format=ui">Back</a> | {main_page_nav_html}')

  logger.log_function_footer()
  return json_result(False, f"Format '{format_param}' not supported. Use: json, html", {})

# ----------------------------------------- END: G(jh) - Get single ----------------------------------------------------------
