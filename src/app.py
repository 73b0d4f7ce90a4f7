import logging, os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from common_utility_functions import convert_to_flat_html_table, format_config_for_displaying
from hardcoded_config import TABLE_HARDCODED_CONFIG
from routers_v2 import chargers, sessions
from routers_v2.common_logging_functions_v2 import MiddlewareLogger
from routers_v2.common_ui_functions_v2 import generate_html_head

# Load environment variables from a local .env file if present
load_dotenv()

# Global initialization errors array
initialization_errors = []

@dataclass
class Config:
  # Charging platform backend (Django REST API)
  EV_BACKEND_BASE_URL: Optional[str]
  EV_BACKEND_API_TOKEN: Optional[str]
  EV_BACKEND_TIMEOUT_SECONDS: float
  # Table defaults
  TABLE_DEFAULT_PAGE_SIZE: int
  TABLE_PAGE_SIZE_OPTIONS: List[int]
  TABLE_SIBLING_COUNT: int
  TABLE_SHOW_FIRST_LAST: bool


def parse_page_size_options(value: Optional[str]) -> List[int]:
  """'10,25,50' -> [10, 25, 50]. Non-numeric and non-positive entries are skipped; nothing valid -> defaults."""
  options = []
  for part in (value or "").split(","):
    part = part.strip()
    if part.isdigit() and int(part) > 0: options.append(int(part))
  return options or list(TABLE_HARDCODED_CONFIG.DEFAULT_PAGE_SIZE_OPTIONS)

def load_config() -> Config:
  """Load configuration from environment variables."""

  return Config(
    EV_BACKEND_BASE_URL=os.getenv("EV_BACKEND_BASE_URL")
    ,EV_BACKEND_API_TOKEN=os.getenv("EV_BACKEND_API_TOKEN")
    ,EV_BACKEND_TIMEOUT_SECONDS=float(os.getenv("EV_BACKEND_TIMEOUT_SECONDS", "30"))
    ,TABLE_DEFAULT_PAGE_SIZE=int(os.getenv("TABLE_DEFAULT_PAGE_SIZE", str(TABLE_HARDCODED_CONFIG.DEFAULT_PAGE_SIZE)))
    ,TABLE_PAGE_SIZE_OPTIONS=parse_page_size_options(os.getenv("TABLE_PAGE_SIZE_OPTIONS", "10,25,50,100"))
    ,TABLE_SIBLING_COUNT=int(os.getenv("TABLE_SIBLING_COUNT", str(TABLE_HARDCODED_CONFIG.DEFAULT_SIBLING_COUNT)))
    ,TABLE_SHOW_FIRST_LAST=os.getenv("TABLE_SHOW_FIRST_LAST", "true").lower() == "true"
  )

def configure_logging():
  """Configure logging to suppress verbose HTTP client logs."""
  logging.getLogger('urllib3').setLevel(logging.WARNING)
  logging.getLogger('httpx').setLevel(logging.WARNING)
  logging.getLogger('httpcore').setLevel(logging.WARNING)

def verify_config(config: Config) -> list[dict]:
  """Configuration entries with a status column for the landing page."""
  result = []
  for name, value in format_config_for_displaying(config).items():
    result.append({"name": name, "value": value})
  if not config.EV_BACKEND_BASE_URL:
    result.append({"name": "WARNING", "value": "EV_BACKEND_BASE_URL not set. List pages will show 'Failed to load data'."})
  return result


def create_app() -> FastAPI:
  """Create and configure the FastAPI application."""
  logger = MiddlewareLogger.create()
  logger.log_function_header("create_app")
  # Errors of a previous create_app() call do not carry over
  initialization_errors.clear()
  # Configure logging first to ensure all initialization logs are properly formatted
  configure_logging()
  logger.log_function_output("Logging configured")
  # Load configuration
  try:
    config = load_config()
  except ValueError as e:
    initialization_errors.append({"component": "Configuration", "error": str(e)})
    logger.log_function_output(f"Invalid configuration, using defaults: {str(e)}")
    config = Config(
      EV_BACKEND_BASE_URL=os.getenv("EV_BACKEND_BASE_URL")
      ,EV_BACKEND_API_TOKEN=os.getenv("EV_BACKEND_API_TOKEN")
      ,EV_BACKEND_TIMEOUT_SECONDS=30.0
      ,TABLE_DEFAULT_PAGE_SIZE=TABLE_HARDCODED_CONFIG.DEFAULT_PAGE_SIZE
      ,TABLE_PAGE_SIZE_OPTIONS=list(TABLE_HARDCODED_CONFIG.DEFAULT_PAGE_SIZE_OPTIONS)
      ,TABLE_SIBLING_COUNT=TABLE_HARDCODED_CONFIG.DEFAULT_SIBLING_COUNT
      ,TABLE_SHOW_FIRST_LAST=True
    )
  logger.log_function_output("Configuration loaded")
  # Create FastAPI app instance
  app = FastAPI(title="EV Admin Console")
  # Store config in app state
  app.state.config = config

  if not config.EV_BACKEND_BASE_URL:
    initialization_errors.append({"component": "Backend", "error": "EV_BACKEND_BASE_URL not configured"})

  app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
  logger.log_function_output("CORS middleware added")

  # Version 2 routers
  v2_router_prefix = "/v2"
  try:
    app.include_router(chargers.router, tags=["Chargers"], prefix=v2_router_prefix)
    chargers.set_config(config, v2_router_prefix)
    logger.log_function_output("Chargers router included")
  except Exception as e:
    initialization_errors.append({"component": "Chargers Router", "error": str(e)})

  try:
    app.include_router(sessions.router, tags=["Sessions"], prefix=v2_router_prefix)
    sessions.set_config(config, v2_router_prefix)
    logger.log_function_output("Sessions router included")
  except Exception as e:
    initialization_errors.append({"component": "Sessions Router", "error": str(e)})

  # Final summary - log any initialization errors
  if initialization_errors:
    logger.log_function_output(f"App initialization completed with {len(initialization_errors)} initialization error(s):")
    for error in initialization_errors:
      logger.log_function_output(f"  - {error['component']}: {error['error']}")
  else:
    logger.log_function_output("App initialization completed successfully with no errors")
  logger.log_function_footer()
  return app

# Initialize the FastAPI application
app = create_app()

@app.get("/alive", response_class=PlainTextResponse)
async def health():
  """Health check endpoint for monitoring."""
  return PlainTextResponse(content="alive", status_code=200)

@app.get("/favicon.ico")
async def favicon(): return Response(status_code=204)


@app.get("/", response_class=HTMLResponse)
def root() -> str:
  errors_html = f'<div class="section"><h4>Errors</h4>{convert_to_flat_html_table(initialization_errors)}</div>' if initialization_errors else ""
  config_list = verify_config(app.state.config)

  return f"""
<!doctype html><html lang="en">
{generate_html_head("EV Admin Console", include_htmx=False)}
<body>
  <h1>EV Admin Console</h1>
  <p>Administrative console for chargers and charging sessions of the EV charging platform.</p>

  <div class="toolbar">
    <a href="/v2/chargers?format=ui" class="btn-primary"> Chargers </a>
    <a href="/v2/sessions?format=ui" class="btn-primary"> Charging Sessions </a>
  </div>

  <h4>Available Links</h4>
  <ul>
    <li><a href="/docs">/docs</a> - API Documentation</li>
    <li><a href="/openapi.json">/openapi.json</a> - OpenAPI JSON</li>
    <li><a href="/alive">/alive</a> - Health Check</li>
    <p>Version 2 Routers</p>
    <li><a href="/v2/chargers">/v2/chargers</a> - Chargers (<a href="/v2/chargers?format=html">HTML</a> + <a href="/v2/chargers?format=json">JSON</a> + <a href="/v2/chargers?format=ui">UI</a>)</li>
    <li><a href="/v2/sessions">/v2/sessions</a> - Charging Sessions (<a href="/v2/sessions?format=html">HTML</a> + <a href="/v2/sessions?format=json">JSON</a> + <a href="/v2/sessions?format=ui">UI</a>)</li>
  </ul>

  <div class="section">
    <h4>Configuration</h4>
    {convert_to_flat_html_table(config_list)}
  </div>

  {errors_html}
</body>
</html>
"""
