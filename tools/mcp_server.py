# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines every MCP tool this server exposes.  Each tool is a thin
#   wrapper around a core/ function. It logs the call, delegates, and
#   turns the result into ONE text reply.
#
# THE TOOLS:
#   get-chuck-joke               → core/jokes.py
#   get-chuck-joke-by-category   → core/jokes.py
#   get-chuck-categories         → core/jokes.py
#   get-dad-joke                 → core/jokes.py
#   validate-address             → core/usps.py + core/address_verdict.py
#
# HOW validate-address WORKS (the flow):
#   1. Build a SubmittedAddress from the tool arguments
#   2. The VerificationClient (USPS) turns it into Matched/Unmatched
#   3. The verdict engine classifies the outcome
#   4. The verdict's message is returned as the tool's text
#
# ERROR TEXT:
#   Tools never raise to the MCP client.  Joke failures come back as
#   "Error: <message>"; address failures come back as an Invalid verdict.
#
# RUNNING THIS SERVER:
#     a) python main.py                (reads .env, then starts)
#     b) python -m tools.mcp_server    (environment only)
#   MCP_TRANSPORT=http (default) serves streamable HTTP on HOST:PORT/mcp;
#   MCP_TRANSPORT=stdio talks over stdin/stdout.
# =============================================================================

import logging
import sys

from fastmcp import FastMCP

# The tools layer depends on core/ and nothing else.
from core.address_verdict import evaluate, render_verdict
from core.http import UpstreamError
from core.jokes import get_chuck_categories as fetch_chuck_categories
from core.jokes import get_chuck_joke as fetch_chuck_joke
from core.jokes import get_dad_joke as fetch_dad_joke
from core.models import SubmittedAddress, VerificationClient
from core.settings import Settings
from core.usps import USPSClient

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because with the stdio transport, STDOUT carries the MCP
# JSON messages.  A stray log line on stdout would corrupt the stream.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for the text sent back
#     - YELLOW for intermediate status/progress messages
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (text output)
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log the tool's text reply in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {text}{_RESET}")
    return text


# =============================================================================
# Server state
# =============================================================================
# Settings and the verification client are created lazily from the
# environment on first use.  configure() replaces both (main.py calls it
# at start-up; tests call it with fakes).
# =============================================================================
mcp = FastMCP("mcp-streamable-http")

_settings: Settings | None = None
_verification_client: VerificationClient | None = None


def configure(
    settings: Settings,
    verification_client: VerificationClient | None = None,
) -> None:
    """Install settings and (optionally) a verification client."""
    global _settings, _verification_client
    _settings = settings
    _verification_client = verification_client or USPSClient.from_settings(settings)


def _current_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def _get_verification_client() -> VerificationClient:
    global _verification_client
    if _verification_client is None:
        _verification_client = USPSClient.from_settings(_current_settings())
    return _verification_client


# =============================================================================
# JOKE TOOLS
# =============================================================================
# Straight forwarding: call the API, return the joke text.  UpstreamError
# becomes "Error: ..." so the caller always gets a readable reply.
# =============================================================================
@mcp.tool(name="get-chuck-joke")
def get_chuck_joke() -> str:
    """Get a random Chuck Norris joke"""
    _log_request("get-chuck-joke")
    try:
        text = fetch_chuck_joke(timeout=_current_settings().http_timeout)
    except UpstreamError as e:
        _log_status(f"Chuck Norris API failed: {e.message}")
        text = f"Error: {e.message}"
    return _log_response("get-chuck-joke", text)


@mcp.tool(name="get-chuck-joke-by-category")
def get_chuck_joke_by_category(category: str) -> str:
    """Get a random Chuck Norris joke by category

    Args:
        category: Category of the Chuck Norris joke (see get-chuck-categories).
    """
    _log_request("get-chuck-joke-by-category", category=category)
    try:
        text = fetch_chuck_joke(category, timeout=_current_settings().http_timeout)
    except UpstreamError as e:
        _log_status(f"Chuck Norris API failed: {e.message}")
        text = f"Error: {e.message}"
    return _log_response("get-chuck-joke-by-category", text)


@mcp.tool(name="get-chuck-categories")
def get_chuck_categories() -> str:
    """Get all available categories for Chuck Norris jokes"""
    _log_request("get-chuck-categories")
    try:
        categories = fetch_chuck_categories(timeout=_current_settings().http_timeout)
        _log_status(f"Got {len(categories)} categories")
        text = ", ".join(categories)
    except UpstreamError as e:
        _log_status(f"Chuck Norris API failed: {e.message}")
        text = f"Error: {e.message}"
    return _log_response("get-chuck-categories", text)


@mcp.tool(name="get-dad-joke")
def get_dad_joke() -> str:
    """Get a random dad joke"""
    _log_request("get-dad-joke")
    try:
        text = fetch_dad_joke(timeout=_current_settings().http_timeout)
    except UpstreamError as e:
        _log_status(f"icanhazdadjoke failed: {e.message}")
        text = f"Error: {e.message}"
    return _log_response("get-dad-joke", text)


# =============================================================================
# ADDRESS TOOL: validate-address
# =============================================================================
# The only tool with real decision logic, and that logic lives in
# core/address_verdict.py, not here.  This wrapper just wires the USPS
# client to the engine.
# =============================================================================
@mcp.tool(name="validate-address")
def validate_address(
    street_address: str,
    city: str,
    state: str,
    zip_code: str | None = None,
) -> str:
    """Validate a US address using the USPS API

    Args:
        street_address: The street address (e.g., "123 Main St Apt 4").
        city: The city.
        state: The 2-letter state code.
        zip_code: The 5-digit ZIP code (optional).

    Returns one of:
        "Address is valid."
        "Address was corrected. Suggested address: ..."
        "Address could be more accurate. Suggested address: ..."
        "Invalid Address. Reason: ..." / "Address is invalid."
    """
    _log_request("validate-address", street_address=street_address,
                 city=city, state=state, zip_code=zip_code)

    submitted = SubmittedAddress(
        street=street_address,
        city=city,
        state=state,
        zip_code=zip_code or None,
    )

    outcome = _get_verification_client().verify(submitted)
    _log_status(f"USPS outcome: {type(outcome).__name__}")

    verdict = evaluate(submitted, outcome)
    _log_status(f"Verdict: {type(verdict).__name__}")
    return _log_response("validate-address", render_verdict(verdict))


# =============================================================================
# Server entry point
# =============================================================================
def run(settings: Settings | None = None) -> None:
    """Start the MCP server with the configured transport."""
    settings = settings or _current_settings()
    configure(settings)
    logging.getLogger().setLevel(settings.log_level)

    if settings.transport == "stdio":
        logging.info("Starting MCP server on stdio")
        mcp.run()
        return

    logging.info(
        f"MCP Streamable HTTP Server listening on "
        f"{settings.host}:{settings.port}{settings.path}"
    )
    mcp.run(
        transport="http",
        host=settings.host,
        port=settings.port,
        path=settings.path,
        stateless_http=True,
    )


if __name__ == "__main__":
    run()
