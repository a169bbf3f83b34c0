# =============================================================================
# main.py  —  Entry Point for the MCP tool server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads .env into the environment (USPS_CLIENT_ID, PORT, ...)
#   2. Builds Settings from the environment (fails fast on bad values)
#   3. Starts the FastMCP server (tools/mcp_server.py) on the configured
#      transport: streamable HTTP at http://HOST:PORT/mcp by default
# =============================================================================

from dotenv import load_dotenv

# Load environment variables from .env file.  This must happen BEFORE
# Settings.from_env() reads them.
load_dotenv()

from core.settings import Settings
from tools.mcp_server import run


def main() -> None:
    run(Settings.from_env())


if __name__ == "__main__":
    main()
