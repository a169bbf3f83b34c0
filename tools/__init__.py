# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool wrappers.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the MCP protocol and core/.
#   Each tool:
#     1. Logs the incoming call
#     2. Calls a core/ function
#     3. Returns ONE text reply (never raises to the MCP client)
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT decide whether an address is valid (core/address_verdict.py)
#   - They do NOT talk HTTP themselves (core/http.py)
# =============================================================================
