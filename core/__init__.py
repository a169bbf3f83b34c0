# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL business logic: the address verdict engine, the
# USPS client, the joke API clients, and configuration.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any protocol framework.
#   The verdict engine (address_verdict.py) goes further: it does no I/O at
#   all, so it can be tested exhaustively without a network.
# =============================================================================
