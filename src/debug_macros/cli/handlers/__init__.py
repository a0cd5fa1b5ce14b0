"""
CLI Command Handlers.
"""

from debug_macros.cli.handlers.expand import handle_expand

__all__ = ["handle_expand"]
