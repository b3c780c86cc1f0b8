"""Request handlers."""

from .ui import UIHandler, error_response, success_response

__all__ = ["UIHandler", "error_response", "success_response"]
