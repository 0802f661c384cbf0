"""
Request handlers.

    MethodHandler   Dispatch by HTTP method, with automatic OPTIONS and
                    405 Method Not Allowed replies.
"""

from .methods import MethodHandler, METHOD_NOT_ALLOWED_BODY

__all__ = ["MethodHandler", "METHOD_NOT_ALLOWED_BODY"]
