"""
Error Response Factory for the Charades game

Provides standardized error and success response creation, plus the
decorator that turns exceptions raised by Socket.IO handlers into `error`
events.
"""

import logging
import traceback
from functools import wraps
from typing import Dict, Optional, Tuple

from flask_socketio import emit

from charades.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


class ErrorResponseFactory:
    """Factory responsible for creating standardized error and success responses."""

    def create_success_response(self, data: Dict) -> Dict:
        """
        Create standardized success response.

        Args:
            data: Response data

        Returns:
            Standardized success response
        """
        return {
            "success": True,
            "data": data
        }

    def create_error_response(self, code: ErrorCode, message: str, details: Optional[Dict] = None) -> Dict:
        """
        Create standardized error response.

        Args:
            code: Error code enum
            message: Human-readable error message
            details: Optional additional error details

        Returns:
            Standardized error response
        """
        return {
            "success": False,
            "error": {
                "code": code.value,
                "message": message,
                "details": details or {}
            }
        }

    def emit_error(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        """Emit a standardized error response to the requesting client."""
        error_response = self.create_error_response(code, message, details)

        logger.warning(f"Emitting error: {code.value} - {message}")
        emit('error', error_response)

    def emit_validation_error(self, error: ValidationError):
        self.emit_error(error.code, error.message, error.details)

    def handle_exception(self, e: Exception, context: str = "Unknown") -> Tuple[ErrorCode, str]:
        """
        Map an exception to an error code and message.

        Validation and game state errors keep their own code; anything else
        is logged with its traceback and reported as INTERNAL_ERROR.
        """
        if isinstance(e, ValidationError):
            return e.code, e.message

        logger.error(f"Unexpected exception in {context}: {str(e)}")
        logger.error(f"Exception traceback: {traceback.format_exc()}")

        return ErrorCode.INTERNAL_ERROR, "An internal error occurred"

    def error_response_for(self, e: Exception, context: str = "Unknown") -> Dict:
        """Build the error response for an exception (used by the REST API)."""
        if isinstance(e, ValidationError):
            return self.create_error_response(e.code, e.message, e.details)
        code, message = self.handle_exception(e, context)
        return self.create_error_response(code, message)


def with_error_handling(func):
    """
    Decorator for Socket.IO event handlers to provide consistent error handling.

    Args:
        func: Socket.IO event handler function

    Returns:
        Wrapped function with error handling
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            factory = ErrorResponseFactory()
            factory.emit_validation_error(e)
        except Exception as e:
            factory = ErrorResponseFactory()
            error_code, error_message = factory.handle_exception(e, func.__name__)
            factory.emit_error(error_code, error_message)

    return wrapper
