"""Error handling helpers for the storefront API."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class ErrorHandler:
    def handle_exception(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in storefront: %s", exc, exc_info=True)
        return {
            "message": "An internal error occurred while processing your request. Please try again later.",
            "retryable": False,
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }

    def handle_catalog_failure(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Payload for a catalog that could not be fetched; the client may retry."""
        logger.warning("Catalog unavailable: %s", exc)
        return {
            "message": "Products could not be loaded right now. Please try again in a moment.",
            "retryable": True,
            "fallback": True,
            "metadata": {"error": str(exc), "context": context or {}},
        }
