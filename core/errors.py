# core/errors.py

from fastapi import HTTPException

from core.logging_config import logger


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors (APIError carries .message)
      • Errors that only carry args
      • Generic Python exceptions
    """

    message = getattr(error, "message", None)
    if message:
        return str(message)

    if getattr(error, "args", None):
        return str(error.args[0])

    return str(error) or error.__class__.__name__


def handle_supabase_error(
    error: Exception,
    operation: str = "Database operation",
    status_code: int = 500,
) -> HTTPException:
    """
    Log a Supabase failure and build an HTTPException for it.
    Returns the exception (doesn't raise) so the caller can re-raise with `from`.

    Args:
        error: The exception that occurred
        operation: What failed (e.g., "Audit log lookup")
        status_code: HTTP status code (default 500)
    """
    detail = extract_supabase_error(error)
    logger.error(f"{operation}: {detail}")

    lowered = detail.lower()
    if "invalid input syntax" in lowered:
        return HTTPException(status_code=400, detail=f"{operation}: Invalid identifier")
    # Single-row lookups that matched nothing. A missing relation or column
    # ("... does not exist") is a schema fault and keeps status_code.
    if "pgrst116" in lowered or "contains 0 rows" in lowered:
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    return HTTPException(status_code=status_code, detail=f"{operation} failed")
