"""Response conventions for the Job Tracker API.

CONVENTIONS
-----------

1. GET single resource / POST creating one:
   Return StandardResponse: {"status": "success", "data": {...}, "message": null}

2. GET collection (unpaginated):
   Return: {"status": "success", "data": [...], "total": int}

3. PUT mutation:
   Return StandardResponse with the updated resource.

4. DELETE (and share revocation):
   Return: {"status": "success", "message": "..."}

5. Binary export:
   Raw bytes with Content-Disposition: attachment; filename="<name>_<YYYY-MM-DD>.<ext>"

ERRORS
------
All errors use standard FastAPI HTTPException, which returns:
   {"detail": "Human-readable error message"}

STATUS CODES
------------
- 200: Success
- 400: Missing required input (e.g. neither config_id nor ad_hoc_config)
- 401: Missing or wrong Basic credentials
- 403: Shared report exists but access is denied ("Access denied", always)
- 404: Configuration or share not found
- 422: Request body failed validation
- 500: Rendering failed; no partial artifact is returned
"""

from typing import Any, Dict, List


def collection(data: List[Dict]) -> Dict[str, Any]:
    """Wrap an unpaginated list result."""
    return {
        "status": "success",
        "data": data,
        "total": len(data),
    }


def success(message: str = "OK", **extra) -> Dict[str, Any]:
    """Standard mutation response."""
    return {"status": "success", "message": message, **extra}
