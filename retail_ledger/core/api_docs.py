from retail_ledger.schemas.common import ErrorOut


_ERROR_EXAMPLES: dict[int, tuple[str, str]] = {
    400: ("invalid_date", "Invalid date: 31/02/2024"),
    404: ("location_not_found", "Warehouse not found: warehouse-id"),
    405: ("method_not_allowed", "Method Not Allowed"),
    409: ("insufficient_stock", "Insufficient stock for product product-id. Available: 10, requested: 15"),
    422: ("validation_error", "Validation failed"),
    500: ("storage_error", "Could not save changes to the database"),
}


def error_responses(*status_codes: int) -> dict[int, dict]:
    responses: dict[int, dict] = {}
    for status_code in status_codes:
        code, message = _ERROR_EXAMPLES.get(status_code, ("http_error", "HTTP error"))
        responses[status_code] = {
            "model": ErrorOut,
            "description": message,
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": code,
                            "message": message,
                            "request_id": "request-id",
                            "path": "/example",
                            "details": None,
                        }
                    }
                }
            },
        }
    return responses
