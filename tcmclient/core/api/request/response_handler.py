"""Response handler for API responses."""
import json
from typing import Any

from ...exceptions import HTTPStatusError, UnauthorizedError


class ResponseHandler:
    """Parses and classifies API responses."""

    @staticmethod
    def parse_body(response_text: str) -> Any:
        """Parses a JSON body. Empty bodies give None, non-JSON is returned as text."""
        if not response_text or not response_text.strip():
            return None
        try:
            return json.loads(response_text)
        except json.JSONDecodeError:
            return response_text

    @staticmethod
    def is_success(status: int) -> bool:
        return 200 <= status < 300

    @staticmethod
    def classify(status: int, data: Any, detect_unauthorized: bool = True) -> Any:
        """
        Returns the parsed body of a successful response or raises.

        Args:
            status: HTTP status code
            data: Parsed response body
            detect_unauthorized: Raise UnauthorizedError for 401 instead of
                                 the generic HTTPStatusError

        Raises:
            UnauthorizedError: On 401 when detect_unauthorized is set
            HTTPStatusError: On any other non-2xx status
        """
        if ResponseHandler.is_success(status):
            return data

        if status == 401 and detect_unauthorized:
            raise UnauthorizedError()

        raise HTTPStatusError.from_response(status, data)
