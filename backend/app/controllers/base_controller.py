"""
Base controller class.
Controllers coordinate services and turn response envelopes into HTTP responses.
"""

from abc import ABC
from typing import Optional

from fastapi import Response, status
from fastapi.responses import JSONResponse

from app.schemas.common import ResponseEnvelope


class BaseController(ABC):
    """Base controller class for all controllers."""

    @staticmethod
    def to_http_response(envelope: Optional[ResponseEnvelope]) -> Response:
        """
        Map an envelope to an HTTP response using its status code.

        No envelope and 204 both produce an empty 204 response. Every other
        code is passed through with the envelope as the body.
        """
        if envelope is None or envelope.status_code == status.HTTP_204_NO_CONTENT:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return JSONResponse(status_code=envelope.status_code, content=envelope.to_content())
