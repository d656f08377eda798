"""Exception handling for workflow web endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar import Response
from litestar.status_codes import HTTP_400_BAD_REQUEST

if TYPE_CHECKING:  # pragma: no cover
    from litestar import Request

    from easyflow.exceptions import WorkflowConstructionError

__all__ = ["construction_error_handler"]


def construction_error_handler(
    _request: Request,
    exc: WorkflowConstructionError,
) -> Response:
    """Exception handler for WorkflowConstructionError.

    A workflow that cannot be formalized (for instance one left with several
    floating roots) is reported as a bad request rather than a server error.

    Args:
        _request: The Litestar request object.
        exc: The construction error.

    Returns:
        Response with error details.
    """
    return Response(
        content={
            "error": "invalid_workflow",
            "type": type(exc).__name__,
            "message": str(exc),
        },
        status_code=HTTP_400_BAD_REQUEST,
        media_type="application/json",
    )
