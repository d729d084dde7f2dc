"""
Translation of service exceptions into HTTP responses.

Endpoints wrap service calls in ``with service_errors():`` instead of
repeating the same ``except`` blocks in every handler.
"""

from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, status

from dj_agency_api.app.core.errors import AccessDeniedError, InvalidReferenceError, NotFoundError


@contextmanager
def service_errors() -> Iterator[None]:
    try:
        yield
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidReferenceError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except AccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
