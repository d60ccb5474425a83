"""Portfolio return endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies.providers import get_quote_source
from app.schemas import ErrorResponse, PortfolioRequest
from modus.errors import ErrorKind, ModusError
from modus.returns import QuoteSource, total_returns

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS_BY_KIND = {
    ErrorKind.INVALID_DATE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.EMPTY_DATA_SET: status.HTTP_404_NOT_FOUND,
    ErrorKind.FETCH_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.DESERIALIZE_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.DATA_INCONSISTENCY: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.PROVIDER: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@router.post(
    "/returns",
    response_model=dict[str, float],
    responses={code: {"model": ErrorResponse} for code in sorted(set(_STATUS_BY_KIND.values()))},
)
async def post_returns(
    payload: PortfolioRequest,
    provider: QuoteSource = Depends(get_quote_source),
) -> dict[str, float]:
    """Return the cumulative percentage return of the portfolio per date."""

    try:
        return await total_returns(payload.to_domain(), provider)
    except ModusError as exc:
        logger.warning("Portfolio returns failed (%s): %s", exc.kind.value, exc)
        raise HTTPException(
            status_code=_STATUS_BY_KIND[exc.kind],
            detail={"error": exc.kind.value, "message": str(exc)},
        ) from exc


__all__ = ["post_returns"]
