"""FastAPI routes for reading and revoking UTM attribution."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas.cookie import (
    AttributionResponse,
    AttributionValueResponse,
    ClearAttributionResponse,
)
from ..tracking.codec import normalize_key
from ..tracking.cookie import UtmCookie
from ..tracking.exceptions import UnknownKey
from .dependencies import get_utm_cookie


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["attribution"])


@router.get(
    "/attribution",
    response_model=AttributionResponse,
    summary="Get current UTM attribution",
)
async def read_attribution(
    utm: UtmCookie = Depends(get_utm_cookie),
) -> AttributionResponse:
    """Return all five UTM values for the current visitor (null when absent)."""
    return AttributionResponse(**utm.get())


@router.get(
    "/attribution/{key}",
    response_model=AttributionValueResponse,
    summary="Get a single UTM value",
    description="Accepts the canonical key (utm_source) or the short form (source).",
)
async def read_attribution_value(
    key: str,
    utm: UtmCookie = Depends(get_utm_cookie),
) -> AttributionValueResponse:
    try:
        value = utm.get(key)
    except UnknownKey as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    return AttributionValueResponse(key=normalize_key(key), value=value)


@router.delete(
    "/attribution",
    response_model=ClearAttributionResponse,
    summary="Revoke UTM attribution",
    description=(
        "Expires the attribution cookie. Values already read for this request "
        "are still returned; the next request starts without attribution."
    ),
)
async def clear_attribution(
    utm: UtmCookie = Depends(get_utm_cookie),
) -> ClearAttributionResponse:
    utm.clear()
    logger.info("UTM attribution cleared: cookie=%s", utm.name)
    return ClearAttributionResponse(
        cleared=True,
        attribution=AttributionResponse(**utm.get()),
    )
