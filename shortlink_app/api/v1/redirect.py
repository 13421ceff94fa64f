from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_url_service

router = APIRouter(tags=["redirect"])


@router.get("/{short_code}")
async def redirect_to_long_url(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """
    Redirect to the original URL.

    The click is counted with one atomic UPDATE before redirecting; an
    unknown code raises NotFound, which the app turns into a 404.
    """
    mapping = await url_service.record_click(short_code)
    return RedirectResponse(url=mapping.long_url, status_code=status.HTTP_302_FOUND)
