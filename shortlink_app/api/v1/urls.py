import time

from fastapi import APIRouter, Depends, status
from shortlink_app.config import settings
from shortlink_app.schemas.url import URLCreate, URLResponse, URLList
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_url_service, get_owner_id

# Every route runs inside a session, like the cookie-issuing middleware
# in front of the whole URL API
router = APIRouter(tags=["urls"], dependencies=[Depends(get_owner_id)])


@router.post("/url", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    url_data: URLCreate,
    owner_id: str = Depends(get_owner_id),
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL owned by the caller's session"""
    deadline = time.monotonic() + settings.allocation_timeout
    return await url_service.create_short_url(
        url_data.long_url,
        owner_id=owner_id,
        deadline=deadline
    )


@router.get("/urls", response_model=URLList)
async def list_urls(url_service: URLService = Depends(get_url_service)):
    """List every short URL"""
    return {"urls": await url_service.list_urls()}


@router.get("/urls/mine", response_model=URLList)
async def list_my_urls(
    owner_id: str = Depends(get_owner_id),
    url_service: URLService = Depends(get_url_service)
):
    """List the short URLs created by the caller's session"""
    return {"urls": await url_service.list_urls_for_owner(owner_id)}


@router.get("/url/id/{mapping_id}", response_model=URLResponse)
async def get_url_by_id(
    mapping_id: int,
    url_service: URLService = Depends(get_url_service)
):
    """Get a short URL by its numeric id"""
    return await url_service.get_url_by_id(mapping_id)


@router.get("/url/{short_code}", response_model=URLResponse)
async def get_url_info(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get information about a short URL (no click is counted)"""
    return await url_service.resolve(short_code)
