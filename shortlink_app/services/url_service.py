from typing import List, Optional

from shortlink_app.models.mapping import Mapping
from shortlink_app.repository.strategies import MappingRepository
from shortlink_app.services.allocator import CodeAllocator
from shortlink_app.services.exceptions import NotFound
from shortlink_app.services.validators import sanitize_short_code


class URLService:
    """
    URL Service with the repository and allocator injected.

    Routes only talk to this class. It returns SQLAlchemy Mapping instances
    and lets Pydantic serialize them (from_attributes=True).

    Methods are async for FastAPI; repository calls are sync and block for one
    round trip to the store.
    """

    def __init__(self, repository: MappingRepository, allocator: CodeAllocator):
        """
        Initialize URL service with dependencies.

        Args:
            repository: Mapping store for lookups
            allocator: Allocator bound to the same repository
        """
        self.repository = repository
        self.allocator = allocator

    async def create_short_url(
        self,
        long_url: Optional[str],
        owner_id: Optional[str] = None,
        deadline: Optional[float] = None
    ) -> Mapping:
        """Create a new short URL.

        Always mints a new code unless dedup is enabled in settings.
        """
        return self.allocator.allocate(long_url, owner_id=owner_id, deadline=deadline)

    async def resolve(self, short_code: str) -> Mapping:
        """Get mapping by short code.

        Read-only: clicks are counted separately by record_click().

        Raises:
            NotFound: If no mapping has this code
        """
        code = sanitize_short_code(short_code)
        mapping = self.repository.find_by_code(code) if code else None
        if mapping is None:
            raise NotFound(f"Short URL '{short_code}' not found")
        return mapping

    async def get_url_by_id(self, mapping_id: int) -> Mapping:
        """Get mapping by id, raising NotFound on a miss"""
        mapping = self.repository.find_by_id(mapping_id)
        if mapping is None:
            raise NotFound(f"URL with id {mapping_id} not found")
        return mapping

    async def list_urls(self) -> List[Mapping]:
        return self.repository.list_all()

    async def list_urls_for_owner(self, owner_id: str) -> List[Mapping]:
        return self.repository.list_by_owner(owner_id)

    async def record_click(self, short_code: str) -> Mapping:
        """
        Count one visit and return the mapping to redirect to.

        The increment is a single atomic UPDATE, so concurrent redirects never
        lose a click.

        Raises:
            NotFound: If no mapping has this code
        """
        code = sanitize_short_code(short_code)
        mapping = self.repository.increment_clicks(code) if code else None
        if mapping is None:
            raise NotFound(f"Short URL '{short_code}' not found")
        return mapping
