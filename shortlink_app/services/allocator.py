"""
Short code allocation.

CodeAllocator turns a long URL into a stored Mapping with a short code that no
other mapping uses. The repository's unique constraint on short_code is the
authority: the pre-insert lookup only avoids wasted inserts, and an insert
that loses a race to a concurrent allocation is retried like a collision.
"""

import time
from typing import Optional

from shortlink_app.logging_config import get_logger
from shortlink_app.models.mapping import Mapping
from shortlink_app.repository.strategies import MappingRepository
from shortlink_app.services.exceptions import AllocationExhausted, Cancelled, UniqueViolation
from shortlink_app.services.short_code_strategies import ShortCodeStrategy
from shortlink_app.services.validators import validate_long_url

logger = get_logger(__name__)


class CodeAllocator:
    """
    Generates, checks and commits unique short codes.

    The allocator holds no state between calls: concurrent allocate() calls
    only coordinate through the repository.
    """

    def __init__(
        self,
        repository: MappingRepository,
        strategy: ShortCodeStrategy,
        max_attempts: int = 10,
        dedup_long_urls: bool = False
    ):
        """
        Args:
            repository: Mapping store (owned by the caller)
            strategy: Candidate short code generator
            max_attempts: Candidate generations allowed per allocate() call
            dedup_long_urls: Return an existing mapping for an identical long URL
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.repository = repository
        self.strategy = strategy
        self.max_attempts = max_attempts
        self.dedup_long_urls = dedup_long_urls

    def allocate(
        self,
        long_url: str,
        owner_id: Optional[str] = None,
        cancel_token=None,
        deadline: Optional[float] = None
    ) -> Mapping:
        """
        Store long_url under a freshly generated, unused short code.

        Each attempt generates a candidate, skips it if the repository already
        has it, and otherwise inserts it. A UniqueViolation on insert means
        another allocation committed the same code after our lookup; that
        attempt is spent and the loop continues.

        Args:
            long_url: Absolute URL to shorten
            owner_id: Opaque session subject stored with the mapping
            cancel_token: Any object with ``is_set()`` (e.g. threading.Event);
                checked before every attempt
            deadline: time.monotonic() value after which no new attempt starts

        Returns:
            The inserted Mapping (or the existing one when dedup is on)

        Raises:
            InvalidInput: long_url is not an absolute URL (no store access)
            AllocationExhausted: every attempt collided
            Cancelled: cancel_token was set or deadline passed between attempts
            StoreUnavailable: the repository could not be reached
        """
        long_url = validate_long_url(long_url)

        if self.dedup_long_urls:
            existing = self.repository.find_by_long_url(long_url)
            if existing is not None:
                logger.debug("Reusing short code %s for %s", existing.short_code, long_url)
                return existing

        for attempt in range(1, self.max_attempts + 1):
            self._check_cancelled(cancel_token, deadline, attempt)

            short_code = self.strategy.generate()

            if self.repository.find_by_code(short_code) is not None:
                logger.debug(
                    "Short code collision on %s (attempt %d/%d)",
                    short_code, attempt, self.max_attempts
                )
                continue

            try:
                mapping = self.repository.insert(long_url, short_code, owner_id)
            except UniqueViolation:
                logger.warning(
                    "Lost insert race for short code %s (attempt %d/%d), retrying",
                    short_code, attempt, self.max_attempts
                )
                continue

            logger.info("Allocated short code %s (id=%s) after %d attempt(s)",
                        mapping.short_code, mapping.id, attempt)
            return mapping

        logger.error(
            "Short code allocation exhausted after %d attempts "
            "(code length %s); check short_code_length or the mapping store",
            self.max_attempts, getattr(self.strategy, "length", "?")
        )
        raise AllocationExhausted(self.max_attempts)

    @staticmethod
    def _check_cancelled(cancel_token, deadline: Optional[float], attempt: int):
        if cancel_token is not None and cancel_token.is_set():
            raise Cancelled(f"Allocation cancelled before attempt {attempt}")
        if deadline is not None and time.monotonic() >= deadline:
            raise Cancelled(f"Allocation deadline passed before attempt {attempt}")
