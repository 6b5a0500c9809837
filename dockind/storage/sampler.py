# ==============================================
# DocumentSampler
# ==============================================
#
# PURPOSE:
#   Fetch a bounded sample of raw documents from one collection,
#   page by page, and hand back a fully materialized list.
#
# WHY THIS CLASS EXISTS:
#   The inference engine must only ever see a complete, already
#   bounded document list. All pagination lives here.
#
# DATA CLASS: SamplingPolicy
# --------------------------
#   - mode: "absolute" | "relative"
#   - absolute_value: int     → N documents max
#   - relative_value: float   → P percent of the collection
#   - batch_size: int         → max documents per page (default 1000)
#
# CLASS: DocumentSampler
# ----------------------
#   - target_size(count: int | None) -> int
#       Unknown or zero count → assume 1000 documents.
#       absolute → absolute_value
#       relative → round(count / 100 * relative_value)
#       A zero result falls back to 1000.
#
#   - page_limits(size: int) -> list[int]
#       Page sizes, the last page holding the remainder.
#
#   - sample(collection) -> list[dict]
#       count_documents → target_size → find().skip().limit() per page.
#       Stops early when a page comes back short.
#
# ==============================================

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from dockind.analysis import round_half_up
from dockind.config import SamplingConfig
from dockind.errors import ErrorCode, ReverseEngineeringError

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 1000
DEFAULT_SIZE = 1000


@dataclass(frozen=True)
class SamplingPolicy:
    mode: str = "absolute"
    absolute_value: int = 1000
    relative_value: float = 10
    batch_size: int = 1000

    def __post_init__(self):
        if self.mode not in ("absolute", "relative"):
            raise ValueError(f"Sampling mode must be 'absolute' or 'relative', got {self.mode!r}")
        if self.batch_size < 1:
            raise ValueError("batch_size must be positive")

    @classmethod
    def from_config(cls, config: SamplingConfig) -> "SamplingPolicy":
        return cls(
            mode=config.mode,
            absolute_value=config.absolute_value,
            relative_value=config.relative_value,
            batch_size=config.batch_size,
        )

    def describe(self) -> str:
        """Human readable form, e.g. 'relative 10%' or 'absolute 1000 records max'."""
        if self.mode == "relative":
            value = self.relative_value
            if float(value).is_integer():
                value = int(value)
            return f"relative {value}%"
        return f"absolute {self.absolute_value} records max"


class DocumentSampler:
    """
    Retrieves a capped list of raw documents from a pymongo collection.
    """

    def __init__(self, policy: Optional[SamplingPolicy] = None):
        self.policy = policy or SamplingPolicy()

    def target_size(self, count: Optional[int]) -> int:
        """
        Number of documents to sample for a collection holding `count` documents.

        Args:
            count: Collection size, or None if it could not be counted

        Returns:
            A positive document count
        """
        amount = count if count and count > 0 else DEFAULT_COUNT

        if self.policy.mode == "absolute":
            size = self.policy.absolute_value
        else:
            size = round_half_up(amount / 100 * self.policy.relative_value)

        return size if size and size > 0 else DEFAULT_SIZE

    def page_limits(self, size: int) -> List[int]:
        batch = self.policy.batch_size
        pages = math.ceil(size / batch) if size > batch else 1
        limits = [batch] * (pages - 1)
        remainder = size - batch * (pages - 1)
        limits.append(remainder)
        return limits

    def sample(self, collection) -> List[Dict[str, Any]]:
        """
        Fetch the sample for one collection.

        Args:
            collection: A pymongo Collection (or anything with the same
                        count_documents / find interface)

        Returns:
            List of raw documents, at most target_size(count) long

        Raises:
            ReverseEngineeringError: If fetching documents fails
        """
        name = getattr(collection, "name", "?")

        try:
            count = collection.count_documents({})
        except PyMongoError as e:
            logger.warning("Could not count documents in '%s', assuming %d: %s", name, DEFAULT_COUNT, e)
            count = None

        size = self.target_size(count)
        documents: List[Dict[str, Any]] = []
        offset = 0

        try:
            for limit in self.page_limits(size):
                page = list(collection.find().skip(offset).limit(limit))
                documents.extend(page)
                offset += len(page)
                if len(page) < limit:
                    break
        except PyMongoError as e:
            raise ReverseEngineeringError(ErrorCode.GET_DATA, e, cause=e) from e

        logger.debug("Sampled %d of %s documents from '%s'", len(documents), count, name)
        return documents
