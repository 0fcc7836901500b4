"""
Page-by-page loader for the raw readings table.
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from app.client.api_client import ApiClientError, MeterApiClient
from app.config import settings
from app.schemas.meter_reading import PaginatedMeterData

logger = logging.getLogger(__name__)


def describe_load_error(error: ApiClientError) -> str:
    """User-facing message for a failed page load."""
    if error.status == 404:
        return "API endpoint not found - Check server configuration"
    if error.status == 0:
        return "Cannot connect to server. Please check if the backend is running."
    if error.status >= 500:
        return "Server error occurred. Please try again later."
    return "Failed to load dashboard data."


class DashboardPager:
    """
    Accumulates ``/api/alldata`` pages for an incrementally loaded table.

    ``load_first`` resets and fetches page 0; ``load_next`` appends the
    following page while the server reports more rows. A failed load keeps
    the rows already shown and records ``error_message``.
    """

    def __init__(self, client: MeterApiClient, page_size: Optional[int] = None):
        self.client = client
        self.page_size = page_size or settings.DEFAULT_PAGE_SIZE
        self.reset()

    def reset(self) -> None:
        self.rows: List[Dict[str, Any]] = []
        self.current_page = 0
        self.total_records = 0
        self.total_pages = 0
        self.has_more = True
        self.error_message = ""

    @property
    def summary(self) -> str:
        return f"Showing {len(self.rows)} of {self.total_records} records"

    @property
    def progress(self) -> float:
        """Percentage of all records loaded so far."""
        if self.total_records <= 0:
            return 0.0
        return len(self.rows) / self.total_records * 100

    def _fetch(self, page: int) -> Optional[PaginatedMeterData]:
        try:
            return PaginatedMeterData.model_validate(
                self.client.get_all_data(page, self.page_size)
            )
        except ApiClientError as e:
            logger.error(f"Dashboard: error loading page {page + 1}: {e.message}")
            self.error_message = describe_load_error(e)
        except ValidationError as e:
            logger.error(f"Dashboard: malformed page {page + 1}: {e}")
            self.error_message = "Failed to load dashboard data."
        return None

    def load_first(self) -> bool:
        """Reload from page 0. Returns False when the load failed."""
        self.reset()
        logger.info(f"Dashboard: loading page 1 with {self.page_size} items per page")
        response = self._fetch(0)
        if response is None:
            self.has_more = False
            return False

        self.rows = [record.model_dump() for record in response.data]
        self.total_records = response.total
        self.total_pages = response.totalPages
        self.has_more = response.hasMore and bool(response.data)
        return True

    def load_next(self) -> bool:
        """Append the next page. Returns False when nothing was loaded."""
        if not self.has_more:
            return False

        next_page = self.current_page + 1
        logger.info(f"Dashboard: loading next page {next_page + 1}...")
        response = self._fetch(next_page)
        if response is None:
            return False

        self.error_message = ""
        self.current_page = next_page
        self.rows.extend(record.model_dump() for record in response.data)
        self.total_records = response.total
        self.total_pages = response.totalPages
        self.has_more = response.hasMore and bool(response.data)
        return True
