import logging
import httpx
from pydantic import ValidationError
from devscope.config import CONTRIBUTIONS_API_URL
from devscope.models.profile import ContributionStats
from devscope.refinery.streaks import compute_streaks, parse_contributions

logger = logging.getLogger(__name__)


class ContributionProbe:
    """
    Reads the public contribution calendar for a handle. Stats are optional
    enrichment, so every failure degrades to zeros instead of raising.
    """

    def __init__(self, url_template: str = CONTRIBUTIONS_API_URL):
        self.url_template = url_template

    async def fetch_stats(self, client: httpx.AsyncClient, handle: str) -> ContributionStats:
        url = self.url_template.format(handle=handle)
        try:
            response = await client.get(url)
            if response.status_code != 200:
                logger.warning("Contribution stats unavailable for %s (HTTP %s)", handle, response.status_code)
                return ContributionStats()
            days, totals = parse_contributions(response.json())
        except (httpx.HTTPError, ValueError, ValidationError, AttributeError) as e:
            logger.warning("Failed to fetch contribution stats for %s: %s", handle, e)
            return ContributionStats()

        stats = compute_streaks(days, totals)
        logger.debug("Contribution stats for %s: %s", handle, stats)
        return stats
