"""NWS client for fetching the hourly observation history of an airport."""
import logging
import re
from typing import List

import requests

from .config import MonitorConfig

logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_html_tags(text: str) -> str:
    """Remove markup, line breaks and padding from a table cell."""
    if text is None:
        return ""
    text = TAG_PATTERN.sub("", text)
    return text.replace("\r", "").replace("\n", "").strip()


class NWSClient:
    """Client for the forecast.weather.gov observation history pages."""

    # The first rows of the page are table headers
    HEADER_ROWS = 3

    def __init__(self, config: MonitorConfig):
        """Initialize NWS client.

        Args:
            config: Monitor configuration
        """
        self.config = config
        self.session = requests.Session()

    def fetch_page(self) -> str:
        """Download the observation history page.

        Returns:
            Page body as text

        Raises:
            ValueError: If no airport code is configured
            requests.RequestException: If the request fails
        """
        if not self.config.airport_code:
            raise ValueError("No airport code configured")

        url = self.config.observation_url
        logger.info(f"Fetching observation history from {url}")

        try:
            response = self.session.get(url, timeout=self.config.request_timeout)
            response.raise_for_status()
            return response.text
        except requests.RequestException as e:
            logger.error(f"Failed to fetch observation history: {e}")
            raise

    def split_rows(self, html: str) -> List[List[str]]:
        """Split the page into rows of cell texts.

        Args:
            html: Page body

        Returns:
            Data rows, newest first, limited to the configured row count
        """
        rows = []
        for raw_row in html.split("</tr>"):
            cells = raw_row.replace("</td>", "|").split("|")
            rows.append([strip_html_tags(cell) for cell in cells])

        data_rows = rows[self.HEADER_ROWS:self.HEADER_ROWS + self.config.row_limit]
        logger.debug(f"Split {len(rows)} rows, keeping {len(data_rows)}")
        return data_rows

    def fetch_rows(self) -> List[List[str]]:
        """Fetch the page and return its data rows."""
        rows = self.split_rows(self.fetch_page())
        logger.info(f"Received {len(rows)} observation rows for {self.config.airport_code}")
        return rows

    def close(self):
        """Close the HTTP session."""
        self.session.close()
