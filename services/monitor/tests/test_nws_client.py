"""Unit tests for the NWS observation history client."""
import os
from unittest.mock import Mock

import pytest
import requests

from precip_monitor.config import MonitorConfig
from precip_monitor.nws_client import NWSClient, strip_html_tags

HEADER = (
    '<table><tr><th rowspan="3">Date</th><th rowspan="3">Time</th></tr>\n'
    "<tr><th>Max.</th><th>Min.</th></tr>\n"
    "<tr><th>1 hr</th><th>3 hr</th></tr>\n"
)


def data_row(day, hour, precip=""):
    cells = [f"{day:02d}", f"{hour:02d}:53", "S 9", "10.00", "Rain", "OVC028", "61", "54",
             "", "", "87%", "NA", "NA", "29.92", "1013.2", precip, "", ""]
    return "<tr>" + "".join(f'<td align="right">{cell}</td>' for cell in cells) + "</tr>\n"


def page(rows):
    return HEADER + "".join(rows) + "</table>"


@pytest.fixture
def client():
    return NWSClient(MonitorConfig(airport_code="KORD", retention_period=72))


class TestStripHtmlTags:
    def test_strips_markup_and_whitespace(self):
        assert strip_html_tags('<td align="right">  12<br>\r\n') == "12"

    def test_none(self):
        assert strip_html_tags(None) == ""


class TestSplitRows:
    """Test table splitting."""

    def test_skips_header_rows(self, client):
        rows = client.split_rows(page([data_row(2, 5, "0.01"), data_row(2, 4)]))

        assert rows[0][0] == "02"
        assert rows[0][1] == "05:53"
        assert rows[0][10] == "87%"
        assert rows[0][15] == "0.01"
        assert rows[1][1] == "04:53"

    def test_limits_rows_to_retention(self):
        client = NWSClient(MonitorConfig(airport_code="KORD", retention_period=48))
        html = page([data_row(2, hour % 24) for hour in range(60)])

        assert len(client.split_rows(html)) == 48


class TestFetch:
    """Test page download."""

    def test_fetch_rows(self, client):
        response = Mock(text=page([data_row(2, 5)]))
        client.session.get = Mock(return_value=response)

        rows = client.fetch_rows()

        client.session.get.assert_called_once_with(
            "https://forecast.weather.gov/data/obhistory/KORD.html", timeout=30
        )
        response.raise_for_status.assert_called_once()
        assert rows[0][0] == "02"

    def test_requires_airport_code(self):
        client = NWSClient(MonitorConfig(airport_code=""))

        with pytest.raises(ValueError):
            client.fetch_page()

    def test_request_errors_propagate(self, client):
        client.session.get = Mock(side_effect=requests.ConnectionError("down"))

        with pytest.raises(requests.RequestException):
            client.fetch_page()

    def test_http_errors_propagate(self, client):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("404")
        client.session.get = Mock(return_value=response)

        with pytest.raises(requests.HTTPError):
            client.fetch_page()


@pytest.mark.integration
@pytest.mark.skipif(
    not os.getenv("RUN_INTEGRATION_TESTS"),
    reason="Integration tests require RUN_INTEGRATION_TESTS env var"
)
def test_live_page():
    """Fetch a real page from forecast.weather.gov."""
    client = NWSClient(MonitorConfig(airport_code="KORD"))
    try:
        rows = client.fetch_rows()
    finally:
        client.close()

    assert rows
