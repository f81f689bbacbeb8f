"""
Tests for page URL decomposition.
"""

import pytest

from reqmate.core.exceptions import UnsupportedUrlShapeError
from reqmate.core.url_parser import parse_confluence_url


class TestParseConfluenceUrl:
    """Tests for the supported URL shapes."""

    def test_spaces_pages_url(self):
        locator = parse_confluence_url("https://host/spaces/BJS/pages/248936913/Title")

        assert locator.page_id == "248936913"
        assert locator.space_key == "BJS"
        assert locator.url == "https://host/spaces/BJS/pages/248936913/Title"

    def test_view_page_url_uses_default_space(self):
        locator = parse_confluence_url("https://host/pages/viewpage.action?pageId=123", default_space_key="OPS")

        assert locator.page_id == "123"
        assert locator.space_key == "OPS"

    def test_view_page_url_default_space_is_bjs(self):
        locator = parse_confluence_url("https://host/pages/viewpage.action?pageId=123")
        assert locator.space_key == "BJS"

    def test_page_id_with_display_space(self):
        locator = parse_confluence_url("https://host/display/HR/viewpage.action?pageId=77&src=x")

        assert locator.page_id == "77"
        assert locator.space_key == "HR"

    def test_surrounding_whitespace_is_ignored(self):
        locator = parse_confluence_url("  https://host/spaces/ABC/pages/42  ")
        assert (locator.page_id, locator.space_key) == ("42", "ABC")

    def test_display_title_url_is_unsupported(self):
        with pytest.raises(UnsupportedUrlShapeError) as exc_info:
            parse_confluence_url("https://host/display/BJS/Some+Title")

        assert "display" in str(exc_info.value)
        assert exc_info.value.url == "https://host/display/BJS/Some+Title"

    @pytest.mark.parametrize("url", ["", "   ", "https://host/wiki/home", "not a url"])
    def test_unrecognized_urls_raise(self, url: str):
        with pytest.raises(UnsupportedUrlShapeError):
            parse_confluence_url(url)

    def test_unsupported_shape_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_confluence_url("https://host/display/BJS/Some+Title")
