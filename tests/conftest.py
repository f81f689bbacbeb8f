"""
Pytest fixtures for reqmate tests.
"""

import json
from pathlib import Path

import pytest

from reqmate.models.page import PageLocator
from reqmate.utils.settings.core import AppSettings, ConfluenceSettings


STORAGE_PAGE = """
<h1>UC-Cancel Expert Support Request</h1>
<p>The actor
<ac:structured-macro ac:name="requirement" ac:schema-version="1" ac:macro-id="a1">
<ac:parameter ac:name="key">ACT-006</ac:parameter>
<ac:parameter ac:name="spaceKey">BJS</ac:parameter>
</ac:structured-macro>
cancels the request.</p>
<table><tbody>
<tr><th>Rule</th><th>Reference</th></tr>
<tr><td>Status check</td><td><ac:structured-macro ac:name="requirement"><ac:parameter ac:name="key">CASE-EXP-STS-001</ac:parameter></ac:structured-macro></td></tr>
</tbody></table>
<ul><li>Shows <ac:structured-macro ac:name="requirement"><ac:parameter ac:name="key">MSG-999</ac:parameter></ac:structured-macro></li></ul>
<script>var tracking = 1;</script>
"""

REQUIREMENTS_PAYLOAD = {
    "requirements": [
        {
            "key": "ACT-006",
            "htmlExcerpt": "<p>Expert <b>support</b> agent</p>",
            "origin": {"title": "Actors"},
            "destinationUrl": "https://wiki.example.com/display/BJS/Actors",
            "status": "ACTIVE",
            "spaceKey": "BJS",
            "properties": [
                {"key": "@ActorNameEn", "value": "<p>Support Expert</p>", "dataType": "TEXT",
                 "indexation": {"text": "Support Expert"}},
            ],
        },
        {
            "key": "CASE-EXP-STS-001",
            "htmlExcerpt": "Request must be <i>open</i>",
            "origin": {"title": "Case Statuses"},
            "status": "DEPRECATED",
        },
        {
            "key": "ACT-006",
            "htmlExcerpt": "duplicate that must be ignored",
            "origin": {"title": "Other"},
        },
    ]
}


@pytest.fixture
def storage_page() -> str:
    """Storage-format page with three requirement macros, two resolvable."""
    return STORAGE_PAGE


@pytest.fixture
def requirements_payload() -> dict:
    """Requirements endpoint payload with a duplicate key."""
    return json.loads(json.dumps(REQUIREMENTS_PAYLOAD))


@pytest.fixture
def locator() -> PageLocator:
    return PageLocator(
        page_id="248936913",
        space_key="BJS",
        url="https://wiki.example.com/spaces/BJS/pages/248936913/UC-Cancel",
    )


@pytest.fixture
def confluence_settings() -> ConfluenceSettings:
    """Settings pointing at a fake wiki with retries that do not sleep."""
    return ConfluenceSettings(
        base_url="https://wiki.example.com/",
        token="secret-token",
        default_space_key="BJS",
        max_attempts=3,
        backoff_min_seconds=0,
        backoff_max_seconds=0,
    )


@pytest.fixture
def app_settings(tmp_path: Path) -> AppSettings:
    return AppSettings(output_dir=tmp_path / "output", save_artifacts=False)


@pytest.fixture
def local_files(tmp_path: Path, storage_page: str, requirements_payload: dict) -> tuple[Path, Path]:
    """Page HTML and requirements JSON written to disk."""
    page_path = tmp_path / "HtmlPage.html"
    index_path = tmp_path / "requirements.json"
    page_path.write_text(storage_page, encoding="utf-8")
    index_path.write_text(json.dumps(requirements_payload), encoding="utf-8")
    return page_path, index_path
