"""
Example usage of the RequirementEnrichmentService.

This example shows how to:
1. Build a service over a saved page and requirements file
2. Run the pipeline for a page URL
3. Inspect the plain text and the diagnostics
"""

import json
import tempfile
from pathlib import Path

from reqmate.services import ConfluencePageLoaderTool, RequirementEnrichmentServiceFactory
from reqmate.utils.settings.core import AppSettings


SAMPLE_PAGE = """
<h1>UC-Cancel Expert Support Request</h1>
<p>The
<ac:structured-macro ac:name="requirement"><ac:parameter ac:name="key">ACT-006</ac:parameter></ac:structured-macro>
cancels an open request.</p>
<table><tbody>
<tr><th>Rule</th><th>Reference</th></tr>
<tr><td>Status check</td><td><ac:structured-macro ac:name="requirement"><ac:parameter ac:name="key">CASE-EXP-STS-001</ac:parameter></ac:structured-macro></td></tr>
<tr><td>Notification</td><td><ac:structured-macro ac:name="requirement"><ac:parameter ac:name="key">MSG-404</ac:parameter></ac:structured-macro></td></tr>
</tbody></table>
"""

SAMPLE_REQUIREMENTS = {
    "requirements": [
        {
            "key": "ACT-006",
            "htmlExcerpt": "<p>Expert support agent</p>",
            "origin": {"title": "Actors"},
            "properties": [{"key": "@ActorNameEn", "indexation": {"text": "Support Expert"}}],
        },
        {
            "key": "CASE-EXP-STS-001",
            "htmlExcerpt": "The request must be in status <b>OPEN</b>",
            "origin": {"title": "Case Statuses"},
        },
    ]
}


def main():
    """Main example function."""

    # 1. Setup: write the sample page and requirements next to each other
    workdir = Path(tempfile.mkdtemp(prefix="reqmate_"))
    page_path = workdir / "HtmlPage.html"
    requirements_path = workdir / "requirements.json"
    page_path.write_text(SAMPLE_PAGE, encoding="utf-8")
    requirements_path.write_text(json.dumps(SAMPLE_REQUIREMENTS), encoding="utf-8")

    app_settings = AppSettings(output_dir=workdir / "output", save_artifacts=True)
    service = RequirementEnrichmentServiceFactory.create_local(
        page_path, requirements_path, app_settings=app_settings
    )

    # 2. Run the pipeline; any URL shape with a page id works for local files
    url = "https://wiki.example.com/spaces/BJS/pages/248936913/UC-Cancel"
    print(f"📄 Enriching {url}...")
    result = service.execute(url)

    if result.is_err():
        print(f"❌ Enrichment failed: {result.unwrap_err()}")
        return

    document = result.unwrap()
    print("✅ Enrichment complete\n")
    print(document.text)

    # 3. Diagnostics: unresolved requirement keys and unreachable sources
    if document.diagnostics:
        print("\n⚠️  Diagnostics:")
        for diagnostic in document.diagnostics:
            print(f"  - {diagnostic.kind}: {diagnostic.message}")

    print(f"\n💾 Artifacts saved to: {app_settings.output_dir}")

    # 4. The same pipeline behind the agent tool interface
    tool = ConfluencePageLoaderTool(
        RequirementEnrichmentServiceFactory.create_local(page_path, requirements_path)
    )
    print(f"\n🔧 Tool '{tool.name}' output:\n")
    print(tool(url))


if __name__ == "__main__":
    main()
