"""
Static Site Renderer

Jinja2-based implementation of ISiteRenderer. Produces a lightweight
static bundle: one placeholder HTML document per page, a stylesheet,
an asset manifest, build metadata and deployment instructions.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import DictLoader, Environment, TemplateError, select_autoescape

from domain.errors import RenderError
from domain.site_build.renderer import ISiteRenderer, RenderSummary
from domain.site_build.routes import OutputPathAllocator
from domain.site_build.value_objects import BuildData, Page

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <meta name="description" content="{{ description }}">
  <title>{{ title }}</title>
  <link rel="stylesheet" href="/css/styles.css">
  <style>
    body { font-family: system-ui, -apple-system, sans-serif; margin: 0; padding: 0; }
    .export-notice { padding: 2rem; max-width: 800px; margin: 0 auto; }
    .export-notice h1 { color: #1a1a1a; }
    .export-notice p { color: #666; line-height: 1.6; }
    .export-notice code { background: #f5f5f5; padding: 0.2rem 0.4rem; border-radius: 4px; }
  </style>
</head>
<body>
  <div id="root">
    <div class="export-notice">
      <h1>{{ title }}</h1>
      {% if description %}<p>{{ description }}</p>{% endif %}
      <hr style="margin: 2rem 0; border: none; border-top: 1px solid #eee;">
      <p style="color: #888; font-size: 0.9rem;">
        <strong>Note:</strong> This is a basic static export containing your project's
        styles and metadata. Components and interactivity are not included; use the
        builder's full site generator for a complete static site.
      </p>
    </div>
  </div>
</body>
</html>
"""

STYLESHEET_TEMPLATE = """/* Static Export Styles */
/* Generated: {{ generated_at }} */

/* Base styles */
* { box-sizing: border-box; margin: 0; padding: 0; }
body { font-family: system-ui, -apple-system, sans-serif; }

/* Total styles in project: {{ style_count }} */
/* For complete styles, use the full site generator */
"""

README_TEMPLATE = """# Static Export

This is a static export of build {{ build_id }} (version {{ version }}).

## Structure
- `index.html` - Main page
- `<route>/index.html` - One folder per page route
- `css/styles.css` - Generated styles
- `assets/manifest.json` - Asset manifest
- `build-info.json` - Build metadata
{% if skipped_routes %}
## Skipped routes
Routes with wildcards cannot be represented as static files and were not exported:
{% for route in skipped_routes %}- `{{ route }}`
{% endfor %}{% endif %}
## Deployment
Upload the contents of this folder to any static hosting service:
- Netlify
- Vercel
- GitHub Pages
- Cloudflare Pages
- Any web server

## Generated
{{ generated_at }}
"""


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def create_template_environment() -> Environment:
    """Jinja2 environment with HTML autoescaping for the bundle templates."""
    return Environment(
        loader=DictLoader({
            "page.html": PAGE_TEMPLATE,
            "styles.css": STYLESHEET_TEMPLATE,
            "README.md": README_TEMPLATE,
        }),
        autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
        keep_trailing_newline=True,
    )


class StaticSiteRenderer(ISiteRenderer):
    """
    Writes the static bundle for a build into a directory.

    Wildcard routes are skipped and logged. Routes that collide after
    sanitization are written to disambiguated folders.
    """

    def __init__(self, environment: Optional[Environment] = None):
        self.env = environment or create_template_environment()

    def render(self, build_data: BuildData, output_dir: Path) -> RenderSummary:
        """
        Render the build into output_dir.

        Raises:
            RenderError: If a file cannot be written or a template fails
        """
        output_dir = Path(output_dir)
        summary = RenderSummary()
        generated_at = _utc_timestamp()

        try:
            (output_dir / "assets").mkdir(parents=True, exist_ok=True)
            (output_dir / "css").mkdir(parents=True, exist_ok=True)

            stylesheet = self.env.get_template("styles.css").render(
                generated_at=generated_at,
                style_count=len(build_data.styles),
            )
            self._write(output_dir, "css/styles.css", stylesheet, summary)

            allocator = OutputPathAllocator()
            for page in build_data.pages:
                html_path = allocator.allocate(page.path)
                if html_path is None:
                    logger.info(f"Skipping wildcard route: {page.path}")
                    summary.skipped_routes.append(page.path)
                    continue

                self._write(output_dir, html_path, self._render_page(page), summary)
                summary.pages.append(html_path)
            summary.collisions = dict(allocator.collisions)

            manifest = [asset.to_dict() for asset in build_data.assets]
            self._write(output_dir, "assets/manifest.json", json.dumps(manifest, indent=2), summary)

            build_info = self._build_info(build_data, summary, generated_at)
            self._write(output_dir, "build-info.json", json.dumps(build_info, indent=2), summary)

            readme = self.env.get_template("README.md").render(
                build_id=build_data.build.id,
                version=build_data.build.version,
                skipped_routes=summary.skipped_routes,
                generated_at=generated_at,
            )
            self._write(output_dir, "README.md", readme, summary)

        except OSError as e:
            raise RenderError(f"Failed to write static site: {e}", original_error=e)
        except TemplateError as e:
            raise RenderError(f"Failed to render template: {e}", original_error=e)

        logger.debug(
            f"Rendered build {build_data.build.id}: {len(summary.pages)} pages, "
            f"{len(summary.skipped_routes)} skipped"
        )
        return summary

    def _render_page(self, page: Page) -> str:
        return self.env.get_template("page.html").render(
            title=page.display_title(),
            description=page.meta.description or "",
        )

    @staticmethod
    def _build_info(build_data: BuildData, summary: RenderSummary, exported_at: str) -> Dict[str, Any]:
        build = build_data.build
        return {
            "buildId": build.id,
            "projectId": build.project_id,
            "version": build.version,
            "createdAt": build.created_at,
            "exportedAt": exported_at,
            "pagesCount": len(build_data.pages),
            "renderedPagesCount": len(summary.pages),
            "assetsCount": len(build_data.assets),
            "skippedRoutes": list(summary.skipped_routes),
        }

    @staticmethod
    def _write(output_dir: Path, relative_path: str, content: str, summary: RenderSummary) -> None:
        target = output_dir / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        summary.files.append(relative_path)
