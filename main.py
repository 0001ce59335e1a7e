"""
main.py

Flask backend for static site exports.

Dependencies:
  - Python packages: Flask, flask-restx, flask-cors, celery, redis, httpx, Jinja2
  - Infrastructure: PostgREST in front of the builder database; Redis when
    EXPORT_REGISTRY_BACKEND=redis or EXPORT_RUNNER=celery

Notes:
  - API v1 endpoints available at /api/v1/ with Swagger docs at /api/v1/docs
  - Legacy download route at /cgi/static/ssg/<filename>
  - Uses application factory pattern for better testability
"""

import os

from app_factory import create_app

app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", 8000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    # The reloader would start a second sweeper and runner pool
    app.run(host=host, port=port, debug=debug, use_reloader=False)
