"""
Shared fixtures: a minimal compiled frontend bundle on disk
"""
import pytest

from spaweb.core.config import ServeConfig, Settings

INDEX_HTML = (
    b'<!doctype html>\n<html lang="en"><head><meta charset="utf-8">'
    b"<title>App</title></head>\n<body><div id=\"root\"></div>"
    b'<script src="assets/app.js"></script></body></html>\n'
)


@pytest.fixture
def bundle_dir(tmp_path):
    """Create a bundle with index.html, an asset and a nested directory"""
    root = tmp_path / "dist"
    (root / "assets").mkdir(parents=True)
    (root / "docs" / "guide").mkdir(parents=True)
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "assets" / "app.css").write_text("body { margin: 0; }\n")
    (root / "assets" / "app.js").write_text("console.log('app');\n")
    (root / "robots.txt").write_text("User-agent: *\n")
    return root


@pytest.fixture
def serve_config(bundle_dir):
    return ServeConfig(root_directory=bundle_dir, mount_prefix="/app")


@pytest.fixture
def app_settings(bundle_dir):
    """Settings pointing at the test bundle"""
    settings = Settings()
    settings.WEB_DIRECTORY = str(bundle_dir)
    settings.WEB_PREFIX = "/app"
    settings.WEB_CACHE_MAX_AGE = 60
    settings.WEB_CLIENT_CONFIG = ""
    return settings
