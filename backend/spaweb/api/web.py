"""
Web provider - serves the frontend bundle with SPA fallback
Real files are served as-is, everything else gets the processed index.html
"""
import os
import posixpath
import stat
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, FastAPI
from fastapi.responses import FileResponse, Response
from loguru import logger

from spaweb.core.base_path import normalize_base_path, router_prefix
from spaweb.core.config import ServeConfig
from spaweb.core.exceptions import (
    ConfigurationError,
    InvalidInputError,
    TransientIOError,
    web_error_to_http,
)
from spaweb.core.middleware import CacheMiddleware
from spaweb.services.entry_document import INDEX_FILE_NAME, EntryDocumentProcessor

# index.html is where new deployments become visible, never let it go stale
INDEX_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}
INDEX_MEDIA_TYPE = "text/html; charset=utf-8"

ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class WebProvider:
    """Static asset provider for a single-page application bundle"""

    def __init__(self, config: ServeConfig):
        root = Path(config.root_directory)
        try:
            root_stat = root.stat()
        except OSError as e:
            raise ConfigurationError(
                "cannot access web directory",
                details={"directory": str(root), "reason": str(e)}
            ) from e

        if not stat.S_ISDIR(root_stat.st_mode):
            raise ConfigurationError(
                "web directory is not a directory",
                details={"directory": str(root)}
            )

        index_path = root / INDEX_FILE_NAME
        try:
            index_stat = index_path.stat()
        except OSError as e:
            raise ConfigurationError(
                f"cannot access {INDEX_FILE_NAME!r} in web directory",
                details={"directory": str(root), "reason": str(e)}
            ) from e

        if stat.S_ISDIR(index_stat.st_mode):
            raise ConfigurationError(
                f"{INDEX_FILE_NAME!r} does not exist",
                details={"directory": str(root)}
            )

        self.config = config
        self.root = os.path.abspath(root)
        self.processor = EntryDocumentProcessor(config)
        self.router = self._build_router()
        logger.info(
            f"Web provider ready: directory={self.root} "
            f"base_path={normalize_base_path(config.mount_prefix)}"
        )

    def resolve(self, request_path: str) -> Optional[str]:
        """
        Map a request path (mount prefix already stripped) onto the root.

        Dot segments are collapsed before joining, so the result is always
        inside the root. Returns None if it somehow is not.
        """
        cleaned = posixpath.normpath("/" + request_path).lstrip("/")
        candidate = os.path.normpath(os.path.join(self.root, cleaned))
        if os.path.commonpath([self.root, candidate]) != self.root:
            logger.warning(f"Rejected path outside web directory: {request_path!r}")
            return None
        return candidate

    def handle(self, request_path: str) -> Response:
        path = self.resolve(request_path)
        if path is None:
            return self.serve_index()

        try:
            file_stat = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            # Virtual client route
            return self.serve_index()
        except ValueError:
            # Embedded NUL, nothing can exist there
            return self.serve_index()
        except OSError as e:
            logger.warning(f"Cannot stat {path}: {e}")
            raise web_error_to_http(TransientIOError(str(e), path=request_path))

        if stat.S_ISDIR(file_stat.st_mode):
            return self.serve_index()

        return FileResponse(path, stat_result=file_stat)

    def serve_index(self) -> Response:
        """Processed index.html with injected runtime configuration"""
        try:
            content = self.processor.get_processed_document()
        except InvalidInputError as e:
            raise web_error_to_http(e)

        return Response(
            content=content,
            media_type=INDEX_MEDIA_TYPE,
            headers=INDEX_HEADERS,
        )

    def _build_router(self) -> APIRouter:
        router = APIRouter(tags=["Web"])

        def serve_path(request_path: str):
            return self.handle(request_path)

        def serve_root():
            return self.handle("")

        router.add_api_route(
            "/{request_path:path}", serve_path,
            methods=ROUTE_METHODS, include_in_schema=False
        )
        if router_prefix(self.config.mount_prefix):
            router.add_api_route("", serve_root, methods=ROUTE_METHODS, include_in_schema=False)
        return router

    def add_to_router(self, app: FastAPI, cache_max_age: int = 0) -> None:
        """Mount the provider under its prefix, wrapped in the cache middleware"""
        prefix = router_prefix(self.config.mount_prefix)
        app.include_router(self.router, prefix=prefix)
        app.add_middleware(CacheMiddleware, max_age=cache_max_age, prefix=prefix)
        logger.info(f"Web provider mounted at {prefix or '/'}")
