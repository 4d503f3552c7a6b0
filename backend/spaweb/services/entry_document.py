"""
Entry document processor
Injects runtime configuration into the bundle's index.html once and caches the result
"""
import html
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from spaweb.core.base_path import normalize_base_path
from spaweb.core.config import ServeConfig
from spaweb.core.exceptions import InvalidInputError

INDEX_FILE_NAME = "index.html"
HEAD_MARKER = b"<head>"

# Global the frontend reads its runtime configuration from
CONFIG_GLOBAL = "__SPA_CONFIG__"

# Characters that could terminate the script element or break JS string parsing
_SCRIPT_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
}


def serialize_client_config(base_path: str, client_config: Optional[Dict[str, Any]] = None) -> str:
    """
    Render the configuration object as a JSON literal safe to embed in <script>.
    basePath always comes first and cannot be overridden by client_config.
    """
    payload: Dict[str, Any] = {"basePath": base_path}
    for key, value in (client_config or {}).items():
        if key != "basePath":
            payload[key] = value

    # ensure_ascii also covers U+2028 / U+2029
    literal = json.dumps(payload, ensure_ascii=True)
    for char, escaped in _SCRIPT_ESCAPES.items():
        literal = literal.replace(char, escaped)
    return literal


def build_injection(base_path: str, client_config: Optional[Dict[str, Any]] = None) -> bytes:
    """<base> tag followed by the config script, as inserted after <head>"""
    base_tag = f'<base href="{html.escape(base_path, quote=True)}" />'
    config_script = (
        f"<script>window.{CONFIG_GLOBAL} = "
        f"{serialize_client_config(base_path, client_config)};</script>"
    )
    return (base_tag + config_script).encode("utf-8")


class EntryDocumentProcessor:
    """
    Lazily computes the rewritten index.html.

    The first caller reads and rewrites the document under a lock; concurrent
    callers wait for it. The outcome, success or InvalidInputError, is kept for
    the lifetime of the processor and later changes on disk are not picked up.
    """

    def __init__(self, config: ServeConfig):
        self.config = config
        self._lock = threading.Lock()
        self._done = False
        self._content: Optional[bytes] = None
        self._error: Optional[InvalidInputError] = None

    @property
    def index_path(self) -> Path:
        return Path(self.config.root_directory) / INDEX_FILE_NAME

    @property
    def computed(self) -> bool:
        return self._done

    def get_processed_document(self) -> bytes:
        """Return the processed entry document or raise the cached error"""
        if not self._done:
            with self._lock:
                if not self._done:
                    self._compute()
                    self._done = True

        if self._error is not None:
            raise self._error
        return self._content

    def _read_entry_document(self) -> bytes:
        return self.index_path.read_bytes()

    def _compute(self) -> None:
        try:
            raw = self._read_entry_document()
        except OSError as e:
            logger.error(f"Cannot read {self.index_path}: {e}")
            self._error = InvalidInputError(
                f"cannot read {INDEX_FILE_NAME}",
                details={"path": str(self.index_path), "reason": str(e)}
            )
            return

        try:
            self._content = self.process(raw)
        except InvalidInputError as e:
            logger.error(f"Rejecting {self.index_path}: {e.message}")
            self._error = e
            return
        except (TypeError, ValueError) as e:
            # Unserializable client config, or a prefix that cannot be encoded
            logger.error(f"Cannot inject runtime configuration into {self.index_path}: {e}")
            self._error = InvalidInputError(
                "cannot inject runtime configuration",
                details={"path": str(self.index_path), "reason": str(e)}
            )
            return

        logger.info(
            f"Processed {INDEX_FILE_NAME} for base path "
            f"{normalize_base_path(self.config.mount_prefix)} ({len(self._content)} bytes)"
        )

    def process(self, raw: bytes) -> bytes:
        """Splice the base tag and config script right after the first <head>"""
        head_index = raw.find(HEAD_MARKER)
        if head_index == -1:
            raise InvalidInputError(f"{INDEX_FILE_NAME} does not contain <head> tag")

        base_path = normalize_base_path(self.config.mount_prefix)
        injection = build_injection(base_path, self.config.client_config)

        insert_pos = head_index + len(HEAD_MARKER)
        return raw[:insert_pos] + injection + raw[insert_pos:]
