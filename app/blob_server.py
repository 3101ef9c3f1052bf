"""
Temporary local server that hands an exported document to the browser.

publish() exposes one DocumentBlob at a local URL; revoke() takes it down.
Only one blob is published at a time: publishing again revokes the old URL.
"""
from __future__ import annotations
import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import quote, unquote, urlparse

from exporter import DocumentBlob

logger = logging.getLogger(__name__)


class BlobServer:
    def __init__(self, host: str = "127.0.0.1"):
        self.host = host
        self.server = None
        self.server_thread = None
        self.port = None
        self.filename = None
        self.is_running = False

    def publish(self, blob: DocumentBlob, filename: str) -> str:
        """
        Serve `blob` as an attachment named `filename`.
        Returns the URL where it can be downloaded.
        """
        if self.is_running:
            self.revoke()

        served_name = filename

        class BlobHandler(BaseHTTPRequestHandler):
            def do_GET(self):
                if unquote(urlparse(self.path).path).lstrip("/") != served_name:
                    self.send_error(404, "Not found")
                    return
                self.send_response(200)
                self.send_header("Content-Type", blob.mime_type)
                self.send_header("Content-Length", str(blob.size))
                self.send_header(
                    "Content-Disposition", f"attachment; filename=\"{served_name}\""
                )
                self.end_headers()
                self.wfile.write(blob.content)

            def log_message(self, format, *args):
                logger.debug("blob server: " + format, *args)

        # port 0 lets the OS pick a free port
        self.server = ThreadingHTTPServer((self.host, 0), BlobHandler)
        self.port = self.server.server_address[1]
        self.filename = filename

        self.server_thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.server_thread.start()
        self.is_running = True

        url = self.current_url()
        logger.info("Published %s (%d bytes) at %s", filename, blob.size, url)
        return url

    def revoke(self) -> None:
        """Stop serving; the URL stops working immediately."""
        if self.server:
            self.server.shutdown()
            self.server.server_close()
            self.server = None

        if self.server_thread:
            self.server_thread.join(timeout=2)
            self.server_thread = None

        if self.is_running:
            logger.debug("Revoked %s", self.filename)
        self.is_running = False
        self.filename = None
        self.port = None

    def current_url(self) -> str | None:
        if not self.is_running:
            return None
        return f"http://{self.host}:{self.port}/{quote(self.filename)}"


# Global instance for the command line
_blob_server = BlobServer()


def publish_blob(blob: DocumentBlob, filename: str) -> str:
    return _blob_server.publish(blob, filename)


def revoke_blob() -> None:
    _blob_server.revoke()
