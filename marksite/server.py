"""Development server for marksite.

Serves the output tree and rebuilds single files as they change:
- Serves `<source>/out` over HTTP, resolving directories to index.html.
- Rejects directory listings and missing paths with a 404 (serving 404.html when present).
- Injects a reload script into HTML responses.
- Watches the source tree and rebuilds only the file that changed, then
  tells connected browsers to reload.

Key classes:
- DevServer: Main class for running the development server.
- _ReloadHandler: HTTP request handler that injects reload script and enforces 404s.
- _ChangeHandler: File system event handler for triggering rebuilds.
"""

from __future__ import annotations

import asyncio
import functools
import json
import os
import threading
import time
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import websockets
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .build import SiteBuilder
from .errors import BuildError

DEFAULT_PORT = 3000


class _ReloadHandler(SimpleHTTPRequestHandler):
    """HTTP request handler that injects live reload script into HTML pages.

    Attributes:
        reload_script: JavaScript code for WebSocket connection to trigger reloads.
    """

    reload_script_template = """
    <script>
    (() => {{
      const ws = new WebSocket('ws://' + location.hostname + ':{ws_port}');
      ws.onmessage = (event) => {{
        const data = JSON.parse(event.data || '{{}}');
        if (data.type === 'reload') location.reload();
      }};
    }})();
    </script>
    """
    reload_script = reload_script_template.format(ws_port=DEFAULT_PORT + 1)

    def end_headers(self):
        self.send_header("Cache-Control", "no-cache, no-store, must-revalidate")
        super().end_headers()

    def list_directory(self, path):  # pragma: no cover - exercised via send_head
        # Never expose directory listings; treat as missing content.
        return self._serve_404()

    def _inject(self, content: str) -> str:
        if "</body>" in content:
            return content.replace("</body>", f"{self.reload_script}</body>")
        return content + self.reload_script

    def _send_html(self, status: int, content: str) -> None:
        encoded = self._inject(content).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(encoded)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(encoded)

    def _serve_404(self):
        """Serve 404.html (when present) with injected reload script and a 404 status."""
        error_page = Path(self.directory) / "404.html"
        if error_page.exists():
            self._send_html(404, error_page.read_text(encoding="utf-8"))
            return None
        self.send_error(404, "File not found")
        return None

    def send_head(self):
        path_obj = Path(self.translate_path(self.path))
        if path_obj.is_dir():
            index_path = path_obj / "index.html"
            if not index_path.exists():
                return self._serve_404()
            path_obj = index_path
        elif not path_obj.exists():
            return self._serve_404()

        if path_obj.suffix == ".html":
            self._send_html(200, path_obj.read_text(encoding="utf-8"))
            return None
        return super().send_head()


class DevServer:
    """Development server with per-file rebuilds and live reload.

    Attributes:
        builder: Site builder for the source tree.
        output_dir: Directory served over HTTP.
        http_port: Port for HTTP server.
        ws_port: Port for WebSocket connections.
        _observer: File system observer for changes.
        _ws_clients: Set of connected WebSocket clients.
        _loop: Event loop for WebSocket handling.
    """

    def __init__(
        self,
        builder: SiteBuilder,
        http_port: int | None = None,
        ws_port: int | None = None,
    ):
        """Initialize the development server.

        Args:
            builder: Site builder whose output tree is served.
            http_port: Optional override for the configured HTTP port.
            ws_port: Optional override for the live reload port; defaults to
                the configured ws_port, then http_port + 1.
        """
        self.builder = builder
        self.reporter = builder.reporter
        self.output_dir = builder.output_dir
        config = builder.config
        self.http_port = int(http_port or config.get("port") or DEFAULT_PORT)
        self.ws_port = int(ws_port or config.get("ws_port") or self.http_port + 1)
        self._reload_script = _ReloadHandler.reload_script_template.format(ws_port=self.ws_port)
        self._observer: Observer | None = None
        self._ws_clients: set = set()
        self._loop = asyncio.new_event_loop()

    def start(self) -> None:  # pragma: no cover - integration path
        """Serve the already built output tree until interrupted."""
        threading.Thread(target=self._start_http, daemon=True).start()
        threading.Thread(target=self._start_ws, daemon=True).start()
        self._start_watcher()
        self.reporter.done(f"server running at http://localhost:{self.http_port}")
        self.reporter.done("watching for file changes")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
        self._loop.call_soon_threadsafe(self._loop.stop)

    def _make_handler(self):
        handler_cls = type(
            "_ReloadHandlerWithPort",
            (_ReloadHandler,),
            {"reload_script": self._reload_script},
        )
        return functools.partial(handler_cls, directory=str(self.output_dir))

    def _start_http(self) -> None:  # pragma: no cover - integration path
        httpd = ThreadingHTTPServer(("", self.http_port), self._make_handler())
        httpd.serve_forever()

    def _start_ws(self) -> None:  # pragma: no cover - integration path
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_until_complete(self._run_ws_server())
        except OSError as exc:
            self.reporter.error(f"WebSocket server failed to start (port {self.ws_port}): {exc}")

    async def _run_ws_server(self) -> None:  # pragma: no cover - integration path
        async with websockets.serve(self._ws_handler, "0.0.0.0", self.ws_port):
            await asyncio.Future()  # Run forever

    async def _ws_handler(self, websocket):
        self._ws_clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            self._ws_clients.discard(websocket)

    def _broadcast_reload(self) -> None:
        if not self._loop.is_running():
            return
        message = json.dumps({"type": "reload"})
        asyncio.run_coroutine_threadsafe(self._async_broadcast(message), self._loop)

    async def _async_broadcast(self, message: str):
        stale = set()
        for ws in self._ws_clients:
            try:
                await ws.send(message)
            except websockets.ConnectionClosed:
                stale.add(ws)
        for ws in stale:
            self._ws_clients.discard(ws)

    def _start_watcher(self) -> None:
        handler = _ChangeHandler(self)
        observer = Observer()
        observer.schedule(handler, str(self.builder.source_root), recursive=True)
        observer.start()
        self._observer = observer

    def rebuild(self, path: Path) -> Path | None:
        """Rebuild one changed source file.

        Failures are reported and swallowed so the server outlives them.

        Args:
            path: The changed file.

        Returns:
            The written output path, or None if nothing was rebuilt.
        """
        if not path.is_file():
            return None
        self.reporter.info("---\ndetected change", path)
        try:
            dest = self.builder.rebuild(path)
        except BuildError as exc:
            self.reporter.build_error(exc)
            return None
        except OSError as exc:
            self.reporter.error(f"rebuilding {path}: {exc}")
            return None
        self._broadcast_reload()
        return dest


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, server: DevServer):
        super().__init__()
        self.server = server

    def on_created(self, event):
        self._handle(event.src_path, event.is_directory)

    def on_modified(self, event):
        self._handle(event.src_path, event.is_directory)

    def on_moved(self, event):
        self._handle(event.dest_path, event.is_directory)

    def _handle(self, src_path, is_directory: bool) -> None:
        if is_directory:
            return
        path = Path(os.fsdecode(src_path))
        # Skip changes in the output tree and the config file
        if self.server.builder.is_ignored(path):
            return
        self.server.rebuild(path)
