"""Live-reload preview server for ``zine serve``.

The zine is built into a staging directory and swapped into place, so
the HTTP server never sees a half-written tree. Every HTML response
gets a small script that listens on a websocket; after a successful
rebuild the server pushes a reload message to every open page.

Key classes:
- DevServer: Owns the build, the HTTP and websocket threads and the watcher.
- _PreviewHandler: Serves the output tree, injecting the reload script.
- _SourceWatcher: Watchdog handler that asks the server to rebuild.
"""

from __future__ import annotations

import asyncio
import functools
import json
import os
import shutil
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

import websockets
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .build import DEFAULT_OUTPUT_DIR, BuildError, build_zine

RELOAD_SCRIPT = """<script>
new WebSocket("ws://" + location.hostname + ":{ws_port}").onmessage = (event) => {{
  if (JSON.parse(event.data).type === "reload") location.reload();
}};
</script>
"""


def inject_reload_script(html: str, script: str) -> str:
    """Insert ``script`` before ``</body>``, or append it when there is none."""
    head, marker, tail = html.rpartition("</body>")
    if not marker:
        return html + script
    return f"{head}{script}{marker}{tail}"


class _PreviewHandler(SimpleHTTPRequestHandler):
    """Static file handler for the output tree.

    HTML pages are served with the reload script; directories resolve
    to their ``index.html`` and are never listed.
    """

    def __init__(self, *args, reload_script: str, **kwargs):
        self.reload_script = reload_script
        super().__init__(*args, **kwargs)

    def end_headers(self):
        self.send_header("Cache-Control", "no-store")
        super().end_headers()

    def list_directory(self, path):  # pragma: no cover - reached only without index.html
        self.send_error(404, "File not found")
        return None

    def send_head(self):
        target = Path(self.translate_path(self.path))
        if target.is_dir():
            target = target / "index.html"
        if not target.is_file():
            self.send_error(404, "File not found")
            return None
        if target.suffix != ".html":
            return super().send_head()
        body = inject_reload_script(target.read_text(encoding="utf-8"), self.reload_script)
        payload = body.encode("utf-8")
        self.send_response(200)
        self.send_header("Content-type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)
        return None


class DevServer:
    """Preview server rebuilding the zine whenever its sources change.

    Attributes:
        source: Content root of the zine.
        output_dir: Directory served over HTTP.
        http_port: Port of the HTTP server.
        ws_port: Port of the reload websocket.
    """

    def __init__(self, source: Path, http_port: int = 3000, ws_port: int | None = None):
        self.source = source
        self.output_dir = source / DEFAULT_OUTPUT_DIR
        self.staging_dir = source / f"{DEFAULT_OUTPUT_DIR}.staging"
        self.http_port = http_port
        self.ws_port = ws_port if ws_port is not None else http_port + 1
        self.reload_script = RELOAD_SCRIPT.format(ws_port=self.ws_port)
        self._build_lock = threading.Lock()
        self._snapshot: tuple = ()
        self._clients: set = set()
        self._loop = asyncio.new_event_loop()
        self._observer: Observer | None = None
        self._stopped = threading.Event()

    def start(self) -> None:  # pragma: no cover - integration path
        self._build()
        self._snapshot = self.snapshot()
        threading.Thread(target=self._serve_http, daemon=True).start()
        threading.Thread(target=self._serve_ws, daemon=True).start()
        self._observer = Observer()
        self._observer.schedule(_SourceWatcher(self), str(self.source), recursive=True)
        self._observer.start()
        try:
            self._stopped.wait()
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join()
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._stopped.set()

    def _serve_http(self) -> None:  # pragma: no cover - integration path
        handler = functools.partial(
            _PreviewHandler,
            directory=str(self.output_dir),
            reload_script=self.reload_script,
        )
        httpd = ThreadingHTTPServer(("", self.http_port), handler)
        print(f"Serving {self.output_dir} at http://localhost:{self.http_port}")
        httpd.serve_forever()

    def _serve_ws(self) -> None:  # pragma: no cover - integration path
        asyncio.set_event_loop(self._loop)

        async def run():
            async with websockets.serve(self._track_client, "0.0.0.0", self.ws_port):
                await asyncio.Future()

        try:
            self._loop.run_until_complete(run())
        except OSError as exc:
            print(f"Reload websocket could not listen on port {self.ws_port}: {exc}")

    async def _track_client(self, websocket):
        self._clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            self._clients.discard(websocket)

    async def notify_clients(self, message: str) -> None:
        """Send ``message`` to every client, dropping closed connections."""
        for client in list(self._clients):
            try:
                await client.send(message)
            except websockets.ConnectionClosed:
                self._clients.discard(client)

    def _request_reload(self) -> None:
        message = json.dumps({"type": "reload"})
        asyncio.run_coroutine_threadsafe(self.notify_clients(message), self._loop)

    def rebuild(self) -> None:
        """Rebuild and reload clients if any source file changed.

        Events arriving while a build runs are dropped; the running build
        already picks their changes up or a later event triggers another.
        """
        if not self._build_lock.acquire(blocking=False):
            return
        try:
            snapshot = self.snapshot()
            if snapshot == self._snapshot:
                return
            print("Change detected; rebuilding...")
            try:
                self._build()
            except BuildError as exc:
                # the last good build stays online
                print(f"Build failed: {exc}")
                return
            self._snapshot = snapshot
            self._request_reload()
        finally:
            self._build_lock.release()

    def _build(self) -> None:
        if self.staging_dir.exists():
            shutil.rmtree(self.staging_dir)
        build_zine(self.source, dest=self.staging_dir)
        if self.output_dir.exists():
            shutil.rmtree(self.output_dir)
        os.replace(self.staging_dir, self.output_dir)

    def is_output_path(self, path: Path) -> bool:
        return any(
            path == root or root in path.parents
            for root in (self.output_dir, self.staging_dir)
        )

    def snapshot(self) -> tuple:
        """Return ``(path, mtime, size)`` for every source file outside the output."""
        entries = []
        for path in sorted(self.source.rglob("*")):
            if self.is_output_path(path) or not path.is_file():
                continue
            try:
                stat = path.stat()
            except FileNotFoundError:
                continue
            entries.append((path.relative_to(self.source).as_posix(), stat.st_mtime_ns, stat.st_size))
        return tuple(entries)


class _SourceWatcher(FileSystemEventHandler):
    def __init__(self, server: DevServer):
        super().__init__()
        self.server = server

    def on_any_event(self, event):
        if event.is_directory or self.server.is_output_path(Path(event.src_path)):
            return
        self.server.rebuild()
