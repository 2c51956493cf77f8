"""File watcher that re-renders configured views when notes change."""

import threading
import time
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer
from rich.console import Console

console = Console()

SUPPORTED_EXTENSIONS = {".md"}


class NoteChangeHandler(FileSystemEventHandler):
    """Collects note events and debounces them."""

    def __init__(self, debounce: float = 1.0, root: str | Path | None = None):
        super().__init__()
        self._root = Path(root) if root else None
        self._pending: set[str] = set()
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._debounce = debounce
        self._callback = None

    def set_callback(self, callback):
        self._callback = callback

    def _is_supported(self, path: str) -> bool:
        p = Path(path)
        if self._root and p.is_relative_to(self._root):
            p = p.relative_to(self._root)
        if any(part.startswith(".") for part in p.parts[:-1]) or p.name.startswith("."):
            return False
        return p.suffix.lower() in SUPPORTED_EXTENSIONS

    def on_created(self, event):
        if not event.is_directory and self._is_supported(event.src_path):
            self._add(event.src_path)

    def on_modified(self, event):
        if not event.is_directory and self._is_supported(event.src_path):
            self._add(event.src_path)

    def on_deleted(self, event):
        if not event.is_directory and self._is_supported(event.src_path):
            self._add(event.src_path)

    def on_moved(self, event):
        if not event.is_directory and (
            self._is_supported(event.src_path) or self._is_supported(event.dest_path)
        ):
            self._add(event.dest_path)

    def _add(self, path: str):
        with self._lock:
            self._pending.add(path)
            if self._timer:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, self._flush)
            self._timer.daemon = True
            self._timer.start()

    def _flush(self):
        with self._lock:
            paths = list(self._pending)
            self._pending.clear()
        if paths and self._callback:
            self._callback(paths)


class VaultWatcher:
    """Watches the vault and refreshes one long-lived render session."""

    def __init__(self, config: dict, debounce: float = 1.0, on_render=None):
        from .render.session import RenderSession
        from .vault.reader import VaultReader

        self.config = config
        self.vault_path = Path(config["vault_path"])
        self.reader = VaultReader(self.vault_path)
        self.session = RenderSession(config)
        self.on_render = on_render
        self.handler = NoteChangeHandler(debounce=debounce, root=self.vault_path)
        self.handler.set_callback(self._process_batch)
        self.observer = Observer()

    def render(self):
        """Re-read the vault and refresh every configured view."""
        entries = self.reader.read()
        result = self.session.refresh(entries)
        if self.on_render:
            self.on_render(result)
        return result

    def _process_batch(self, paths: list[str]):
        names = ", ".join(sorted({Path(p).name for p in paths}))
        console.print(f"\n[bold blue]{len(paths)} note(s) changed:[/] [dim]{names}[/]")
        try:
            result = self.render()
        except ValueError as e:
            console.print(f"  [red]✗ Render failed: {e}[/]")
            return
        mode = "incremental update" if result.incremental else "full rebuild"
        console.print(f"  [green]✓ Rendered {len(result.aggregates)} view(s) ({mode})[/]")

    def run(self):
        """Start watching (blocks until Ctrl+C)."""
        self.render()
        self.observer.schedule(self.handler, str(self.vault_path), recursive=True)
        self.observer.start()

        console.print(f"[bold]👀 Watching {self.vault_path} for changes... (Ctrl+C to stop)[/]")

        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopping watcher...[/]")
            self.observer.stop()
        self.observer.join()
        console.print("[green]✓ Watcher stopped.[/]")
