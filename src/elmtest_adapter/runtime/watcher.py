# src/elmtest_adapter/runtime/watcher.py

"""
Watches an Elm project for saved files and forwards them to the adapter.
"""

import asyncio
from pathlib import Path

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from elmtest_adapter.runtime.adapter import ElmTestAdapter
from elmtest_adapter.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.watcher")

IGNORED_DIRS = ("elm-stuff", "node_modules", ".git")


class SaveEventHandler(FileSystemEventHandler):
    """Hands saves of source files to the event loop; runs on watchdog's thread."""

    def __init__(self, watcher: "SaveWatcher"):
        self._watcher = watcher

    def on_modified(self, event: FileSystemEvent) -> None:
        self._dispatch_save(event)

    def on_created(self, event: FileSystemEvent) -> None:
        self._dispatch_save(event)

    def _dispatch_save(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        path = Path(str(event.src_path))
        if not self._watcher.is_watched(path):
            return
        self._watcher.loop.call_soon_threadsafe(self._watcher.saved_queue.put_nowait, path)


class SaveWatcher:
    """
    Feeds saved ``.elm`` files of a project into ``adapter.file_saved``.

    Saves are processed one at a time, in the order watchdog reports them.
    """

    def __init__(self, adapter: ElmTestAdapter, loop: asyncio.AbstractEventLoop):
        self.adapter = adapter
        self.loop = loop
        self.saved_queue: asyncio.Queue[Path] = asyncio.Queue()
        self.observer: Observer | None = None
        self._extension = adapter.config.file_extension

    def is_watched(self, path: Path) -> bool:
        if path.suffix != self._extension:
            return False
        return not any(part in IGNORED_DIRS for part in path.parts)

    def start(self) -> None:
        watch_dir = str(self.adapter.project_folder)
        self.observer = Observer()
        self.observer.schedule(SaveEventHandler(self), watch_dir, recursive=True)
        self.observer.start()
        log.info("Watching for saved files", path=watch_dir)

    def stop(self) -> None:
        if self.observer and self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
        self.observer = None
        log.info("Stopped watching for saved files")

    async def process(self, shutdown_event: asyncio.Event) -> None:
        """Handles saves until ``shutdown_event`` is set."""
        while not shutdown_event.is_set():
            get_task = asyncio.create_task(self.saved_queue.get())
            shutdown_task = asyncio.create_task(shutdown_event.wait())
            done, _ = await asyncio.wait({get_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED)

            if shutdown_task in done:
                get_task.cancel()
                break
            shutdown_task.cancel()

            path = get_task.result()
            log.debug("File saved", path=str(path))
            await self.adapter.file_saved(str(path))


# 🔼⚙️
