"""
Chant-session metrics as JSON lines.

Usage:
    metrics = MetricsWriter(config.metrics_file)
    metrics.log("transcript_delta", words=4, tokens=4, total=20)
    ...
    metrics.shutdown()

Every entry is stamped with the time and the run id, so counts from several
runs appended to one file can be told apart.
"""

import json
import time
import threading
from queue import Queue, Empty
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4


_STOP = object()


class MetricsWriter:
    """
    Non-blocking metrics sink.

    log() only enqueues; a daemon thread appends whatever has piled up in
    one open/write per batch, so the engine thread never touches the disk.
    """

    def __init__(self, metrics_file: Path, run_id: Optional[str] = None):
        self.metrics_file = metrics_file
        self.run_id = run_id or uuid4().hex[:12]
        self._queue: Queue = Queue()
        self._writer_thread = threading.Thread(target=self._writer_loop, daemon=True)
        self._writer_thread.start()

    def log(self, event: str, **kwargs: Any) -> None:
        """
        Queue one event.

        Args:
            event: "session_start", "transcript_delta", "restart",
                "session_stop" or "count_reset"
            **kwargs: Event fields
        """
        self._queue.put({"ts": round(time.time(), 3), "run": self.run_id, "event": event, **kwargs})

    def _writer_loop(self) -> None:
        stopping = False
        while not stopping:
            batch = []
            item = self._queue.get()
            while True:
                if item is _STOP:
                    stopping = True
                else:
                    batch.append(item)
                try:
                    item = self._queue.get_nowait()
                except Empty:
                    break
            if batch:
                self._append(batch)

    def _append(self, entries: list[dict]) -> None:
        try:
            self.metrics_file.parent.mkdir(parents=True, exist_ok=True)
            lines = "".join(json.dumps(e, ensure_ascii=False) + "\n" for e in entries)
            with open(self.metrics_file, "a", encoding="utf-8") as f:
                f.write(lines)
        except Exception as e:
            print(f"[Metrics] Failed to write {len(entries)} entries: {e}")

    def shutdown(self, timeout: float = 2.0) -> None:
        """Write everything queued so far, then stop the writer."""
        self._queue.put(_STOP)
        self._writer_thread.join(timeout=timeout)
