"""Custom station icon loading.

Icons arrive as ``data:`` URLs. Decoding happens on a worker thread and the
results are cached, so a draw pass only ever sees already-decoded arrays.
"""

import base64
import binascii
import io
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Iterable, Optional
from urllib.parse import unquote_to_bytes

import numpy as np
from PIL import Image

from star_system.errors import ResourceError

logger = logging.getLogger(__name__)


def decode_data_url(data: str) -> np.ndarray:
    """Decode an image ``data:`` URL into an (H, W, 4) uint8 RGBA array.

    Raises:
        ResourceError: If the payload is not a data URL or not a readable image
    """
    if not isinstance(data, str) or not data.startswith("data:"):
        raise ResourceError("Icon payload is not a data: URL")
    header, sep, payload = data[5:].partition(",")
    if not sep:
        raise ResourceError("Icon data URL has no payload")
    try:
        if header.endswith(";base64"):
            raw = base64.b64decode(payload, validate=True)
        else:
            raw = unquote_to_bytes(payload)
        with Image.open(io.BytesIO(raw)) as img:
            return np.asarray(img.convert("RGBA")).copy()
    except (binascii.Error, ValueError, OSError) as exc:
        raise ResourceError(f"Could not decode icon ({header or 'no media type'}): {exc}") from exc


class IconLoader:
    """Asynchronous, caching decoder for custom station icons."""

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="icon-loader")
        self._lock = threading.Lock()
        self._cache: Dict[str, np.ndarray] = {}
        self._pending: Dict[str, Future] = {}

    def get(self, data: str) -> Optional[np.ndarray]:
        """Return the decoded icon if it is already cached."""
        with self._lock:
            return self._cache.get(data)

    def load_async(self, data: str) -> Future:
        """Start decoding ``data``; the future resolves to the RGBA array."""
        with self._lock:
            if data in self._cache:
                done = Future()
                done.set_result(self._cache[data])
                return done
            if data in self._pending:
                return self._pending[data]
            future = self._executor.submit(self._decode, data)
            self._pending[data] = future
            return future

    def _decode(self, data: str) -> np.ndarray:
        try:
            image = decode_data_url(data)
            with self._lock:
                self._cache[data] = image
            return image
        finally:
            with self._lock:
                self._pending.pop(data, None)

    def resolve(self, payloads: Iterable[str], timeout: Optional[float] = None) -> Dict[str, np.ndarray]:
        """Decode every payload and return those that succeeded.

        Failures are logged and left out, so only the affected station is
        skipped when drawing.
        """
        futures = {data: self.load_async(data) for data in set(payloads) if data}
        resolved = {}
        for data, future in futures.items():
            try:
                resolved[data] = future.result(timeout=timeout)
            except ResourceError as exc:
                logger.warning("Skipping custom station icon: %s", exc)
        return resolved

    def close(self):
        self._executor.shutdown(wait=True)
