"""Preview artwork for keys.

Events may carry a ``previewUrl``. Downloads happen on a background
thread: ``compose`` only ever reads the cache, and an uncached URL is
queued for download while the caller draws a flat color. Once the image
arrives the ``on_loaded`` callback fires so the key can be redrawn.

A URL that fails to download or decode is remembered as a miss and not
retried until it is evicted or the cache is cleared. At most
``max_images`` URLs are kept; the least recently used one is dropped
together with its composed key images.
"""

import io
import logging
import queue
import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import Optional

import requests
from PIL import Image, ImageOps, UnidentifiedImageError

from triggerdeck.models import Color

logger = logging.getLogger(__name__)


class ArtworkLoader:
    """Downloads, caches and composes preview images."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = 5.0,
        frame: int = 6,
        max_images: int = 64,
    ):
        """
        Initialize the loader. The download thread starts on first use.

        Args:
            session: HTTP session to download with (tests inject a mock)
            timeout: Download timeout (seconds)
            frame: Width of the colored frame around the artwork (pixels)
            max_images: Number of URLs kept in memory
        """
        self._session = session or requests.Session()
        self._timeout = timeout
        self._frame = frame
        self._max_images = max(1, max_images)

        self._lock = threading.Lock()
        self._images: OrderedDict[str, Image.Image | None] = OrderedDict()
        self._composed: dict[str, dict[tuple[Color, tuple[int, int]], bytes]] = {}

        self._pending: set[str] = set()
        self._requests: queue.Queue[Optional[str]] = queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._closed = False
        self._listener: Callable[[str], None] | None = None

    def on_loaded(self, callback: Callable[[str], None]) -> None:
        """Call ``callback(url)`` from the download thread after each download."""
        self._listener = callback

    # ================================================================
    # CACHE
    # ================================================================

    def _store(self, url: str, image: Image.Image | None) -> None:
        with self._lock:
            self._images[url] = image
            self._images.move_to_end(url)
            self._composed.pop(url, None)
            while len(self._images) > self._max_images:
                evicted, _ = self._images.popitem(last=False)
                self._composed.pop(evicted, None)
                logger.debug(f"Evicted preview {evicted}")

    def is_cached(self, url: str) -> bool:
        """Check if a URL was downloaded (or failed) and is still in memory."""
        with self._lock:
            return url in self._images

    def clear(self) -> None:
        """Forget all cached images and misses."""
        with self._lock:
            self._images.clear()
            self._composed.clear()

    # ================================================================
    # DOWNLOAD
    # ================================================================

    def load(self, url: str) -> Image.Image | None:
        """
        Get the decoded image for a URL, downloading it on this thread if needed.

        Returns:
            The image, or None if it could not be downloaded or decoded
        """
        with self._lock:
            if url in self._images:
                self._images.move_to_end(url)
                return self._images[url]

        image = self._download(url)
        self._store(url, image)
        return image

    def request(self, url: str) -> None:
        """Queue a download unless the URL is cached or already queued."""
        with self._lock:
            if self._closed or url in self._images or url in self._pending:
                return
            self._pending.add(url)
            if self._worker is None:
                self._worker = threading.Thread(target=self._run, name="artwork-loader", daemon=True)
                self._worker.start()
        self._requests.put(url)

    def _download(self, url: str) -> Image.Image | None:
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
            with Image.open(io.BytesIO(response.content)) as source:
                image = source.convert("RGBA")
            logger.debug(f"Loaded preview {url} ({image.width}x{image.height})")
            return image
        except requests.RequestException as e:
            logger.warning(f"Could not download preview {url}: {e}")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            logger.warning(f"Could not decode preview {url}: {e}")
        return None

    def _run(self) -> None:
        logger.debug("Artwork loader started")
        while True:
            url = self._requests.get()
            if url is None:
                break
            try:
                self.load(url)
            except Exception as e:
                logger.error(f"Error loading preview {url}: {e}", exc_info=True)
                self._store(url, None)
            finally:
                with self._lock:
                    self._pending.discard(url)

            listener = self._listener
            if listener is not None:
                try:
                    listener(url)
                except Exception as e:
                    logger.error(f"Error in artwork listener: {e}", exc_info=True)
        logger.debug("Artwork loader stopped")

    # ================================================================
    # COMPOSITION
    # ================================================================

    def compose(self, url: str, background: Color, size: tuple[int, int]) -> bytes | None:
        """
        Render a cached preview onto a colored frame. Never downloads.

        An uncached URL is queued with ``request`` and None is returned.

        Args:
            url: Preview image URL
            background: Frame color
            size: Key size in pixels (width, height)

        Returns:
            PNG bytes, or None if the preview is not (or not yet) available
        """
        variant = (background, size)
        with self._lock:
            cached = url in self._images
            if cached:
                self._images.move_to_end(url)
                image = self._images[url]
                data = self._composed.get(url, {}).get(variant)
                if data is not None:
                    return data

        if not cached:
            self.request(url)
            return None
        if image is None:
            return None

        width, height = size
        inner = (max(1, width - 2 * self._frame), max(1, height - 2 * self._frame))
        art = ImageOps.contain(image, inner)

        canvas = Image.new("RGBA", size, background.to_rgb_tuple() + (255,))
        offset = ((width - art.width) // 2, (height - art.height) // 2)
        canvas.alpha_composite(art, offset)

        buffer = io.BytesIO()
        canvas.convert("RGB").save(buffer, format="PNG")
        data = buffer.getvalue()

        with self._lock:
            if url in self._images:
                self._composed.setdefault(url, {})[variant] = data
        return data

    def close(self) -> None:
        """Stop the download thread and close the HTTP session."""
        with self._lock:
            self._closed = True
            worker = self._worker
            self._worker = None
        if worker is not None:
            self._requests.put(None)
            worker.join(timeout=self._timeout + 1.0)
        self._session.close()
