from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, List, Iterator
import hashlib
import io
import logging
import os
import signal
import threading
import numpy as np
import cv2
import httpx
from PIL import Image as PILImage
from dotenv import load_dotenv
from ..errors import DecodeError
from ..models.image import RasterImage

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_EXTENSIONS = ".png,.jpg,.jpeg,.bmp,.gif,.webp"


class ImageRepository:
    """
    Handles decoding, encoding and file I/O for RasterImage entities.
    The only place that talks to OpenCV / Pillow codecs or the network.
    """
    def __init__(self):
        exts = os.getenv("VALID_IMAGE_EXTENSIONS", DEFAULT_IMAGE_EXTENSIONS)
        self.VALID_EXTS = {ext.strip().lower() for ext in exts.split(",") if ext.strip()}
        self.LOAD_TIMEOUT = int(os.getenv("IMAGE_LOAD_TIMEOUT", "5"))
        self.URL_TIMEOUT = float(os.getenv("IMAGE_URL_TIMEOUT", "10"))

    @staticmethod
    def create_image(pixels: np.ndarray, path: Union[str, Path] = None) -> RasterImage:
        if path is None:
            return RasterImage(pixels)
        return RasterImage(pixels=pixels, path=Path(path))

    # ─── decoding ─────────────────────────────────────────────────────
    @staticmethod
    def from_bytes(data: bytes, path: Union[str, Path] = None) -> RasterImage:
        """
        Decode an encoded image (PNG, JPEG, ...) held in memory.
        """
        if not data:
            raise DecodeError("Cannot decode an empty byte string")
        try:
            arr_bgr = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
        except cv2.error as err:
            raise DecodeError(f"Undecodable image data: {err}") from err
        if arr_bgr is None:
            raise DecodeError(f"Undecodable image data ({len(data)} bytes)")
        return ImageRepository.create_image(arr_bgr[:, :, ::-1], path)

    def load(self, path: Union[str, Path], timeout: int = None) -> RasterImage:
        path = Path(path)
        timeout = self.LOAD_TIMEOUT if timeout is None else timeout
        if not path.is_file():
            raise FileNotFoundError(f"Image not found: {path}")

        # ─── timeout wrapper (5 s default, main thread only) ──────────────
        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        use_alarm = (
            timeout > 0
            and hasattr(signal, "SIGALRM")
            and threading.current_thread() is threading.main_thread()
        )
        previous = signal.signal(signal.SIGALRM, _handler) if use_alarm else None
        if use_alarm:
            signal.alarm(timeout)
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        finally:
            if use_alarm:
                signal.alarm(0)  # always disarm
                signal.signal(signal.SIGALRM, previous if previous is not None else signal.SIG_DFL)
        # ──────────────────────────────────────────────────────────────────

        if arr_bgr is None:
            raise DecodeError(f"Image unreadable: {path}")

        logger.debug(f"Loaded {path} ({arr_bgr.shape[1]}x{arr_bgr.shape[0]})")
        return self.create_image(arr_bgr[:, :, ::-1], path)

    def load_url(self, url: str, timeout: float = None, client: httpx.Client = None) -> RasterImage:
        """
        Fetch an image over HTTP(S) and decode it. HTTP errors propagate as httpx errors.
        """
        timeout = self.URL_TIMEOUT if timeout is None else timeout
        if client is None:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                response = own_client.get(url)
        else:
            response = client.get(url, timeout=timeout)
        response.raise_for_status()
        logger.debug(f"Fetched {url} ({len(response.content)} bytes)")
        return self.from_bytes(response.content)

    # ─── encoding / persistence ───────────────────────────────────────
    @staticmethod
    def to_png_bytes(image: RasterImage) -> bytes:
        buf = io.BytesIO()
        PILImage.fromarray(image.buffer()).save(buf, format="PNG")
        return buf.getvalue()

    def hash(self, image: RasterImage, salt: str = "") -> str:
        """
        MD5 of the PNG encoding of `image`, optionally salted.
        """
        return hashlib.md5(self.to_png_bytes(image) + salt.encode("utf-8")).hexdigest()

    def save(self, image: RasterImage, name: str = None, directory: Union[str, Path] = ".") -> Path:
        """
        Write `image` as `<directory>/<name>.png`; the image hash is used when no name is given.
        """
        if name is None:
            name = self.hash(image)
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / f"{name}.png"
        PILImage.fromarray(image.buffer()).save(target, format="PNG")
        logger.debug(f"Saved {target}")
        return target

    # ─── directories ──────────────────────────────────────────────────
    def iter_paths(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Path]:
        """
        Yield image file paths under `folder` with an allowed extension, sorted.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() in allowed and p.is_file():
                yield p

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[RasterImage]:
        """
        Yield RasterImage objects one at a time.  Nothing accumulates in memory.
        """
        for p in self.iter_paths(folder, recursive=recursive, exts=exts):
            try:
                yield self.load(p)
            except (DecodeError, TimeoutError) as err:
                logger.warning(f"Skipping {p.name}: {err}")

    def load_dir(
        self, folder: Union[str, Path], *, recursive=False, exts=None
    ) -> List[RasterImage]:
        """
        Convenience helper that returns a list, but internally streams.
        """
        return list(self.iter_dir(folder, recursive=recursive, exts=exts))
