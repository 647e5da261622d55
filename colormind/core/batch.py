"""
Batch application of the simulate / daltonize transforms.

Buffers are either sequences of RGBA samples (discrete UI colors) or numpy
arrays whose last axis holds four channels (decoded image pixels). Every
sample is independent, so the buffer is flattened, optionally split into
chunks that run on a thread pool, and written back by index.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from colormind.core.config import RGBA, TransformConfig, TransformMode, parse_mode
from colormind.core.errors import ColorDivisionError
from colormind.daltonize.daltonizer import daltonize_array
from colormind.simulate.simulator import simulate_array
from colormind.utils.css import format_css_color, parse_css_color

logger = logging.getLogger(__name__)

Buffer = Union[np.ndarray, Sequence[Sequence[int]]]

ERROR_POLICIES = ("passthrough", "raise")


class BatchProcessor:
    """
    Apply one validated transform configuration to whole buffers.

    Parameters
    ----------
    config : TransformConfig
        Transform options; validated eagerly so a bad kind or amount fails
        before any sample is touched
    chunk_size : int, optional
        Samples per work unit when running on a thread pool
    max_workers : int, optional
        Thread pool size; ``None`` or 1 processes the buffer in one pass
    on_error : str
        ``"passthrough"`` keeps samples whose geometry is degenerate
        unchanged, ``"raise"`` propagates :class:`ColorDivisionError`
    """

    def __init__(
        self,
        config: Optional[TransformConfig] = None,
        chunk_size: Optional[int] = None,
        max_workers: Optional[int] = None,
        on_error: str = "passthrough",
    ) -> None:
        self.config = config or TransformConfig()
        self.config.validate()

        if on_error not in ERROR_POLICIES:
            raise ValueError(f"on_error must be one of {ERROR_POLICIES}, got {on_error!r}")
        if chunk_size is not None and chunk_size <= 0:
            raise ValueError(f"Chunk size {chunk_size} must be positive")
        if max_workers is not None and max_workers <= 0:
            raise ValueError(f"Worker count {max_workers} must be positive")

        self.chunk_size = chunk_size
        self.max_workers = max_workers
        self.on_error = on_error

        logger.info("Initializing colormind batch processor")
        logger.info("  Mode: %s", self.config.mode.value)
        logger.info("  Kind: %s", self.config.kind.value)
        logger.info("  Amount: %.3f", float(self.config.amount))

    def transform_rgb(self, rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Transform a (N, 3) block of 0-255 channels.

        Returns integer channels and the mask of samples that fell back to
        their input.
        """

        config = self.config
        if config.mode == TransformMode.DALTONIZE:
            amount = float(config.amount) if config.blend_daltonize else 1.0
            return daltonize_array(rgb, config.kind, amount), np.zeros(rgb.shape[0], dtype=bool)
        return simulate_array(rgb, config.kind, float(config.amount), config.custom_line)

    def process(self, buffer: Buffer) -> Union[np.ndarray, List[RGBA]]:
        """
        Transform every sample of ``buffer``.

        Returns an array of the same shape and dtype for array input and a
        list of :class:`RGBA` for sequence input. Alpha is copied verbatim.
        """

        as_array = isinstance(buffer, np.ndarray)
        if not as_array:
            buffer = [tuple(sample) for sample in buffer]
        pixels = _validate_buffer(buffer)
        flat = pixels.reshape(-1, 4)

        logger.info(
            "Processing %d samples: %s %s",
            flat.shape[0],
            self.config.mode.value,
            self.config.kind.value,
        )

        # Alpha stays in the caller's dtype; only RGB is rewritten
        out = np.array(buffer, copy=True).reshape(-1, 4) if as_array else flat.copy()
        failed = np.zeros(flat.shape[0], dtype=bool)

        for start, stop, rgb, fail in self._run(flat[:, :3]):
            out[start:stop, :3] = rgb
            failed[start:stop] = fail

        if failed.any():
            if self.on_error == "raise":
                index = int(np.flatnonzero(failed)[0])
                raise ColorDivisionError(
                    f"Sample {index} {tuple(int(v) for v in flat[index])} could not be transformed"
                )
            logger.warning(
                "%d sample(s) hit a degenerate confusion line and were left unchanged",
                int(failed.sum()),
            )

        if as_array:
            return out.reshape(pixels.shape)
        return [
            RGBA(int(r), int(g), int(b), sample[3]) for (r, g, b), sample in zip(out[:, :3], buffer)
        ]

    def _run(self, rgb: np.ndarray) -> Iterable[Tuple[int, int, np.ndarray, np.ndarray]]:
        total = rgb.shape[0]
        workers = self.max_workers or 1
        if workers == 1 or total == 0:
            result, fail = self.transform_rgb(rgb)
            return [(0, total, result, fail)]

        size = self.chunk_size or max(1, -(-total // workers))
        bounds = [(start, min(start + size, total)) for start in range(0, total, size)]
        logger.debug("Dispatching %d chunks to %d workers", len(bounds), workers)

        def work(bound: Tuple[int, int]) -> Tuple[int, int, np.ndarray, np.ndarray]:
            start, stop = bound
            result, fail = self.transform_rgb(rgb[start:stop])
            return start, stop, result, fail

        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(work, bounds))


def _validate_buffer(buffer: Buffer) -> np.ndarray:
    if isinstance(buffer, np.ndarray):
        pixels = buffer
    else:
        samples = list(buffer)
        if not samples:
            return np.empty((0, 4), dtype=np.float64)
        pixels = np.asarray(samples)

    if pixels.ndim < 1 or pixels.shape[-1] != 4:
        raise ValueError(f"Expected buffer with trailing axis of 4 channels, got shape {pixels.shape}")
    if not np.issubdtype(pixels.dtype, np.number):
        raise ValueError(f"Buffer must be numeric, got dtype {pixels.dtype}")
    if not np.isfinite(pixels).all():
        raise ValueError("Buffer contains NaN or Inf values")
    if pixels.size and (pixels.min() < 0 or pixels.max() > 255):
        raise ValueError("Buffer channels must lie in [0, 255]")
    return pixels.astype(np.float64)


def apply_to_buffer(
    buffer: Buffer,
    config: TransformConfig,
    mode: Union[TransformMode, str, None] = None,
    on_error: str = "passthrough",
) -> Union[np.ndarray, List[RGBA]]:
    """
    Convenience wrapper: transform ``buffer`` with ``config``.

    ``mode`` overrides ``config.mode`` when given.
    """

    if mode is not None and parse_mode(mode) != config.mode:
        config = TransformConfig(
            kind=config.kind,
            amount=config.amount,
            custom_line=config.custom_line,
            mode=parse_mode(mode),
            blend_daltonize=config.blend_daltonize,
        )
    return BatchProcessor(config, on_error=on_error).process(buffer)


def transform_css_colors(colors: Sequence[str], config: TransformConfig) -> List[str]:
    """Transform CSS color strings (``color`` / ``background-color`` values)."""

    samples = [parse_css_color(color) for color in colors]
    return [format_css_color(sample) for sample in BatchProcessor(config).process(samples)]
