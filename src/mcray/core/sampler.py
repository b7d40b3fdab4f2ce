"""Injectable uniform random source for Monte Carlo sampling.

Every pixel of the render target owns an independent xorshift32 stream stored
in a Taichi field. A stream is only ever advanced by the thread that shades
its pixel, so sampling inside the parallel render loop needs no locking and a
render is reproducible for a given seed and thread-to-pixel assignment.

Sampling call sites receive the stream index explicitly:

    >>> @ti.kernel
    ... def sample() -> ti.f32:
    ...     return random_float(pixel_stream(0, 0))

The source can be swapped for a constant (``set_fixed_sample``). With the
constant 0.5 the camera produces un-jittered rays through pixel centres,
which is what projection tests want.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.core.sampler import seed_sampler
    >>> seed_sampler(1234)
"""

import logging

import numpy as np
import taichi as ti

logger = logging.getLogger(__name__)

# Stream slots cover the largest supported render target
MAX_STREAM_WIDTH = 2048
MAX_STREAM_HEIGHT = 2048
NUM_STREAMS = MAX_STREAM_WIDTH * MAX_STREAM_HEIGHT

# 24 mantissa bits -> uniform float in [0, 1)
_INV_2_24 = 1.0 / 16777216.0

_rng_state = ti.field(dtype=ti.u32, shape=NUM_STREAMS)

_fixed_enabled = ti.field(dtype=ti.i32, shape=())
_fixed_value = ti.field(dtype=ti.f32, shape=())

_seeded = False


def seed_sampler(seed: int | None = None) -> None:
    """Seed every stream from a NumPy generator.

    Args:
        seed: Seed for ``numpy.random.default_rng``. ``None`` pulls fresh
            entropy from the operating system.
    """
    global _seeded

    rng = np.random.default_rng(seed)
    # xorshift32 has a fixed point at zero, so zero states are excluded
    states = rng.integers(1, 2**32, size=NUM_STREAMS, dtype=np.uint32)
    _rng_state.from_numpy(states)
    _seeded = True
    logger.debug("Seeded %d sampler streams (seed=%s)", NUM_STREAMS, seed)


def ensure_seeded() -> None:
    """Seed from OS entropy unless a seed has already been applied."""
    if not _seeded:
        seed_sampler(None)


def set_fixed_sample(value: float | None) -> None:
    """Replace every random draw with a constant, or restore random draws.

    Args:
        value: Constant in [0, 1) returned by every draw, or ``None`` to go
            back to the seeded streams.

    Raises:
        ValueError: If value is outside [0, 1).
    """
    if value is None:
        _fixed_enabled[None] = 0
        return

    if value < 0.0 or value >= 1.0:
        raise ValueError(f"Fixed sample value {value} is outside [0, 1)")

    _fixed_value[None] = value
    _fixed_enabled[None] = 1


def is_fixed() -> bool:
    """Check whether draws are currently replaced by a constant."""
    return bool(_fixed_enabled[None])


def stream_index(pixel_i: int, pixel_j: int) -> int:
    """Python-side twin of pixel_stream.

    Raises:
        ValueError: If the pixel lies outside the stream table.
    """
    if not (0 <= pixel_i < MAX_STREAM_WIDTH and 0 <= pixel_j < MAX_STREAM_HEIGHT):
        raise ValueError(f"Pixel ({pixel_i}, {pixel_j}) has no sampler stream")
    return pixel_j * MAX_STREAM_WIDTH + pixel_i


@ti.func
def pixel_stream(pixel_i: ti.i32, pixel_j: ti.i32) -> ti.i32:
    """Stream index owned by pixel (i, j)."""
    return pixel_j * MAX_STREAM_WIDTH + pixel_i


@ti.func
def random_float(stream: ti.i32) -> ti.f32:
    """Draw a uniform float in [0, 1) from a stream.

    Args:
        stream: Stream index, normally ``pixel_stream(i, j)``.

    Returns:
        The next value of the stream, or the fixed sample when one is set.
    """
    result = 0.0
    if _fixed_enabled[None] == 1:
        result = _fixed_value[None]
    else:
        x = _rng_state[stream]
        x ^= x << 13
        # masks make the right shifts logical regardless of signedness
        x ^= (x >> 17) & 0x7FFF
        x ^= x << 5
        _rng_state[stream] = x
        result = ti.cast((x >> 8) & 0xFFFFFF, ti.f32) * _INV_2_24
    return result


@ti.func
def random_range(stream: ti.i32, low: ti.f32, high: ti.f32) -> ti.f32:
    """Draw a uniform float in [low, high)."""
    return low + (high - low) * random_float(stream)
