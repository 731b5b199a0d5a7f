"""CHIP-8 display surface.

The display is a row-major ``bool[SCREEN_HEIGHT, SCREEN_WIDTH]`` array indexed
``[y, x]``. All coordinates wrap around the screen edges, cell by cell.
"""

from typing import Iterator, Tuple

import jax.numpy as jnp
import numpy as np

from chix8.constants import SCREEN_WIDTH, SCREEN_HEIGHT

# Pre-computed coordinate grids for sprite drawing
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')

SPRITE_WIDTH = 8


def clear(display: jnp.ndarray) -> jnp.ndarray:
    """Turn every cell off."""
    return jnp.zeros_like(display)


def is_set(display: jnp.ndarray, x, y) -> jnp.ndarray:
    """Whether the cell at the wrapped coordinate is on."""
    return display[y % SCREEN_HEIGHT, x % SCREEN_WIDTH]


def toggle(display: jnp.ndarray, x, y) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """XOR a single cell on.

    Returns:
        Tuple of the new display and whether the cell went from on to off
    """
    row, col = y % SCREEN_HEIGHT, x % SCREEN_WIDTH
    was_on = display[row, col]
    return display.at[row, col].set(~was_on), was_on


def sprite_mask(rows: jnp.ndarray, x, y, height) -> jnp.ndarray:
    """Expand sprite rows into a full-screen mask of the cells to toggle.

    Args:
        rows: uint8 array holding at least ``height`` sprite rows
        x: Left column of the sprite, wrapped onto the screen
        y: Top row of the sprite, wrapped onto the screen
        height: Number of rows to draw
    """
    col_offset = (xx - x) % SCREEN_WIDTH
    row_offset = (yy - y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < height)

    sprite_bytes = jnp.astype(rows[jnp.minimum(row_offset, rows.shape[0] - 1)], jnp.int32)
    bits = (sprite_bytes >> (SPRITE_WIDTH - 1 - jnp.minimum(col_offset, SPRITE_WIDTH - 1))) & 1
    return (bits == 1) & in_sprite


def draw_sprite(display: jnp.ndarray, rows: jnp.ndarray, x, y, height) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """XOR a sprite onto the display.

    Returns:
        Tuple of the new display and whether any lit cell was erased, computed
        over the whole sprite
    """
    mask = sprite_mask(rows, x, y, height)
    collision = jnp.any(display & mask)
    return display ^ mask, collision


def lit_pixels(display) -> Iterator[Tuple[int, int]]:
    """Yield ``(x, y)`` for each lit cell, row by row."""
    rows, cols = np.nonzero(np.asarray(display))
    for y, x in zip(rows.tolist(), cols.tolist()):
        yield x, y
