"""In-memory pixel images and colour conversion for the drawing surface.

An image is a packed 32-bit-per-pixel buffer whose rows are ``size_line``
bytes long. Each pixel is stored as 0xAARRGGBB in the image's byte order,
where endian 0 is little endian and 1 is big endian.
"""

from __future__ import annotations

from dataclasses import dataclass, field

LITTLE_ENDIAN = 0
BIG_ENDIAN = 1

_PIXEL_MASK = 0xFFFFFFFF


def channel_shifts(red_mask: int, green_mask: int, blue_mask: int) -> tuple[int, ...]:
    """Return (shift, width) for the red, green and blue masks of a visual.

    The result is six numbers: red shift, red bits, green shift, green bits,
    blue shift, blue bits. Raises ValueError for an empty mask.
    """
    shifts: list[int] = []
    for mask in (red_mask, green_mask, blue_mask):
        if mask <= 0:
            raise ValueError(f"colour mask must be a positive bit field, got {mask:#x}")
        shift = 0
        while not mask & 1:
            mask >>= 1
            shift += 1
        bits = 0
        while mask & 1:
            mask >>= 1
            bits += 1
        shifts.extend((shift, bits))
    return tuple(shifts)


def good_color(color: int, depth: int, shifts: tuple[int, ...]) -> int:
    """Convert 0xRRGGBB to a pixel value for a visual of the given depth.

    Deep visuals (24 bits and more) take the colour unchanged; shallower
    ones pack each channel's top bits at the positions given by ``shifts``.
    """
    if depth >= 24:
        return color
    red = (color >> 8) & 0xFF00
    green = color & 0xFF00
    blue = (color << 8) & 0xFF00
    return (
        ((red >> (16 - shifts[1])) << shifts[0])
        + ((green >> (16 - shifts[3])) << shifts[2])
        + ((blue >> (16 - shifts[5])) << shifts[4])
    )


@dataclass(eq=False)
class Image:
    """A width x height image backed by a writable byte buffer."""

    width: int
    height: int
    endian: int = LITTLE_ENDIAN
    bits_per_pixel: int = field(default=32, init=False)
    data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image size must be positive, got {self.width}x{self.height}")
        if self.endian not in (LITTLE_ENDIAN, BIG_ENDIAN):
            raise ValueError(f"endian must be 0 or 1, got {self.endian}")
        self.data = bytearray(self.size_line * self.height)

    @property
    def bytes_per_pixel(self) -> int:
        return self.bits_per_pixel // 8

    @property
    def size_line(self) -> int:
        """Number of bytes in one row of the buffer."""
        return self.width * self.bytes_per_pixel

    @property
    def _byteorder(self) -> str:
        return "big" if self.endian == BIG_ENDIAN else "little"

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.size_line + x * self.bytes_per_pixel

    def _encode(self, color: int) -> bytes:
        return (color & _PIXEL_MASK).to_bytes(self.bytes_per_pixel, self._byteorder)

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Store ``color`` at (x, y); raises IndexError outside the image."""
        offset = self._offset(x, y)
        self.data[offset : offset + self.bytes_per_pixel] = self._encode(color)

    def get_pixel(self, x: int, y: int) -> int:
        """Return the unsigned 32-bit pixel value at (x, y)."""
        offset = self._offset(x, y)
        return int.from_bytes(self.data[offset : offset + self.bytes_per_pixel], self._byteorder)

    def fill(self, color: int) -> None:
        """Set every pixel to ``color``."""
        self.data[:] = self._encode(color) * (self.width * self.height)

    def clear(self) -> None:
        """Set every byte of the buffer to zero."""
        self.data[:] = bytes(len(self.data))