import pytest

from cub3d.image import BIG_ENDIAN, LITTLE_ENDIAN, Image, channel_shifts, good_color


def _color_map(x, y, w, h, kind):
    if kind == 2:
        return (y * 255) // w + ((((w - x) * 255) // w) << 16) + (((y * 255) // h) << 8)
    return (x * 255) // w + ((((w - x) * 255) // w) << 16) + (((y * 255) // h) << 8)


@pytest.mark.parametrize("size,kind", [(42, 1), (242, 1), (242, 2)])
def test_color_map_fill_reads_back(size, kind):
    image = Image(size, size)
    for y in range(size):
        for x in range(size):
            image.put_pixel(x, y, _color_map(x, y, size, size, kind))
    for y in range(0, size, 7):
        for x in range(0, size, 5):
            assert image.get_pixel(x, y) == _color_map(x, y, size, size, kind)


def test_buffer_layout_little_endian():
    image = Image(42, 42)
    assert image.bits_per_pixel == 32
    assert image.size_line == 42 * 4
    assert len(image.data) == image.size_line * 42
    image.put_pixel(3, 2, 0x112233)
    offset = 2 * image.size_line + 3 * 4
    assert bytes(image.data[offset : offset + 4]) == bytes([0x33, 0x22, 0x11, 0x00])


def test_buffer_layout_big_endian():
    image = Image(4, 4, endian=BIG_ENDIAN)
    image.put_pixel(1, 1, 0x112233)
    offset = image.size_line + 4
    assert bytes(image.data[offset : offset + 4]) == bytes([0x00, 0x11, 0x22, 0x33])
    assert image.get_pixel(1, 1) == 0x112233


def test_negative_color_is_stored_as_unsigned():
    image = Image(2, 2)
    image.put_pixel(0, 0, -1)
    assert image.get_pixel(0, 0) == 0xFFFFFFFF


def test_fill_and_clear():
    image = Image(5, 3)
    image.fill(0xAAAAAA)
    assert all(image.get_pixel(x, y) == 0xAAAAAA for x in range(5) for y in range(3))
    image.clear()
    assert image.data == bytearray(5 * 3 * 4)


@pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (4, 0), (0, 4)])
def test_out_of_bounds_pixel(x, y):
    image = Image(4, 4)
    with pytest.raises(IndexError):
        image.put_pixel(x, y, 1)
    with pytest.raises(IndexError):
        image.get_pixel(x, y)


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
def test_invalid_size(width, height):
    with pytest.raises(ValueError):
        Image(width, height)


def test_invalid_endian():
    with pytest.raises(ValueError):
        Image(2, 2, endian=7)


def test_channel_shifts_truecolor():
    assert channel_shifts(0xFF0000, 0x00FF00, 0x0000FF) == (16, 8, 8, 8, 0, 8)


def test_channel_shifts_565():
    assert channel_shifts(0xF800, 0x07E0, 0x001F) == (11, 5, 5, 6, 0, 5)


def test_channel_shifts_rejects_empty_mask():
    with pytest.raises(ValueError):
        channel_shifts(0, 0xFF00, 0xFF)


def test_good_color_deep_visual_unchanged():
    shifts = channel_shifts(0xFF0000, 0x00FF00, 0x0000FF)
    assert good_color(0xFF99FF, 24, shifts) == 0xFF99FF
    assert good_color(0x00FFFF, 32, shifts) == 0x00FFFF


def test_good_color_565():
    shifts = channel_shifts(0xF800, 0x07E0, 0x001F)
    assert good_color(0xFFFFFF, 16, shifts) == 0xFFFF
    assert good_color(0xFF0000, 16, shifts) == 0xF800
    assert good_color(0x000000, 16, shifts) == 0
    assert LITTLE_ENDIAN == 0