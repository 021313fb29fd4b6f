import pytest

from pagediff.core.align import align_regions, union_rect
from pagediff.core.types import PixelBuffer, Rect


def test_equal_rects_stay_at_origin():
    canvas, r1, r2 = align_regions(Rect(0, 0, 40, 30), Rect(0, 0, 40, 30))
    assert canvas == Rect(0, 0, 40, 30)
    assert r1 == r2 == Rect(0, 0, 40, 30)


def test_union_covers_both_sizes():
    canvas, r1, r2 = align_regions(Rect(0, 0, 10, 5), Rect(0, 0, 8, 7))
    assert canvas == Rect(0, 0, 10, 7)
    assert r1 == Rect(0, 0, 10, 5)
    assert r2 == Rect(0, 0, 8, 7)


def test_empty_side_degenerates_to_present_rect():
    canvas, r1, r2 = align_regions(Rect.of_buffer(None), Rect(0, 0, 4, 6))
    assert canvas == Rect(0, 0, 4, 6)
    assert r1.is_empty
    assert r2 == Rect(0, 0, 4, 6)


def test_negative_origin_is_normalised():
    canvas, r1, r2 = align_regions(Rect(0, 0, 10, 10), Rect(-3, -2, 10, 10))
    assert canvas == Rect(0, 0, 13, 12)
    assert r1 == Rect(3, 2, 10, 10)
    assert r2 == Rect(0, 0, 10, 10)


def test_union_rect_keeps_shared_frame():
    assert union_rect(Rect(2, 3, 4, 4), Rect(5, 1, 2, 2)) == Rect(2, 1, 5, 6)


def test_rect_of_buffer_uses_buffer_size():
    buffer = PixelBuffer.blank(7, 3)
    assert Rect.of_buffer(buffer) == Rect(0, 0, 7, 3)
    assert Rect.of_buffer(buffer, 2, 1) == Rect(2, 1, 7, 3)


def test_rect_rejects_negative_size():
    with pytest.raises(ValueError):
        Rect(0, 0, -1, 5)
