import pytest

from hbplace.module import Module


def test_new_module_starts_at_origin_unrotated():
    m = Module("a", 3, 5)
    assert (m.x, m.y) == (0, 0)
    assert m.rotated is False
    assert m.width == 3
    assert m.height == 5


def test_rotate_swaps_effective_dimensions():
    m = Module("a", 3, 5)
    m.rotate()
    assert m.width == 5
    assert m.height == 3
    assert m.original_width == 3
    assert m.original_height == 5


def test_rotate_twice_restores():
    m = Module("a", 3, 5)
    m.rotate()
    m.rotate()
    assert m.rotated is False
    assert (m.width, m.height) == (3, 5)


def test_area_invariant_under_rotation():
    m = Module("a", 4, 7)
    before = m.area
    m.rotate()
    assert m.area == before
    assert m.area == m.width * m.height


def test_right_and_top_follow_position():
    m = Module("a", 4, 7)
    m.set_position(10, 20)
    assert (m.x, m.y) == (10, 20)
    assert m.right == m.x + m.width
    assert m.top == m.y + m.height
    m.rotate()
    assert m.right == m.x + m.width
    assert m.top == m.y + m.height


@pytest.mark.parametrize(
    "pos, expected",
    [
        ((1, 1), True),
        ((2, 0), False),
        ((0, 2), False),
        ((-2, 0), False),
        ((0, 0), True),
        ((5, 5), False),
    ],
)
def test_overlaps(pos, expected):
    a = Module("a", 2, 2)
    b = Module("b", 2, 2)
    b.set_position(*pos)
    assert a.overlaps(b) is expected
    assert b.overlaps(a) is expected


def test_copy_is_independent():
    m = Module("a", 2, 3)
    m.set_position(4, 5)
    m.rotate()
    c = m.copy()
    assert c == m
    c.set_position(0, 0)
    c.rotate()
    assert (m.x, m.y) == (4, 5)
    assert m.rotated is True


def test_describe_contents():
    m = Module("blk", 2, 3)
    m.set_position(4, 5)
    text = m.describe()
    assert text.splitlines()[0] == "Module: blk"
    assert "Position: (4, 5)" in text
    assert "Dimensions: 2 x 3" in text
    assert "Rotated: No" in text
    m.rotate()
    assert "Rotated: Yes" in m.describe()
    assert "Dimensions: 3 x 2" in m.describe()