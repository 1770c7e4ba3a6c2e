import numpy as np
import pytest

from skeletalgraph.classes.curve import pycurve, normalize


def _line(n):
    return pycurve.from_points([(float(i), 0.0, 0.0) for i in range(n)])


def test_straight_curve_has_two_points_and_segment_tangents():
    curve = pycurve.straight((0, 0, 0), (2, 0, 0))
    assert curve.size() == 2
    assert np.allclose(curve.aTangent, [[1, 0, 0], [1, 0, 0]])
    assert curve.length() == pytest.approx(2.0)


def test_normalize_of_zero_vector_is_zero():
    assert np.allclose(normalize((0, 0, 0)), 0.0)
    assert np.allclose(normalize((0, 3, 4)), (0, 0.6, 0.8))


def test_tangents_use_central_differences_inside():
    curve = pycurve.from_points([(0, 0, 0), (1, 0, 0), (1, 1, 0)])
    assert np.allclose(curve.aTangent[0], (1, 0, 0))
    assert np.allclose(curve.aTangent[1], normalize((1, 1, 0)))
    assert np.allclose(curve.aTangent[2], (0, 1, 0))


def test_mismatched_tangents_are_rejected():
    with pytest.raises(ValueError):
        pycurve([(0, 0, 0), (1, 0, 0)], [(1, 0, 0)])


def test_reversed_flips_order_and_tangents():
    curve = _line(3)
    back = curve.reversed()
    assert np.allclose(back.aPoint[:, 0], [2, 1, 0])
    assert np.allclose(back.aTangent, -curve.aTangent[::-1])
    # the original is untouched
    assert np.allclose(curve.aPoint[:, 0], [0, 1, 2])


def test_append_with_skip_and_reverse():
    curve = _line(2)
    other = pycurve.from_points([(3, 0, 0), (2, 0, 0), (1, 0, 0)])
    curve.append(other, skip_first=1, reverse=True)
    assert np.allclose(curve.aPoint[:, 0], [0, 1, 2, 3])

    curve.append(_line(1), skip_first=1)
    assert curve.size() == 4


def test_push_pop_and_trim_front():
    curve = _line(4)
    last = curve.pop_back()
    assert np.allclose(last.point, (3, 0, 0))
    assert curve.size() == 3

    curve.push_back(((7, 0, 0), (1, 0, 0)))
    assert np.allclose(curve.back().point, (7, 0, 0))

    curve.trim_front(2)
    assert np.allclose(curve.aPoint[:, 0], [2, 7])

    empty = pycurve()
    with pytest.raises(IndexError):
        empty.pop_back()


def test_front_and_back_accessors_return_copies():
    curve = _line(4)
    front = curve.front()
    front.point[0] = 100.0
    assert curve.aPoint[0, 0] == 0.0
    assert np.allclose(curve.after_front().point, (1, 0, 0))
    assert np.allclose(curve.before_back().point, (2, 0, 0))


def test_deform_at_moves_neighbours_but_not_ends():
    curve = _line(5)
    assert curve.deform_at(2, (2, 1, 0), window=1)
    assert np.allclose(curve.aPoint[2], (2, 1, 0))
    assert curve.aPoint[1][1] == pytest.approx(0.5)
    assert curve.aPoint[3][1] == pytest.approx(0.5)
    assert np.allclose(curve.aPoint[0], (0, 0, 0))
    assert np.allclose(curve.aPoint[4], (4, 0, 0))


def test_deform_at_fails_without_interior_points_or_bad_index():
    assert not _line(2).deform_at(1, (0, 1, 0))
    assert not _line(4).deform_at(4, (0, 1, 0))


def test_deform_at_accepts_negative_index():
    curve = _line(4)
    assert curve.deform_at(-1, (3, 1, 0))
    assert np.allclose(curve.back().point, (3, 1, 0))
    assert np.allclose(curve.front().point, (0, 0, 0))


@pytest.mark.parametrize("maintain_shape", [True, False])
def test_pseudo_elastic_deform_spreads_motion_by_arc_length(maintain_shape):
    curve = _line(3)
    assert curve.pseudo_elastic_deform(False, (2, 2, 0), maintain_shape)
    assert np.allclose(curve.aPoint[2], (2, 2, 0))
    assert np.allclose(curve.aPoint[1], (1, 1, 0))
    assert np.allclose(curve.aPoint[0], (0, 0, 0))


def test_pseudo_elastic_deform_works_on_two_point_curves():
    curve = _line(2)
    assert curve.pseudo_elastic_deform(True, (0, 1, 0))
    assert np.allclose(curve.aPoint, [[0, 1, 0], [1, 0, 0]])
    assert not pycurve([(0, 0, 0)]).pseudo_elastic_deform(True, (1, 1, 1))


def test_compact_string_has_one_line_per_point():
    curve = pycurve.straight((0, 0, 0), (1, 2.5, 3))
    assert curve.to_compact_string() == "0 0 0\n1 2.5 3\n"
