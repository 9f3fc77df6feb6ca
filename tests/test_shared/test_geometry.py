"""
Tests for geometry helpers.
"""

import math

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from shared.geometry import (
    Transform,
    arc_offset,
    as_position,
    distance,
    hop_position,
    lerp,
    look_rotation,
    slerp_rotation,
)


class TestPositions:
    """Tests for position helpers."""

    def test_as_position_copies(self):
        source = np.array([1.0, 2.0, 3.0])
        position = as_position(source)
        source[0] = 0.0
        assert position[0] == 1.0
        assert position.dtype == float

    def test_as_position_rejects_wrong_shape(self):
        with pytest.raises(ValueError):
            as_position([1.0, 2.0, 3.0, 4.0])

    def test_distance_and_lerp(self):
        a = np.array([0.0, 0.0, 0.0])
        b = np.array([3.0, 0.0, 4.0])
        assert distance(a, b) == 5.0
        assert np.allclose(lerp(a, b, 0.5), [1.5, 0.0, 2.0])


class TestHopArc:
    """Tests for the hop arc."""

    def test_arc_is_zero_at_ends(self):
        assert arc_offset(0.0) == pytest.approx(0.0)
        assert arc_offset(1.0) == pytest.approx(0.0)

    def test_arc_peaks_at_midpoint(self):
        assert arc_offset(0.5) == 1.0
        assert arc_offset(0.5, height=2.0) == 2.0
        assert arc_offset(0.25) < arc_offset(0.5)

    def test_hop_position_lifts_lerp(self):
        start = np.array([0.0, 0.0, 0.0])
        end = np.array([2.0, 0.0, 0.0])
        assert np.allclose(hop_position(start, end, 0.5), [1.0, 1.0, 0.0])
        assert np.allclose(hop_position(start, end, 1.0), end)


class TestRotations:
    """Tests for rotation helpers."""

    def test_look_rotation_faces_direction(self):
        rotation = look_rotation(np.array([1.0, 0.0, 0.0]))
        assert np.allclose(rotation.apply([0.0, 0.0, 1.0]), [1.0, 0.0, 0.0])

    def test_look_rotation_ignores_height(self):
        rotation = look_rotation(np.array([0.0, 5.0, 1.0]))
        assert np.allclose(rotation.apply([0.0, 0.0, 1.0]), [0.0, 0.0, 1.0])

    def test_look_rotation_vertical_is_none(self):
        assert look_rotation(np.array([0.0, 1.0, 0.0])) is None

    def test_slerp_endpoints_and_middle(self):
        start = Rotation.identity()
        end = Rotation.from_euler("y", math.pi / 2)

        assert np.allclose(slerp_rotation(start, end, 0.0).as_quat(), start.as_quat())
        assert np.allclose(slerp_rotation(start, end, 1.0).as_quat(), end.as_quat())
        middle = slerp_rotation(start, end, 0.5).as_euler("yxz", degrees=True)[0]
        assert middle == pytest.approx(45.0)

    def test_slerp_clamps_progress(self):
        start = Rotation.identity()
        end = Rotation.from_euler("y", math.pi / 2)
        assert np.allclose(slerp_rotation(start, end, 1.5).as_quat(), end.as_quat())


class TestTransform:
    """Tests for Transform."""

    def test_defaults(self):
        transform = Transform()
        assert np.allclose(transform.position, [0.0, 0.0, 0.0])
        assert np.allclose(transform.forward, [0.0, 0.0, 1.0])
        assert transform.yaw_degrees == pytest.approx(0.0)

    def test_position_converted(self):
        transform = Transform((1, 2, 3))
        assert transform.position.dtype == float

    def test_get_state(self):
        transform = Transform((1.0, 0.0, 2.0), Rotation.from_euler("y", 90, degrees=True))
        state = transform.get_state()
        assert state["position"] == [1.0, 0.0, 2.0]
        assert state["yaw"] == pytest.approx(90.0)
