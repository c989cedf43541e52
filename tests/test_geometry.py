import math

import numpy as np
import pytest

from perspecto.geometry import (
    PoseMatrix,
    PoseVector,
    exponential_map,
    pose_matrix_from_vector,
    pose_vector_from_matrix,
)

SAMPLE_POSE = [0.3, -1.2, 2.5, 0.4, -0.7, 0.2]


def test_pose_matrix_defaults_to_identity():
    assert np.array_equal(np.asarray(PoseMatrix()), np.eye(4))


def test_pose_matrix_rejects_bad_shape():
    with pytest.raises(ValueError):
        PoseMatrix(np.eye(3))


def test_pose_matrix_row_access_and_write():
    m = PoseMatrix()
    m[1][3] = 5.0
    assert m[1][3] == 5.0
    assert m[1, 3] == 5.0


def test_transpose_swaps_cells():
    data = np.arange(16.0).reshape(4, 4)
    m = PoseMatrix(data)
    assert np.array_equal(np.asarray(m.t()), data.T)


def test_inverse_composes_to_identity():
    m = pose_matrix_from_vector(SAMPLE_POSE)
    assert np.allclose(np.asarray(m.inverse() @ m), np.eye(4))
    assert np.allclose(np.asarray(m @ m.inverse()), np.eye(4))


def test_inverse_of_pure_translation_negates_it():
    m = pose_matrix_from_vector([1.0, 2.0, 3.0, 0.0, 0.0, 0.0])
    assert np.allclose(m.inverse().translation, [-1.0, -2.0, -3.0])


def test_matmul_with_vector_returns_array():
    m = pose_matrix_from_vector([1.0, 2.0, 3.0, 0.0, 0.0, 0.0])
    assert np.allclose(m @ [0.0, 0.0, 0.0, 1.0], [1.0, 2.0, 3.0, 1.0])


def test_pose_vector_defaults_to_zero_and_checks_length():
    assert list(PoseVector()) == [0.0] * 6
    with pytest.raises(ValueError):
        PoseVector([1.0, 2.0])


def test_pose_vector_item_access():
    v = PoseVector(SAMPLE_POSE)
    v[2] = 9.0
    assert v[2] == 9.0
    assert v[0] == SAMPLE_POSE[0]
    assert len(v) == 6


def test_rotation_is_orthonormal():
    r = pose_matrix_from_vector(SAMPLE_POSE).rotation
    assert np.allclose(r.T @ r, np.eye(3))
    assert math.isclose(np.linalg.det(r), 1.0)


def test_quarter_turn_about_z_maps_x_to_y():
    m = pose_matrix_from_vector([0.0, 0.0, 0.0, 0.0, 0.0, math.pi / 2])
    assert np.allclose(m @ [1.0, 0.0, 0.0, 1.0], [0.0, 1.0, 0.0, 1.0])


@pytest.mark.parametrize(
    "pose",
    [
        SAMPLE_POSE,
        [0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
        [1.0, 2.0, 3.0, 1e-9, -2e-9, 0.0],
        [0.5, 0.5, 0.5, 1.0, 0.5, -0.25],
    ],
)
def test_pose_vector_round_trip(pose):
    back = pose_vector_from_matrix(pose_matrix_from_vector(pose))
    assert np.allclose(np.asarray(back), pose)


def test_half_turn_round_trip_gives_same_matrix():
    axis = np.array([1.0, 1.0, 0.0]) / math.sqrt(2.0)
    pose = np.concatenate([[0.1, 0.2, 0.3], math.pi * axis])
    m = pose_matrix_from_vector(pose)
    back = pose_matrix_from_vector(pose_vector_from_matrix(m))
    assert np.allclose(np.asarray(back), np.asarray(m))


def test_exponential_map_of_zero_is_identity():
    assert np.allclose(np.asarray(exponential_map([0.0] * 6)), np.eye(4))


def test_exponential_map_pure_translation():
    m = exponential_map([1.0, -2.0, 0.5, 0.0, 0.0, 0.0])
    assert np.allclose(m.translation, [1.0, -2.0, 0.5])
    assert np.allclose(m.rotation, np.eye(3))


def test_exponential_map_rotation_matches_theta_u():
    w = [0.3, -0.2, 0.9]
    m = exponential_map([0.0, 0.0, 0.0, *w])
    assert np.allclose(m.rotation, pose_matrix_from_vector([0.0, 0.0, 0.0, *w]).rotation)


def test_exponential_map_translation_along_axis_is_kept():
    u = np.array([0.2, 0.4, -0.3])
    m = exponential_map(np.concatenate([u, u]))
    assert np.allclose(m.translation, u)


def test_exponential_map_rejects_wrong_length():
    with pytest.raises(ValueError):
        exponential_map([1.0, 2.0, 3.0])


def test_pose_vector_from_matrix_rejects_bad_shape():
    with pytest.raises(ValueError):
        pose_vector_from_matrix(np.eye(3))