import numpy as np
import pytest

from perspecto.acquisition import InterpType
from perspecto.planar_image import RegularlySampledCPImage


def _image(h=4, w=5):
    return (np.arange(h * w, dtype=np.uint8) * 3).reshape(h, w)


def test_grid_is_row_major():
    grid = RegularlySampledCPImage(3, 4)
    assert grid.nb_samples == 12
    point, _ = grid.get_raw_sample(1 * 4 + 2)
    assert (point.x, point.y, point.w) == (2.0, 1.0, 1.0)


def test_nearest_same_size_copies_interior():
    img = _image()
    grid = RegularlySampledCPImage(*img.shape)
    grid.build_from(img)
    out = grid.bitmap.reshape(img.shape)
    assert np.array_equal(out[:-1, :-1], img[:-1, :-1])
    assert not out[-1, :].any()
    assert not out[:, -1].any()


def test_bilinear_integer_positions_are_exact():
    img = _image()
    grid = RegularlySampledCPImage(*img.shape)
    grid.set_interp_type(InterpType.BILINEAR)
    grid.build_from(img)
    out = grid.bitmapf.reshape(img.shape)
    assert np.allclose(out[:-1, :-1], img[:-1, :-1])
    _, value = grid.get_sample(0)
    assert value == pytest.approx(float(img[0, 0]))


def test_half_resolution_grid_subsamples():
    img = (np.arange(16, dtype=np.float64) ** 2).reshape(4, 4)
    grid = RegularlySampledCPImage(2, 2)
    grid.build_from(img)
    assert np.array_equal(grid.bitmap.reshape(2, 2), img[::2, ::2])


def test_zero_mask_ignores_everything():
    img = _image() + 1
    mask = np.zeros_like(img)
    for interp in (InterpType.NEAREST_NEIGHBOR, InterpType.BILINEAR):
        grid = RegularlySampledCPImage(*img.shape)
        grid.set_interp_type(interp)
        grid.build_from(img, mask)
        assert not grid.bitmap.any()


def test_full_mask_matches_unmasked():
    img = _image()
    plain = RegularlySampledCPImage(*img.shape)
    plain.set_interp_type(InterpType.BILINEAR)
    plain.build_from(img)
    masked = RegularlySampledCPImage(*img.shape)
    masked.set_interp_type(InterpType.BILINEAR)
    masked.build_from(img, np.ones_like(img))
    assert np.allclose(plain.bitmapf, masked.bitmapf)


def test_mask_shape_mismatch():
    grid = RegularlySampledCPImage(2, 2)
    with pytest.raises(ValueError):
        grid.build_from(np.zeros((4, 4)), np.ones((3, 3)))


def test_empty_grid_raises():
    grid = RegularlySampledCPImage()
    with pytest.raises(ValueError):
        grid.build_from(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        grid.to_image(np.zeros((2, 2)))


def test_to_image_round_trip():
    img = _image()
    grid = RegularlySampledCPImage(*img.shape)
    grid.build_from(img)
    out = grid.to_image(np.zeros_like(img))
    assert np.array_equal(out, grid.bitmap.reshape(img.shape))
    assert np.array_equal(out[:-1, :-1], img[:-1, :-1])


def test_sample_index_errors():
    grid = RegularlySampledCPImage(2, 2)
    with pytest.raises(IndexError):
        grid.get_raw_sample(4)
    with pytest.raises(IndexError):
        grid.get_sample(-1)
    with pytest.raises(ValueError):
        grid.get_sample(0)


def test_change_sample_frame_translation():
    grid = RegularlySampledCPImage(2, 3)
    matrix = np.eye(4)
    matrix[0, 3] = 10.0
    matrix[1, 3] = -2.0
    point, rho = grid.change_sample_frame(4, matrix)
    assert (point.x, point.y) == (11.0, -1.0)
    assert rho == 1.0


def test_copy_is_independent():
    img = _image()
    grid = RegularlySampledCPImage(*img.shape)
    grid.build_from(img)
    clone = grid.copy()
    clone.bitmap[0] = 99
    clone.samples[0].x = 7.0
    assert grid.bitmap[0] == img[0, 0]
    assert grid.samples[0].x == 0.0
    assert (clone.height, clone.width) == (grid.height, grid.width)


def test_abs_zn_after_build_sums_to_one():
    img = _image().astype(np.float64)
    grid = RegularlySampledCPImage(*img.shape)
    grid.build_from(img)
    normalized = grid.to_abs_zn()
    assert float(normalized.sum()) == pytest.approx(1.0, rel=1e-5)
    assert (normalized >= 0).all()