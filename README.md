# perspecto

Geometry building blocks for camera-based perception: homogeneous 2D and 3D
points, rigid 3D poses, the intrinsic parameters shared by camera models, a
regular grid of samples over an image and a Gauss-Newton estimator that finds
the pose bringing one feature set onto a reference one.

## Installation

```
pip install .
```

The package depends on `numpy` only.

## Modules

### `perspecto.geometry`

- `PoseMatrix(data=None)`: a 4x4 homogeneous rigid transformation, identity by
  default. `inverse()` returns `[R^T  -R^T T]`, `t()` the transpose, and `@`
  composes two pose matrices or applies the matrix to an array. `rotation`,
  `translation` and `data` expose its parts.
- `PoseVector(values=None)`: a pose as `(tX, tY, tZ, θuX, θuY, θuZ)`, zero by
  default, with `translation` and `theta_u`.
- `exponential_map(velocity)`: integrates a 6-vector twist `(v, ω)` over unit
  time into a `PoseMatrix`.
- `pose_matrix_from_vector(vector)` and `pose_vector_from_matrix(matrix)`:
  conversions between the two pose forms.

### `perspecto.points`

`Cartesian2DPoint(x, y, w)` and `Cartesian3DPoint(X, Y, Z, W)` are points
(last coordinate 1) or vectors (last coordinate 0) in homogeneous coordinates,
with `set_point`, `set_vector`, `to_euclidean` (raises `ValueError` on a vector)
and `change_frame(matrix)`, which returns a new point after a 4x4 frame change.
A 2D point is moved as a point of the `z = 0` plane. Subtracting two 2D points
gives a 2-element array.

### `perspecto.features`

`PointFeature` holds one point in the world frame (`world`), the sensor frame
(`sensor`), an intermediate projection (`intermediate`), the normalized image
plane (`metric`) and the digital image plane (`pixel`).
`set_world_coordinates` accepts a 3D point or 3 or 4 values and makes the point
Euclidean; `change_frame(matrix)` computes `sensor` from `world`;
`set_image_metric`, `set_pix_uv` and `set_object_pix_uv` set the image
coordinates; `to_double(place)` returns the homogeneous coordinates at a
`Place` (`WORLD`, `SENSOR`, `INTERMEDIATE`, `METRIC`, `PIXEL`).

### `perspecto.acquisition`

`InterpType` (`NEAREST_NEIGHBOR`, `BILINEAR`) and `AcquisitionModel`, the base
of sampled images: sample positions in `samples`, raw values in `bitmap` and
float values in `bitmapf`. `set_interp_type(InterpType.BILINEAR)` allocates
`bitmapf`. `to_abs_zn()` makes the intensities zero-mean, absolute, divided by
their mean and then by their sum, so that they add up to one; it raises
`ValueError` when there is no sample.

### `perspecto.camera`

`CameraModelType` lists the projection models and `CameraModel` is the
abstract base of camera models: `au`, `av`, `u0`, `v0`, eight distortion
parameters `k`, eight undistortion parameters `ik` and the `active_k` flags.
It offers `meter_pixel_conversion` and `pixel_meter_conversion` on a
`PointFeature`, `k_matrix()` (the 3x3 intrinsic matrix), `init_from(other)`,
the setters `set_pixel_ratio`, `set_principal_point`,
`set_distortion_parameters`, `set_undistortion_parameters` and
`set_active_distortion_parameters`, and `nb_active_distortion_parameters()`.
`inv_au` and `inv_av` raise `ValueError` on a zero scale factor. Subclasses
supply `project_3d_image(point)` and `project_image_sphere(point)`.

### `perspecto.polycart`

`polycart_image_to_sphere(u, v, intrinsics)` lifts digital image coordinates to
the 3D ray of the polynomial Cartesian model, with
`intrinsics = [au, u0, v0, a0, a1, a2, a3, a4]`, and returns `(Xs, Ys, Zs)`.

### `perspecto.planar_image`

`RegularlySampledCPImage(height, width)` is an `AcquisitionModel` whose sample
`i * width + j` lies at the planar point `(j, i)`.

- `build_from(image, mask=None)` samples a 2D array, by nearest neighbour or
  bilinear interpolation according to the interpolation type; samples outside
  the image interior are zero and pixels where the mask is zero are ignored.
- `to_image(image)` writes the raw samples into an array in place and returns it.
- `get_raw_sample(index)` and `get_sample(index)` return the sample position and
  its raw or interpolated value (`IndexError` out of range, `ValueError` when no
  interpolated values are set).
- `change_sample_frame(index, matrix)` returns the moved position and a depth of 1.
- `copy()` returns an independent copy.

### `perspecto.pose_estimation`

`PoseSphericalEstimator(comparator_factory, residual_threshold=1e-9)` estimates
a pose over the degrees of freedom chosen with `set_dof(tx, ty, tz, rx, ry, rz)`.
The reference feature set is given with `build_from(feature_set)`.

Feature sets and comparisons are supplied by the caller:

- a feature set has `update(matrix, compute_jacobian)` and
  `compute_feature_pose_jacobian(nb_dof, dof)`, which returns the interaction
  matrix (features × active degrees of freedom);
- `comparator_factory(current, desired, robust)` returns an object with
  `error`, `cost`, `robust_cost` and `robust_weights`.

`track(desired, pose=None, gain=1.0, robust=False)` iterates (at most 10 times,
stopping when the residual stops changing by more than the threshold) and
returns a `TrackResult` with the final `residual`, the `pose` of the last
iteration that reduced the residual and the number of `iterations`.
`start_save_iterations(file_name)` appends the iteration count of each track to
a file until `stop_save_iterations()`.

For step-by-step control, `init_control(gain=1.0, current=True)` prepares the
law and each `control(current_set, robust=False)` returns the residual and the
velocity over the active degrees of freedom; it raises `RuntimeError` before
`init_control`. Progress is reported through the `logging` module at debug
level.

## Example

```python
import numpy as np

from perspecto.geometry import PoseVector, pose_matrix_from_vector
from perspecto.points import Cartesian3DPoint

pose = pose_matrix_from_vector(PoseVector([0.1, 0.0, 0.0, 0.0, 0.0, np.pi / 2]))
point = Cartesian3DPoint()
point.set_point(1.0, 0.0, 2.0)
moved = point.change_frame(pose)
```

Sampling an image on a planar grid:

```python
import numpy as np

from perspecto.acquisition import InterpType
from perspecto.planar_image import RegularlySampledCPImage

image = np.arange(16, dtype=float).reshape(4, 4)
grid = RegularlySampledCPImage(height=2, width=2)
grid.set_interp_type(InterpType.BILINEAR)
grid.build_from(image)
position, value = grid.get_sample(0)
```

## What the package does not do

- It has no concrete projection model: `CameraModel` is abstract, and only the
  polynomial Cartesian back-projection is available, as a function.
- It has no spherical image sampling and no concrete feature sets or feature
  comparators; the pose estimator works with those the caller provides.
- It reads and writes no image files and has no command-line tool; images are
  NumPy arrays.

## Running the tests

```
pip install .[test]
pytest
```