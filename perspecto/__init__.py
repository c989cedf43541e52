"""Homogeneous points, rigid poses, camera intrinsics, planar sampled images and pose estimation."""

__version__ = "0.1.0"