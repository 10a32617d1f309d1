"""Frame transform interface and the rotation helpers built on it.

Quaternions are ``[w, x, y, z]`` numpy arrays throughout.
"""

from abc import ABC, abstractmethod

import numpy as np
import numpy.typing as npt
from ahrs.common.orientation import q_conj, q_prod

from .sample import COVARIANCE_UNKNOWN, Stamp


class TransformUnavailable(Exception):
    """No transform is known between two frames at the requested time."""

    def __init__(self, target_frame: str, source_frame: str, reason: str = '') -> None:
        self.target_frame = target_frame
        self.source_frame = source_frame
        self.reason = reason
        message = f"no transform from '{source_frame}' to '{target_frame}'"
        if reason:
            message = f'{message}: {reason}'
        super().__init__(message)


def normalize_quaternion(q: npt.ArrayLike) -> npt.NDArray[np.float64]:
    q = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(q)
    if norm == 0.0:
        raise ValueError('Cannot normalize a zero quaternion')
    return q / norm


def rotate_quaternion(
    rotation: npt.ArrayLike, orientation: npt.ArrayLike
) -> npt.NDArray[np.float64]:
    """Compose ``rotation * orientation`` (rotation applied on the left).

    An all-zero orientation (no orientation estimate) passes through as zeros.
    """
    product = np.asarray(q_prod(np.asarray(rotation), np.asarray(orientation)), dtype=np.float64)
    if not product.any():
        return product
    return normalize_quaternion(product)


def rotate_vector(rotation: npt.ArrayLike, vector: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Rotate a 3D vector by a unit quaternion, ignoring any translation."""
    q = normalize_quaternion(rotation)
    v = np.concatenate(([0.0], np.asarray(vector, dtype=np.float64)))
    return np.asarray(q_prod(q_prod(q, v), q_conj(q)))[1:]


def rotation_matrix(rotation: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """3x3 rotation matrix whose columns are the rotated unit axes."""
    return np.column_stack([rotate_vector(rotation, axis) for axis in np.eye(3)])


def rotate_covariance(
    rotation: npt.ArrayLike, covariance: npt.ArrayLike
) -> npt.NDArray[np.float64]:
    """Re-express a 3x3 covariance in the rotated frame (R C R^T).

    A covariance flagged as unknown is returned unchanged.
    """
    covariance = np.asarray(covariance, dtype=np.float64)
    if covariance[0, 0] == COVARIANCE_UNKNOWN:
        return covariance.copy()
    R = rotation_matrix(rotation)
    return R @ covariance @ R.T


class FrameTransformResolver(ABC):
    """Re-expresses quaternions and vectors in another named frame.

    Subclasses provide :meth:`lookup_rotation`; it must raise
    :class:`TransformUnavailable` when no transform is known.
    """

    @abstractmethod
    def lookup_rotation(
        self, target_frame: str, source_frame: str, stamp: Stamp
    ) -> npt.NDArray[np.float64]:
        """Return the rotation taking ``source_frame`` quantities to ``target_frame``."""

    def transform_quaternion(
        self,
        target_frame: str,
        source_frame: str,
        stamp: Stamp,
        orientation: npt.ArrayLike,
    ) -> npt.NDArray[np.float64]:
        rotation = self.lookup_rotation(target_frame, source_frame, stamp)
        return rotate_quaternion(rotation, orientation)

    def transform_vector(
        self,
        target_frame: str,
        source_frame: str,
        stamp: Stamp,
        vector: npt.ArrayLike,
    ) -> npt.NDArray[np.float64]:
        rotation = self.lookup_rotation(target_frame, source_frame, stamp)
        return rotate_vector(rotation, vector)
