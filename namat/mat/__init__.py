"""This module contains the immutable, missing-aware `Mat` container, its
per-kind representations and the `matrix()` factory.  `mat_impl` holds the
kind-agnostic algorithms and `mat_math` the transpose and product kernels."""

from .mat_handler import Mat, matrix
from .mat_kinds import MatAny, MatBool, MatDouble, MatInt, MatLong
