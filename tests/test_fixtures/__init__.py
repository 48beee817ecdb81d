"""Test fixtures and utilities for NML testing.

- assertions: Custom numeric assertions (assert_vector_close, assert_matrix_close, assert_all_finite)
"""

from .assertions import assert_vector_close, assert_matrix_close, assert_all_finite

__all__ = [
    'assert_vector_close',
    'assert_matrix_close',
    'assert_all_finite',
]
