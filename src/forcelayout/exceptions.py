# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Exceptions that may be raised by the layout engine."""

__all__ = [
    "DegenerateVectorError",
    "InvalidParameterError",
    "LayoutError",
    "UnknownNodeError",
]


class LayoutError(Exception):
    """Base class for all layout related errors."""


class UnknownNodeError(LayoutError, KeyError):
    """A node id was referenced that is not part of the graph."""


class DegenerateVectorError(LayoutError, ZeroDivisionError):
    """Attempted to normalize a vector with zero length."""


class InvalidParameterError(LayoutError, ValueError):
    """A tuning parameter is out of its valid range."""
