from .exceptions import (
    GeometryError,
    InvalidArgumentError,
    DegenerateGeometryError,
    NotFoundError,
)

__all__ = [
    "GeometryError",
    "InvalidArgumentError",
    "DegenerateGeometryError",
    "NotFoundError",
]
