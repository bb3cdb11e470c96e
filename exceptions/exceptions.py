class GeometryError(Exception):
    code = "geometry_error"

    def __init__(self, message: str, context: str = "", code: str = ""):
        super().__init__(message)
        if code:
            self.code = code
        self.context = context


class InvalidArgumentError(GeometryError, ValueError):
    """Non-positive size parameter or a required collection that is missing."""
    code = "invalid_argument"


class DegenerateGeometryError(GeometryError, ValueError):
    """Triangle edges or normal too small to define a plane."""
    code = "degenerate_geometry"


class NotFoundError(GeometryError, LookupError):
    code = "not_found"
