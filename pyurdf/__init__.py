from .base import (
    UrdfElement,
    Robot,
    Link,
    Visual,
    Origin,
    Material,
    Box,
    Cylinder,
    Sphere,
    UnknownGeometry,
    Joint,
)
from .codec import parse, generate
from .errors import ParseError, MalformedError, MissingRootError

__version__ = "0.1.0"
