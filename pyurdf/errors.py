class ParseError(Exception):
    """A URDF document could not be turned into a robot model."""


class MalformedError(ParseError):
    """The input is not well-formed XML."""


class MissingRootError(ParseError):
    """The XML is well-formed but lacks a ``<robot name="...">`` root."""
