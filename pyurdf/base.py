from pathlib import Path
from typing import Any, Dict, Iterable, Union
import logging
import lxml.etree as ET

from .errors import MalformedError, MissingRootError
from .urdf_types import *

logger = logging.getLogger(__name__)


class UrdfElement:
    """The base class for all URDF elements.

    Fields are declared on subclasses with the bindings from
    :mod:`pyurdf.urdf_types`. Each binding knows how to read its value from an
    lxml element and how to write it back, which gives every element kind its
    own parser/generator pair without any per-class boilerplate.

    """

    known_attributes: Dict[str, Attribute] = None
    known_children: Dict[str, Any] = None
    tag: str = None

    def __init__(self, **kwargs) -> None:
        self.attributes: Dict[str, str] = dict()
        self.children: Dict[str, Any] = dict()

        for key in kwargs:
            if key not in self._bindings():
                raise TypeError(
                    f"`{self.__class__.__name__}` has no field named `{key}`."
                )

        for name, binding in self._bindings().items():
            value = kwargs[name] if name in kwargs else binding.make_default()
            setattr(self, name, value)

    @classmethod
    def _bindings(cls) -> Dict[str, Any]:
        return {**(cls.known_attributes or dict()), **(cls.known_children or dict())}

    @classmethod
    def from_etree(cls, element: ET.Element) -> "UrdfElement":
        kwargs = {
            name: binding.decode(element) for name, binding in cls._bindings().items()
        }
        return cls(**kwargs)

    def to_etree(self) -> ET.Element:
        out = ET.Element(self.tag)

        # attributes first so that their order is the declaration order
        for binding in self._bindings().values():
            binding.encode(self, out)

        return out

    @classmethod
    def from_xml(
        cls, xml_string: Union[str, bytes], *, remove_blank_text=True
    ) -> "UrdfElement":
        """Decode XML."""

        parser = ET.XMLParser(
            remove_blank_text=remove_blank_text,
            remove_comments=True,
            remove_pis=True,
            resolve_entities=False,
        )

        # lxml refuses str input that carries an encoding declaration
        if isinstance(xml_string, str):
            xml_string = xml_string.encode("utf-8")

        try:
            root = ET.fromstring(xml_string, parser)
        except (ET.XMLSyntaxError, ValueError) as e:
            raise MalformedError(f"Invalid XML. {e}") from None

        return cls.from_etree(root)

    def to_xml(
        self,
        *,
        encoding="utf-8",
        pretty_print: bool = False,
        xml_declaration: bool = False,
    ) -> str:
        """Encode as XML."""

        return ET.tostring(
            self.to_etree(),
            encoding=encoding,
            pretty_print=pretty_print,
            xml_declaration=xml_declaration,
        ).decode(encoding=encoding)

    def __eq__(self, other):
        if not isinstance(other, UrdfElement):
            return NotImplemented

        return (
            type(self) is type(other)
            and self.tag == other.tag
            and self.attributes == other.attributes
            and self.children == other.children
        )

    def __repr__(self) -> str:
        fields = {**self.attributes, **self.children}
        args = ", ".join(f"{key}={value!r}" for key, value in fields.items())
        return f"{self.__class__.__name__}({args})"


class Origin(UrdfElement):
    tag = "origin"

    xyz = Attribute(Vector3, "0", default="0 0 0")
    rpy = Attribute(Vector3, "0", default="0 0 0")


class Box(UrdfElement):
    tag = "box"

    size = Attribute(Vector3, "1")


class Cylinder(UrdfElement):
    tag = "cylinder"

    radius = Attribute(float, "1")
    length = Attribute(float, "1")


class Sphere(UrdfElement):
    tag = "sphere"

    radius = Attribute(float, "1")


class UnknownGeometry(UrdfElement):
    """A unknown/unsupported shape

    This is what ``<geometry>`` decodes to when it holds none of the modeled
    shapes, e.g. a mesh. The tag and the raw attributes of the first child are
    kept so that the shape is written back unchanged. An empty
    ``<geometry>`` (or none at all) gives an instance without a tag, which is
    not written back.

    """

    def __init__(self, tag: str = None, **kwargs) -> None:
        super().__init__()
        self.tag = tag
        self.attributes.update(kwargs)

    def __getattr__(self, name):
        attributes = self.__dict__.get("attributes", dict())
        if name in attributes:
            return attributes[name]

        raise AttributeError(f"This element has no attribute named `{name}`.")

    @classmethod
    def from_etree(cls, element: ET.Element) -> "UnknownGeometry":
        instance = cls(element.tag)
        instance.attributes.update(element.attrib)
        return instance

    def to_etree(self) -> ET.Element:
        return ET.Element(self.tag, self.attributes)


class Material(UrdfElement):
    tag = "material"

    name = Attribute(str, "1")

    color = AttributeElement(Color, "0", "1 1 1 1", attribute="rgba")


class Visual(UrdfElement):
    tag = "visual"

    origin = ChildElement(Origin, "0")
    geometry = VariantElement(
        Box, Cylinder, Sphere, required="1", tag="geometry", fallback=UnknownGeometry
    )
    material = ChildElement(Material, "0")


class Link(UrdfElement):
    tag = "link"

    name = Attribute(str, "1")

    visual = ChildElement(Visual, "0")


class Joint(UrdfElement):
    tag = "joint"

    class Limit(UrdfElement):
        tag = "limit"

        lower = Attribute(float, "0")
        upper = Attribute(float, "0")
        effort = Attribute(float, "0")
        velocity = Attribute(float, "0")

    name = Attribute(str, "1")
    type = Attribute(str, "1")

    parent = AttributeElement(str, "1", "", attribute="link")
    child = AttributeElement(str, "1", "", attribute="link")
    # a joint without <origin> sits at its parent's frame
    origin = ChildElement(Origin, "0", default=Origin)
    axis = AttributeElement(Vector3, "0", "1 0 0", attribute="xyz")
    limit = ChildElement(Limit, "0")


class Robot(UrdfElement):
    """URDF Root Element

    Parameters
    ----------
    name : str
        The name of the robot.
    links : List[Link]
        The links in document order.
    joints : List[Joint]
        The joints in document order.

    """

    tag = "robot"

    name = Attribute(str, "1")

    links = ChildElement(Link, "*")
    joints = ChildElement(Joint, "*")

    @classmethod
    def default(cls) -> "Robot":
        """The document a new editing session starts from."""

        return cls(
            name="my_robot",
            links=[
                Link(
                    name="base_link",
                    visual=Visual(
                        geometry=Box(size="1 0.5 0.2"),
                        material=Material(name="silver", color="0.75 0.75 0.75 1"),
                        origin=Origin(),
                    ),
                )
            ],
        )

    @classmethod
    def from_etree(cls, element: ET.Element) -> "Robot":
        if element.tag != cls.tag or not element.get("name"):
            raise MissingRootError(
                f'Expected a <robot name="..."> root element, found <{element.tag}>.'
            )

        return super().from_etree(element)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Robot":
        logger.debug("Reading robot description from %s.", path)
        return cls.from_xml(Path(path).read_bytes())

    def to_file(self, path: Union[str, Path], *, pretty_print: bool = True) -> None:
        ET.ElementTree(self.to_etree()).write(
            str(path), encoding="utf-8", xml_declaration=True, pretty_print=pretty_print
        )

    @property
    def filename(self) -> str:
        return f"{self.name}.urdf"

    def add(self, other: Union[UrdfElement, Iterable], *args) -> None:
        if isinstance(other, UrdfElement):
            other = [other, *args]

        for item in other:
            if isinstance(item, Link):
                self.links.append(item)
            elif isinstance(item, Joint):
                self.joints.append(item)
            else:
                raise TypeError(
                    f"A robot holds links and joints, not `{type(item).__name__}`."
                )
