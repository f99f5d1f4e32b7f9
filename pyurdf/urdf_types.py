from typing import Type, Union
import logging
import lxml.etree as ET
import numpy as np

logger = logging.getLogger(__name__)


class Vector:
    """Whitespace separated numeric tokens of a fixed length."""

    def __init__(self, size: int, description: str) -> None:
        self.size = size
        self.description = description

    def __call__(self, value) -> str:
        if isinstance(value, np.ndarray):
            value = value.tolist()

        if isinstance(value, (tuple, list)) and len(value) == self.size:
            return " ".join(map(str, value))
        else:
            raise ValueError(f"Could not interpret input as {self.description}.")


Vector3 = Vector(3, "3-element vector")
Color = Vector(4, "color")


def _to_text(clazz: Union[Type, Vector], value) -> str:
    # numeric values are kept as the exact text the user gave us
    if isinstance(value, str):
        return value
    elif clazz is str:
        raise ValueError("Could not interpret input as str.")
    elif clazz is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise ValueError("Could not interpret input as float.")

    return clazz(value)


def _register(owner, registry: str, name: str, binding) -> None:
    # copy on first write so subclasses never extend their parent's registry
    if registry not in owner.__dict__:
        setattr(owner, registry, dict(getattr(owner, registry) or dict()))

    getattr(owner, registry)[name] = binding


class Attribute:
    """An XML attribute of the element itself, stored as raw text."""

    def __init__(
        self, type: Union[Type, Vector], required: str, *, default: str = None
    ) -> None:
        self.required = required
        self.clazz = type
        self.default = default

    def __set_name__(self, owner, name):
        self.name = name
        _register(owner, "known_attributes", name, self)

    def __get__(self, instance, owner):
        if instance is None:
            return self

        return instance.attributes.get(self.name)

    def __set__(self, instance, value):
        if value is None:
            instance.attributes.pop(self.name, None)
        else:
            instance.attributes[self.name] = _to_text(self.clazz, value)

    def make_default(self):
        return self.default

    def decode(self, element: ET.Element):
        value = element.get(self.name)
        return self.default if not value else value

    def encode(self, instance, out: ET.Element) -> None:
        value = instance.attributes.get(self.name)
        if value:
            out.set(self.name, value)


class AttributeElement:
    """A child element that only carries a single attribute.

    URDF uses this shape for things like ``<parent link="..."/>`` or
    ``<color rgba="..."/>``. On the python side the child element is
    flattened into the attribute's text, e.g. ``joint.parent == "base"``.

    Parameters
    ----------
    type : type or Vector
        How non-string input is converted to text on assignment.
    required : str
        "1" if the child element is always written (possibly bare), "0" if
        it is only written when it has a value.
    default : str
        The value used when the child element (or its attribute) is absent.
    attribute : str
        The name of the attribute on the child element.
    tag : str
        The tag of the child element. Defaults to the field name.

    """

    def __init__(
        self,
        type: Union[Type, Vector],
        required: str,
        default: str = None,
        *,
        attribute: str,
        tag: str = None,
    ) -> None:
        self.clazz = type
        self.required = required
        self.default = default
        self.attribute = attribute
        self.tag = tag

    def __set_name__(self, owner, name):
        self.name = name
        self.tag = self.tag or name
        _register(owner, "known_children", name, self)

    def __get__(self, instance, owner):
        if instance is None:
            return self

        return instance.children.get(self.name)

    def __set__(self, instance, value):
        if value is None:
            instance.children.pop(self.name, None)
        else:
            instance.children[self.name] = _to_text(self.clazz, value)

    def make_default(self):
        return self.default

    def decode(self, element: ET.Element):
        child = element.find(self.tag)
        value = child.get(self.attribute) if child is not None else None
        return self.default if not value else value

    def encode(self, instance, out: ET.Element) -> None:
        value = instance.children.get(self.name)
        if value or self.required == "1":
            child = ET.SubElement(out, self.tag)
            if value:
                child.set(self.attribute, value)


class ChildElement:
    """A nested element (``"0"``/``"1"``) or a sequence of them (``"*"``)."""

    def __init__(self, binding_class, required: str, *, default=None) -> None:
        self.clazz = binding_class
        self.required = required
        self.default = default

    def __set_name__(self, owner, name):
        self.name = name
        _register(owner, "known_children", name, self)

    def __get__(self, instance, owner):
        if instance is None:
            return self

        if self.required == "*":
            return instance.children.setdefault(self.name, list())
        else:
            return instance.children.get(self.name)

    def __set__(self, instance, value):
        if self.required == "*":
            value = list() if value is None else list(value)
            for item in value:
                self._check_type(item)
            instance.children[self.name] = value
        elif value is None:
            instance.children.pop(self.name, None)
        else:
            self._check_type(value)
            instance.children[self.name] = value

    def _check_type(self, value):
        if not isinstance(value, self.clazz):
            raise TypeError(
                f"`{self.name}` expects `{self.clazz.__name__}`,"
                f" got `{type(value).__name__}`."
            )

    def make_default(self):
        if self.required == "*":
            return list()
        elif callable(self.default):
            return self.default()
        else:
            return self.default

    def decode(self, element: ET.Element):
        # one code path for zero, one, or many occurrences
        if self.required == "*":
            return [
                self.clazz.from_etree(child)
                for child in element.iterchildren(self.clazz.tag)
            ]

        child = element.find(self.clazz.tag)
        if child is None:
            return self.make_default()

        return self.clazz.from_etree(child)

    def encode(self, instance, out: ET.Element) -> None:
        value = instance.children.get(self.name)
        if value is None:
            return

        if self.required != "*":
            value = [value]

        for child in value:
            out.append(child.to_etree())


class VariantElement:
    """A wrapper element holding exactly one of several element types.

    The wrapper (e.g. ``<geometry>``) does not exist on the python side; the
    field holds the variant directly. Unrecognized content decodes to
    ``fallback`` so that a single odd element never fails the whole document.

    """

    def __init__(self, *variants, required: str, tag: str, fallback) -> None:
        self.variants = {clazz.tag: clazz for clazz in variants}
        self.required = required
        self.tag = tag
        self.fallback = fallback

    def __set_name__(self, owner, name):
        self.name = name
        _register(owner, "known_children", name, self)

    def __get__(self, instance, owner):
        if instance is None:
            return self

        return instance.children.get(self.name)

    def __set__(self, instance, value):
        if value is None:
            value = self.fallback()
        elif not isinstance(value, (*self.variants.values(), self.fallback)):
            allowed = ", ".join(clazz.__name__ for clazz in self.variants.values())
            raise TypeError(
                f"`{self.name}` must be one of {allowed}, got `{type(value).__name__}`."
            )

        instance.children[self.name] = value

    def make_default(self):
        return self.fallback()

    def decode(self, element: ET.Element):
        wrapper = element.find(self.tag)
        if wrapper is None:
            return self.fallback()

        candidates = [child for child in wrapper if isinstance(child.tag, str)]
        known = [child for child in candidates if child.tag in self.variants]

        if len(known) > 1:
            logger.warning(
                "Found %d shapes inside <%s>; using <%s>.",
                len(known),
                self.tag,
                known[0].tag,
            )

        if known:
            return self.variants[known[0].tag].from_etree(known[0])
        elif candidates:
            logger.warning(
                "Unrecognized <%s> inside <%s>; keeping it as unknown.",
                candidates[0].tag,
                self.tag,
            )
            return self.fallback.from_etree(candidates[0])
        else:
            return self.fallback()

    def encode(self, instance, out: ET.Element) -> None:
        value = instance.children.get(self.name)
        if value is None or value.tag is None:
            return

        wrapper = ET.SubElement(out, self.tag)
        wrapper.append(value.to_etree())


__all__ = [
    "Attribute",
    "AttributeElement",
    "ChildElement",
    "VariantElement",
    "Vector3",
    "Color",
]
