import copy

import numpy as np
import pytest

from pyurdf import (
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


def test_element_to_xml():
    assert Origin().to_xml() == '<origin xyz="0 0 0" rpy="0 0 0"/>'
    assert Link(name="test").to_xml() == '<link name="test"/>'
    assert Box(size="2 1 1").to_xml() == '<box size="2 1 1"/>'

    element = Link(name="test")
    element.visual = Visual(geometry=Sphere(radius="0.5"))
    assert element.to_xml() == (
        '<link name="test"><visual><geometry><sphere radius="0.5"/>'
        "</geometry></visual></link>"
    )

    element.visual = None
    assert element.to_xml() == '<link name="test"/>'


def test_construction_defaults():
    origin = Origin(rpy="0 0 1")
    assert origin.xyz == "0 0 0"
    assert origin.rpy == "0 0 1"

    visual = Visual()
    assert visual.origin is None
    assert visual.material is None
    assert isinstance(visual.geometry, UnknownGeometry)
    assert visual.geometry.tag is None

    assert Material(name="red").color == "1 1 1 1"

    joint = Joint(name="j", type="fixed")
    assert joint.parent == ""
    assert joint.child == ""
    assert joint.origin == Origin()
    assert joint.axis == "1 0 0"
    assert joint.limit is None

    robot = Robot(name="r")
    assert robot.links == []
    assert robot.joints == []


def test_default_robot():
    robot = Robot.default()

    assert robot.name == "my_robot"
    assert len(robot.links) == 1
    assert robot.joints == []

    link = robot.links[0]
    assert link.name == "base_link"
    assert link.visual.geometry == Box(size="1 0.5 0.2")
    assert link.visual.material.name == "silver"
    assert link.visual.material.color == "0.75 0.75 0.75 1"
    assert link.visual.origin == Origin(xyz="0 0 0", rpy="0 0 0")

    # every call starts a fresh document
    assert Robot.default() is not robot
    robot.links[0].name = "renamed"
    assert Robot.default().links[0].name == "base_link"


def test_vector_assignment():
    origin = Origin()

    origin.xyz = (1, 0, 0)
    assert origin.xyz == "1 0 0"

    origin.rpy = np.array([0.0, 0.5, 1.5])
    assert origin.rpy == "0.0 0.5 1.5"

    origin.xyz = "0.10 1e-3 -0"
    assert origin.xyz == "0.10 1e-3 -0"

    with pytest.raises(ValueError):
        origin.xyz = (1, 2)

    with pytest.raises(ValueError):
        Material(name="m", color=[1, 0, 0])

    joint = Joint(name="j", type="revolute")
    joint.axis = [0, 0, 1]
    assert joint.axis == "0 0 1"


def test_scalar_assignment():
    cylinder = Cylinder(radius=0.5, length=2)
    assert cylinder.radius == "0.5"
    assert cylinder.length == "2"

    limit = Joint.Limit(lower="-1.57", upper=1.57)
    assert limit.lower == "-1.57"
    assert limit.upper == "1.57"
    assert limit.effort is None

    with pytest.raises(ValueError):
        Sphere(radius=True)

    with pytest.raises(ValueError):
        Link(name=5)


def test_unknown_field_rejected():
    with pytest.raises(TypeError):
        Link(name="test", collision="x")

    with pytest.raises(TypeError):
        Box(radius="1")


def test_geometry_variant_checked():
    visual = Visual(geometry=Cylinder(radius="1", length="2"))

    with pytest.raises(TypeError):
        visual.geometry = Origin()

    with pytest.raises(TypeError):
        Visual(geometry="box")

    visual.geometry = None
    assert visual.geometry == UnknownGeometry()


def test_sequence_fields_checked():
    robot = Robot(name="r")

    with pytest.raises(TypeError):
        robot.links = [Joint(name="j")]

    robot.links = (Link(name="a"), Link(name="b"))
    assert [link.name for link in robot.links] == ["a", "b"]


def test_add():
    robot = Robot(name="r")
    robot.add(Link(name="a"))
    robot.add(Link(name="b"), Joint(name="j1", type="fixed"))
    robot.add([Joint(name="j2", type="fixed"), Link(name="c")])

    assert [link.name for link in robot.links] == ["a", "b", "c"]
    assert [joint.name for joint in robot.joints] == ["j1", "j2"]

    with pytest.raises(TypeError):
        robot.add(Origin())


def test_equality():
    assert Origin() == Origin(xyz="0 0 0", rpy="0 0 0")
    assert Origin() != Origin(xyz="0 0 0.0")
    assert Sphere(radius="1") != Cylinder(radius="1")
    assert Box(size="1 1 1") != "1 1 1"

    a = Robot(name="r", links=[Link(name="a"), Link(name="b")])
    b = Robot(name="r", links=[Link(name="b"), Link(name="a")])
    assert a != b
    assert a == copy.deepcopy(a)

    assert UnknownGeometry("mesh") != UnknownGeometry("capsule")
    assert UnknownGeometry() == UnknownGeometry()


def test_unknown_geometry_attributes():
    shape = UnknownGeometry("mesh", filename="package://arm/base.stl")

    assert shape.tag == "mesh"
    assert shape.filename == "package://arm/base.stl"
    with pytest.raises(AttributeError):
        shape.scale

    assert shape.to_xml() == '<mesh filename="package://arm/base.stl"/>'


def test_filename():
    assert Robot(name="arm").filename == "arm.urdf"


def test_repr():
    assert repr(Origin()) == "Origin(xyz='0 0 0', rpy='0 0 0')"
