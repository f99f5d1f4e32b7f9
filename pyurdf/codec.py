"""Text-level entry points of the URDF codec.

Both functions are pure: ``parse`` always builds a fresh :class:`Robot`, and
``generate`` only reads the robot it is given. They can be called from several
threads at once on distinct inputs.

"""

from typing import Union
import logging

from .base import Robot

logger = logging.getLogger(__name__)


def parse(text: Union[str, bytes]) -> Robot:
    """Turn URDF text into a robot model.

    Parameters
    ----------
    text : str or bytes
        The URDF document.

    Returns
    -------
    robot : Robot
        A new robot model. Optional elements that are missing from the
        document are either left empty or filled with their documented
        default.

    Raises
    ------
    MalformedError
        If ``text`` is not well-formed XML.
    MissingRootError
        If the document has no ``<robot name="...">`` root element.

    """

    robot = Robot.from_xml(text)
    logger.debug(
        "Parsed robot `%s` with %d links and %d joints.",
        robot.name,
        len(robot.links),
        len(robot.joints),
    )
    return robot


def generate(
    robot: Robot, *, pretty_print: bool = True, xml_declaration: bool = False
) -> str:
    """Turn a robot model into URDF text.

    The output only depends on the model, so generating twice from an
    unmodified robot yields identical text.

    Parameters
    ----------
    robot : Robot
        The model to encode.
    pretty_print : bool
        If True, put every element on its own line, indented by two spaces.
    xml_declaration : bool
        If True, start the document with an ``<?xml ...?>`` declaration.

    """

    text = robot.to_xml(pretty_print=pretty_print, xml_declaration=xml_declaration)
    logger.debug("Generated %d characters for robot `%s`.", len(text), robot.name)
    return text
