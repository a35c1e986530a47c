"""
Transform Inspector — Properties

The editable fields of the panel are FloatVectorProperty proxies on
WindowManager: session-only, never saved with the .blend file.  Their getters
show the active target's value; their setters stage only the components the
user changed and commit them to every selected target in one transaction.
"""

import logging
import math

import bpy
from bpy.props import FloatVectorProperty
from bpy.types import WindowManager

from .session import get_session

log = logging.getLogger(__name__)


_EDIT_TOLERANCE = 1e-7


def _edited_components(new_value, shown_value) -> tuple:
    return tuple(
        not math.isclose(new, old, abs_tol=_EDIT_TOLERANCE)
        for new, old in zip(new_value, shown_value)
    )


def _commit(session, label: str) -> None:
    session.serialized.apply_modified_properties(session.recorder, label, push=True)


def _get_location(self):
    session = get_session()
    if not session.ready:
        return (0.0, 0.0, 0.0)
    return tuple(session.position.display_value())


def _set_location(self, value):
    session = get_session()
    if not session.ready:
        log.debug("Location edit ignored, inspector not active")
        return
    mask = _edited_components(value, session.position.display_value())
    if any(mask):
        session.position.stage(value, mask)
        _commit(session, "Inspector Position")


def _get_rotation(self):
    session = get_session()
    if not session.ready:
        return (0.0, 0.0, 0.0)
    return tuple(session.rotation_field.display_value())


def _set_rotation(self, value):
    session = get_session()
    if not session.ready:
        log.debug("Rotation edit ignored, inspector not active")
        return
    mask = _edited_components(value, session.rotation_field.display_value())
    if any(mask):
        session.rotation_field.set_value(value, mask)
        _commit(session, "Inspector Rotation")


def _get_scale(self):
    session = get_session()
    if not session.ready:
        return (1.0, 1.0, 1.0)
    return tuple(session.scale.display_value())


def _set_scale(self, value):
    session = get_session()
    if not session.ready:
        log.debug("Scale edit ignored, inspector not active")
        return
    mask = _edited_components(value, session.scale.display_value())
    if any(mask):
        session.scale.stage(value, mask)
        _commit(session, "Inspector Scale")


def register():
    WindowManager.tinsp_location = FloatVectorProperty(
        name="Position",
        description="Local position of the selected items",
        size=3,
        subtype='TRANSLATION',
        unit='LENGTH',
        get=_get_location,
        set=_set_location,
    )
    WindowManager.tinsp_rotation = FloatVectorProperty(
        name="Rotation",
        description="Local rotation of the selected items, as Euler angles",
        size=3,
        subtype='EULER',
        unit='ROTATION',
        get=_get_rotation,
        set=_set_rotation,
    )
    WindowManager.tinsp_scale = FloatVectorProperty(
        name="Scale",
        description="Local scale of the selected items",
        size=3,
        subtype='XYZ',
        get=_get_scale,
        set=_set_scale,
    )


def unregister():
    del WindowManager.tinsp_location
    del WindowManager.tinsp_rotation
    del WindowManager.tinsp_scale
