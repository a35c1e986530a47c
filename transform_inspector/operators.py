"""
Transform Inspector — Operators

Reset buttons
-------------
P and S stage a literal vector on the bound property and commit it to every
target.  R cannot do that: rotation is stored per rotation mode, so it goes
through the resolved `set_local_euler_angles` routine instead.

Inverse buttons
---------------
XInv / YInv / ZInv compose each target's own local rotation with a fixed
180° delta; targets keep their individual orientation, they are not set to a
shared absolute value.

Every batch is a single transaction: one click, one undo step for all targets.
"""

import logging
from math import radians

import bpy
from bpy.props import EnumProperty
from bpy.types import Operator
from mathutils import Vector

from .errors import ConfigurationError
from .session import collect_targets, get_session

log = logging.getLogger(__name__)


UNDO_LABEL = "Inspector"

RESET_POSITION = (0.0, 0.0, 0.0)
RESET_SCALE = (1.0, 1.0, 1.0)
RESET_ROTATION_PARAMETERS = ((0.0, 0.0, 0.0), 0)

INVERSE_ROTATION_X = (radians(180.0), 0.0, 0.0)
INVERSE_ROTATION_Y = (0.0, radians(180.0), 0.0)

INVERSE_ROTATION = {
    'X': INVERSE_ROTATION_X,
    'Y': INVERSE_ROTATION_Y,
    # ZInv has always applied the Y delta; switching it to (0, 0, 180) changes
    # existing behaviour and is waiting on product sign-off.
    'Z': INVERSE_ROTATION_Y,
}


# ── Actions ───────────────────────────────────────────────────────────────────

def reset_position(session) -> int:
    session.position.stage(Vector(RESET_POSITION))
    session.serialized.apply_modified_properties(session.recorder, UNDO_LABEL)
    return len(session.targets)


def reset_scale(session) -> int:
    session.scale.stage(Vector(RESET_SCALE))
    session.serialized.apply_modified_properties(session.recorder, UNDO_LABEL)
    return len(session.targets)


def reset_rotation(session) -> int:
    targets = session.targets
    operation = session.operations.set_local_euler_angles
    with session.recorder.transaction(UNDO_LABEL, targets):
        for target in targets:
            operation.invoke(target, *RESET_ROTATION_PARAMETERS)
    session.rotation_field.forget(targets)
    session.serialized.update()
    return len(targets)


def inverse_rotation(session, axis: str) -> int:
    delta = INVERSE_ROTATION[axis]
    targets = session.targets
    operation = session.operations.rotate
    with session.recorder.transaction(UNDO_LABEL, targets):
        for target in targets:
            operation.invoke(target, delta)
    session.serialized.update()
    return len(targets)


# ── Operators ─────────────────────────────────────────────────────────────────

class _InspectorAction:
    bl_options = {'REGISTER', 'UNDO'}

    @classmethod
    def poll(cls, context: bpy.types.Context) -> bool:
        return bool(collect_targets(context))

    def execute(self, context: bpy.types.Context):
        session = get_session()
        try:
            session.ensure_active(collect_targets(context))
        except ConfigurationError as exc:
            self.report({'ERROR'}, str(exc))
            return {'CANCELLED'}

        count = self.apply(session)
        log.info("%s on %d target(s)", self.bl_label, count)
        self.report({'INFO'}, f"{self.bl_label}: {count} item(s)")
        return {'FINISHED'}

    def apply(self, session) -> int:
        raise NotImplementedError


class TINSP_OT_reset_position(_InspectorAction, Operator):
    bl_idname = "tinsp.reset_position"
    bl_label = "Reset Position"
    bl_description = "Set the location of every selected item to (0, 0, 0)"

    def apply(self, session) -> int:
        return reset_position(session)


class TINSP_OT_reset_rotation(_InspectorAction, Operator):
    bl_idname = "tinsp.reset_rotation"
    bl_label = "Reset Rotation"
    bl_description = "Clear the rotation of every selected item, whatever its rotation mode"

    def apply(self, session) -> int:
        return reset_rotation(session)


class TINSP_OT_reset_scale(_InspectorAction, Operator):
    bl_idname = "tinsp.reset_scale"
    bl_label = "Reset Scale"
    bl_description = "Set the scale of every selected item to (1, 1, 1)"

    def apply(self, session) -> int:
        return reset_scale(session)


class TINSP_OT_inverse_rotation(_InspectorAction, Operator):
    bl_idname = "tinsp.inverse_rotation"
    bl_label = "Inverse Rotation"
    bl_description = "Rotate every selected item by 180° around one of its local axes"

    axis: EnumProperty(
        name="Axis",
        items=[
            ('X', "X", "Rotate 180° around X"),
            ('Y', "Y", "Rotate 180° around Y"),
            ('Z', "Z", "ZInv button (applies the same 180° delta as Y)"),
        ],
        default='X',
    )

    def apply(self, session) -> int:
        return inverse_rotation(session, self.axis)


classes = (
    TINSP_OT_reset_position,
    TINSP_OT_reset_rotation,
    TINSP_OT_reset_scale,
    TINSP_OT_inverse_rotation,
)


def register():
    for cls in classes:
        bpy.utils.register_class(cls)


def unregister():
    for cls in reversed(classes):
        bpy.utils.unregister_class(cls)
