"""
Transform Inspector — Rotation routines

TransformHandle wraps a live Object or PoseBone and owns the rotation updates
that must go through the target's rotation mode.  Writing `rotation_euler`
directly on a target in QUATERNION or AXIS_ANGLE mode silently does nothing
visible, so every reset / rotate issued by the inspector goes through here.

PrivilegedOperation
-------------------
The inspector resolves the routines it needs once per activation with
`resolve_operation()`.  Resolution checks that the target type carries every
RNA property the routines touch and fails with ConfigurationError otherwise,
so a broken button is never drawn.
"""

import logging
from enum import Enum
from typing import NamedTuple

import bpy  # noqa: F401  (makes mathutils importable outside Blender)
from mathutils import Euler, Quaternion, Vector

from .errors import ConfigurationError

log = logging.getLogger(__name__)


# Index in this tuple is the Euler order flag accepted by set_local_euler_angles.
EULER_ORDERS = ('XYZ', 'XZY', 'YXZ', 'YZX', 'ZXY', 'ZYX')

# Deltas are applied around Z, then X, then Y.
DELTA_ORDER = 'ZXY'

ROTATION_MEMBERS = (
    'rotation_mode',
    'rotation_euler',
    'rotation_quaternion',
    'rotation_axis_angle',
)


class Access(Enum):
    PUBLIC = "public"
    NON_PUBLIC = "non-public"


# ── Live transform wrapper ────────────────────────────────────────────────────

class TransformHandle:
    """Rotation access for one Object or PoseBone, honouring its rotation mode."""

    __slots__ = ("target",)

    def __init__(self, target) -> None:
        self.target = target

    def local_quaternion(self) -> Quaternion:
        target = self.target
        mode = target.rotation_mode
        if mode == 'QUATERNION':
            return target.rotation_quaternion.normalized()
        if mode == 'AXIS_ANGLE':
            angle, x, y, z = target.rotation_axis_angle
            axis = Vector((x, y, z))
            if axis.length_squared == 0.0:
                return Quaternion()
            return Quaternion(axis, angle)
        return Euler(target.rotation_euler, mode).to_quaternion()

    def local_euler_angles(self, compat: Euler | None = None) -> Euler:
        """
        Current local rotation as Euler angles (radians).
        Euler-mode targets return their stored angles in their own order;
        other modes are converted to XYZ, staying close to `compat` if given.
        """
        mode = self.target.rotation_mode
        if mode in EULER_ORDERS:
            return Euler(self.target.rotation_euler, mode)
        quat = self.local_quaternion()
        if compat is None:
            return quat.to_euler('XYZ')
        return quat.to_euler('XYZ', compat)

    def set_euler_angles(self, euler) -> None:
        """Set the rotation from angles expressed in the order local_euler_angles() reports."""
        mode = self.target.rotation_mode
        order = mode if mode in EULER_ORDERS else 'XYZ'
        self._set_local_euler_angles(euler, EULER_ORDERS.index(order))

    def rotate(self, delta) -> None:
        """Compose the local rotation with `delta` (radians), in the target's own space."""
        compat = None
        if self.target.rotation_mode in EULER_ORDERS:
            compat = self.target.rotation_euler.copy()
        rotated = self.local_quaternion() @ Euler(delta, DELTA_ORDER).to_quaternion()
        self._write_quaternion(rotated, compat)

    def _set_local_euler_angles(self, euler, order: int = 0) -> None:
        if not 0 <= order < len(EULER_ORDERS):
            raise ValueError(f"Unknown Euler order flag {order!r}")
        order_name = EULER_ORDERS[order]
        angles = Euler(euler, order_name)
        if self.target.rotation_mode == order_name:
            self.target.rotation_euler = angles
        else:
            self._write_quaternion(angles.to_quaternion())

    def _write_quaternion(self, quat: Quaternion, compat: Euler | None = None) -> None:
        target = self.target
        mode = target.rotation_mode
        if mode == 'QUATERNION':
            target.rotation_quaternion = quat
        elif mode == 'AXIS_ANGLE':
            axis, angle = quat.to_axis_angle()
            target.rotation_axis_angle = (angle, axis.x, axis.y, axis.z)
        elif compat is None:
            target.rotation_euler = quat.to_euler(mode)
        else:
            target.rotation_euler = quat.to_euler(mode, compat)


# ── Privileged operations ─────────────────────────────────────────────────────

class PrivilegedOperation:
    """A TransformHandle routine invoked directly against live targets."""

    __slots__ = ("name", "access", "_method")

    def __init__(self, name: str, access: Access, method) -> None:
        self.name = name
        self.access = access
        self._method = method

    def invoke(self, target, *args):
        return self._method(TransformHandle(target), *args)

    def __repr__(self) -> str:
        return f"<PrivilegedOperation {self.access.value} {self.name}>"


class RotationOperations(NamedTuple):
    set_local_euler_angles: PrivilegedOperation
    rotate: PrivilegedOperation


def _type_name(target_type) -> str:
    return getattr(target_type, "__name__", repr(target_type))


def resolve_operation(target_type, name: str, access: Access) -> PrivilegedOperation:
    """Look up a rotation routine for `target_type`, failing loudly when unavailable."""
    type_name = _type_name(target_type)
    rna = getattr(target_type, "bl_rna", None)
    if rna is None:
        raise ConfigurationError(
            f"Cannot resolve '{name}': {type_name} is not an RNA type"
        )

    missing = [member for member in ROTATION_MEMBERS if member not in rna.properties]
    if missing:
        raise ConfigurationError(
            f"Cannot resolve '{name}' on {type_name}: missing {', '.join(missing)}"
        )

    attr = name if access is Access.PUBLIC else f"_{name}"
    method = getattr(TransformHandle, attr, None)
    if not callable(method):
        raise ConfigurationError(
            f"Cannot resolve {access.value} operation '{name}' on {type_name}"
        )

    log.debug("Resolved %s operation '%s' for %s", access.value, name, type_name)
    return PrivilegedOperation(name, access, method)


def resolve_operations(target_type) -> RotationOperations:
    return RotationOperations(
        set_local_euler_angles=resolve_operation(
            target_type, "set_local_euler_angles", Access.NON_PUBLIC
        ),
        rotate=resolve_operation(target_type, "rotate", Access.PUBLIC),
    )
