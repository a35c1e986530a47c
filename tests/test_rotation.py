from math import radians

import bpy
import pytest
from mathutils import Euler, Quaternion

from transform_inspector.errors import ConfigurationError
from transform_inspector.rotation import (
    Access,
    TransformHandle,
    resolve_operation,
    resolve_operations,
)


def _same_rotation(a, b, tol=1e-5):
    ma, mb = a.to_matrix(), b.to_matrix()
    return all(abs(ma[i][j] - mb[i][j]) < tol for i in range(3) for j in range(3))


def test_reset_euler_target(make_empty):
    obj = make_empty(rotation=(0.3, -1.2, 2.0))
    TransformHandle(obj)._set_local_euler_angles((0.0, 0.0, 0.0), 0)
    assert tuple(obj.rotation_euler) == pytest.approx((0.0, 0.0, 0.0))


def test_reset_euler_target_with_other_order(make_empty):
    obj = make_empty(rotation=(0.3, -1.2, 2.0), mode='ZYX')
    TransformHandle(obj)._set_local_euler_angles((0.0, 0.0, 0.0), 0)
    assert obj.rotation_mode == 'ZYX'
    assert tuple(obj.rotation_euler) == pytest.approx((0.0, 0.0, 0.0), abs=1e-6)


def test_reset_quaternion_target_writes_quaternion(make_empty):
    obj = make_empty(mode='QUATERNION')
    obj.rotation_quaternion = Quaternion((0.0, 0.0, 1.0), radians(90.0))

    TransformHandle(obj)._set_local_euler_angles((0.0, 0.0, 0.0), 0)

    assert _same_rotation(obj.rotation_quaternion, Quaternion())


def test_reset_axis_angle_target(make_empty):
    obj = make_empty(mode='AXIS_ANGLE')
    obj.rotation_axis_angle = (radians(45.0), 1.0, 0.0, 0.0)

    TransformHandle(obj)._set_local_euler_angles((0.0, 0.0, 0.0), 0)

    assert obj.rotation_axis_angle[0] == pytest.approx(0.0, abs=1e-6)


def test_unknown_order_flag_is_rejected(make_empty):
    obj = make_empty()
    with pytest.raises(ValueError, match="order"):
        TransformHandle(obj)._set_local_euler_angles((0.0, 0.0, 0.0), 6)


def test_rotate_composes_with_current_rotation(make_empty):
    obj = make_empty(rotation=(0.0, 0.0, radians(90.0)))
    before = obj.rotation_euler.to_quaternion()

    TransformHandle(obj).rotate((radians(180.0), 0.0, 0.0))

    expected = before @ Euler((radians(180.0), 0.0, 0.0)).to_quaternion()
    assert obj.rotation_mode == 'XYZ'
    assert _same_rotation(obj.rotation_euler.to_quaternion(), expected)


def test_rotate_quaternion_target(make_empty):
    obj = make_empty(mode='QUATERNION')
    obj.rotation_quaternion = Quaternion((1.0, 0.0, 0.0), radians(30.0))
    before = obj.rotation_quaternion.copy()

    TransformHandle(obj).rotate((0.0, radians(180.0), 0.0))

    expected = before @ Quaternion((0.0, 1.0, 0.0), radians(180.0))
    assert _same_rotation(obj.rotation_quaternion, expected)
    # Euler storage is untouched for quaternion targets.
    assert tuple(obj.rotation_euler) == pytest.approx((0.0, 0.0, 0.0))


def test_local_euler_angles_follows_rotation_mode(make_empty):
    obj = make_empty(mode='QUATERNION')
    obj.rotation_quaternion = Quaternion((0.0, 0.0, 1.0), radians(90.0))

    euler = TransformHandle(obj).local_euler_angles()

    assert euler.order == 'XYZ'
    assert tuple(euler) == pytest.approx((0.0, 0.0, radians(90.0)), abs=1e-5)


def test_set_euler_angles_round_trips_display_order(make_empty):
    obj = make_empty(mode='YXZ')
    handle = TransformHandle(obj)

    handle.set_euler_angles((0.1, 0.2, 0.3))

    assert tuple(obj.rotation_euler) == pytest.approx((0.1, 0.2, 0.3))


def test_resolve_operations_classifies_access():
    ops = resolve_operations(bpy.types.Object)

    assert ops.set_local_euler_angles.access is Access.NON_PUBLIC
    assert ops.rotate.access is Access.PUBLIC


def test_resolved_operation_invokes_on_live_target(make_empty):
    obj = make_empty(rotation=(0.5, 0.5, 0.5))
    ops = resolve_operations(bpy.types.Object)

    ops.set_local_euler_angles.invoke(obj, (0.0, 0.0, 0.0), 0)

    assert tuple(obj.rotation_euler) == pytest.approx((0.0, 0.0, 0.0))


def test_resolve_works_for_pose_bones():
    ops = resolve_operations(bpy.types.PoseBone)
    assert ops.rotate.name == "rotate"


def test_resolve_fails_for_type_without_rotation():
    with pytest.raises(ConfigurationError, match="rotate.*Mesh.*rotation_mode"):
        resolve_operation(bpy.types.Mesh, "rotate", Access.PUBLIC)


def test_resolve_fails_for_unknown_name():
    with pytest.raises(ConfigurationError, match="spin"):
        resolve_operation(bpy.types.Object, "spin", Access.PUBLIC)


def test_public_lookup_does_not_see_non_public_routine():
    with pytest.raises(ConfigurationError, match="public operation 'set_local_euler_angles'"):
        resolve_operation(bpy.types.Object, "set_local_euler_angles", Access.PUBLIC)
