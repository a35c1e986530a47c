from math import radians

import bpy
import pytest
from mathutils import Quaternion, Vector

from transform_inspector.binding import MIXED, SerializedSelection, selection_key
from transform_inspector.errors import ConfigurationError, StaleBindingError
from transform_inspector.undo import UndoRecorder


@pytest.fixture
def recorder():
    return UndoRecorder()


def test_current_value_shared(make_empty):
    a = make_empty("A", location=(1.0, 2.0, 3.0))
    b = make_empty("B", location=(1.0, 2.0, 3.0))

    position = SerializedSelection([a, b]).find_property('location')

    assert position.current_value() == Vector((1.0, 2.0, 3.0))


def test_current_value_mixed(make_empty):
    a = make_empty("A", location=(1.0, 2.0, 3.0))
    b = make_empty("B", location=(0.0, 2.0, 3.0))

    position = SerializedSelection([a, b]).find_property('location')

    assert position.current_value() is MIXED
    assert position.display_value() == Vector((1.0, 2.0, 3.0))


def test_update_pulls_external_changes(make_empty):
    a = make_empty("A")
    scale = SerializedSelection([a]).find_property('scale')

    a.scale = (2.0, 2.0, 2.0)
    assert scale.current_value() == Vector((1.0, 1.0, 1.0))

    scale.update()
    assert scale.current_value() == Vector((2.0, 2.0, 2.0))


def test_apply_writes_every_target_in_one_transaction(make_empty, recorder):
    a = make_empty("A", location=(1.0, 2.0, 3.0))
    b = make_empty("B", location=(4.0, 5.0, 6.0))
    selection = SerializedSelection([a, b])
    position = selection.find_property('location')

    position.stage((0.0, 0.0, 0.0))
    assert selection.apply_modified_properties(recorder)

    assert a.location == Vector((0.0, 0.0, 0.0))
    assert b.location == Vector((0.0, 0.0, 0.0))
    assert len(recorder.history) == 1
    assert recorder.history[0].targets == [a, b]
    assert not position.has_staged


def test_mask_limits_write_to_edited_components(make_empty, recorder):
    a = make_empty("A", location=(1.0, 2.0, 3.0))
    b = make_empty("B", location=(4.0, 5.0, 6.0))
    selection = SerializedSelection([a, b])
    position = selection.find_property('location')

    position.stage((9.0, 2.0, 3.0), mask=(True, False, False))
    selection.apply_modified_properties(recorder)

    assert a.location == Vector((9.0, 2.0, 3.0))
    assert b.location == Vector((9.0, 5.0, 6.0))


def test_apply_without_staged_values_is_a_no_op(make_empty, recorder):
    selection = SerializedSelection([make_empty("A")])
    selection.find_property('location')

    assert not selection.apply_modified_properties(recorder)
    assert len(recorder.history) == 0


def test_rotation_property_writes_through_rotation_mode(make_empty, recorder):
    a = make_empty("A", mode='QUATERNION')
    a.rotation_quaternion = Quaternion((0.0, 0.0, 1.0), radians(45.0))
    selection = SerializedSelection([a])
    rotation = selection.find_property('rotation')

    rotation.stage((radians(90.0), 0.0, 0.0))
    selection.apply_modified_properties(recorder)

    expected = Quaternion((1.0, 0.0, 0.0), radians(90.0))
    assert a.rotation_quaternion.dot(expected) == pytest.approx(1.0, abs=1e-5)


def test_unknown_field_is_a_configuration_error(make_empty):
    selection = SerializedSelection([make_empty("A")])
    with pytest.raises(ConfigurationError, match="colour"):
        selection.find_property('colour')


def test_schema_without_field_is_a_configuration_error():
    camera = bpy.data.cameras.new("Cam")
    try:
        selection = SerializedSelection([camera])
        with pytest.raises(ConfigurationError, match="Camera has no 'location'"):
            selection.find_property('location')
    finally:
        bpy.data.cameras.remove(camera)


def test_empty_selection_is_rejected():
    with pytest.raises(ConfigurationError):
        SerializedSelection([])


def test_closed_selection_makes_properties_stale(make_empty, recorder):
    selection = SerializedSelection([make_empty("A")])
    position = selection.find_property('location')

    selection.close()

    with pytest.raises(StaleBindingError):
        position.update()
    with pytest.raises(StaleBindingError):
        position.stage((0.0, 0.0, 0.0))


def test_selection_key_depends_on_order(make_empty):
    a = make_empty("A")
    b = make_empty("B")
    assert selection_key([a, b]) != selection_key([b, a])
    assert selection_key([a, b]) == selection_key([a, b])
