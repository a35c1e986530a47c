"""
Transform Inspector — Rotation field

The rotation row edits Euler angles whatever mode the targets store their
rotation in.  RotationField is created once per inspector session and
re-initialised on every activation; it remembers the last angles shown per
target so a quaternion that converts to several equivalent Euler triples keeps
being displayed with the one closest to what the user last saw.
"""

from mathutils import Euler

from .binding import RotationProperty
from .rotation import EULER_ORDERS, TransformHandle


MIXED_MODE = 'MIXED'

_MODE_LABELS = {
    'QUATERNION': "Quaternion (as Euler XYZ)",
    'AXIS_ANGLE': "Axis Angle (as Euler XYZ)",
    MIXED_MODE: "Mixed rotation modes",
}


def draw_vector_field(layout, data, prop_name: str) -> None:
    """Unlabelled vector field, components on one row."""
    row = layout.row(align=True)
    for index in range(3):
        row.prop(data, prop_name, index=index, text="")


class RotationField:
    def __init__(self) -> None:
        self.display_mode: str | None = None
        self._property: RotationProperty | None = None
        self._hints: dict[int, Euler] = {}

    def on_activate(self, rotation_property: RotationProperty) -> None:
        self._property = rotation_property
        targets = rotation_property.targets

        modes = {target.rotation_mode for target in targets}
        self.display_mode = modes.pop() if len(modes) == 1 else MIXED_MODE

        keep = {target.as_pointer() for target in targets}
        self._hints = {key: hint for key, hint in self._hints.items() if key in keep}
        rotation_property.hints = self._hints

    def forget(self, targets) -> None:
        """Drop the shown angles of `targets`; their next display starts fresh."""
        for target in targets:
            self._hints.pop(target.as_pointer(), None)

    @property
    def mode_label(self) -> str:
        if self.display_mode in EULER_ORDERS:
            return f"Euler {self.display_mode}"
        return _MODE_LABELS.get(self.display_mode, "")

    def display_value(self) -> Euler:
        target = self._property.targets[0]
        key = target.as_pointer()
        euler = TransformHandle(target).local_euler_angles(self._hints.get(key))
        self._hints[key] = euler.copy()
        return euler

    def set_value(self, value, mask=None) -> None:
        self._property.stage(value, mask)
        target = self._property.targets[0]
        self._hints[target.as_pointer()] = Euler(value)

    def draw(self, layout, wm) -> None:
        col = layout.column(align=True)
        draw_vector_field(col, wm, "tinsp_rotation")
        if self.display_mode not in EULER_ORDERS:
            col.label(text=self.mode_label, icon='ORIENTATION_GIMBAL')
