"""
Transform Inspector — UI Panel

Location: View3D > Sidebar (N) > Item > Transform Inspector

    [P] position
    [R] rotation
    [S] scale
    [XInv] [YInv] [ZInv]
"""

import logging

import bpy
from bpy.types import Panel

from .errors import ConfigurationError
from .rotation_field import draw_vector_field
from .session import (
    collect_targets,
    display,
    get_session,
    label_factor,
    label_width_override,
    refresh_display,
)

log = logging.getLogger(__name__)


def _button(layout, style, idname: str, text: str):
    sub = layout.row(align=True)
    sub.ui_units_x = style.ui_units_x
    sub.scale_y = style.scale_y
    return sub.operator(idname, text=text)


def _field_row(layout, factor: float):
    """(label column, field column) of one row; a plain shared row when there is no label room."""
    if factor <= 0.0:
        row = layout.row(align=True)
        return row, row
    split = layout.split(factor=factor, align=True)
    return split.row(align=True), split.row(align=True)


class TINSP_PT_transform(Panel):
    bl_label = "Transform Inspector"
    bl_idname = "TINSP_PT_transform"
    bl_space_type = 'VIEW_3D'
    bl_region_type = 'UI'
    bl_category = "Item"

    @classmethod
    def poll(cls, context: bpy.types.Context) -> bool:
        return bool(collect_targets(context))

    def draw(self, context: bpy.types.Context) -> None:
        layout = self.layout
        session = get_session()

        try:
            session.ensure_active(collect_targets(context))
        except ConfigurationError as exc:
            log.debug("Inspector unavailable: %s", exc)
            layout.label(text=str(exc), icon='ERROR')
            return

        wm = context.window_manager
        styles = session.styles
        view_width = context.region.width
        refresh_display(display, view_width)

        with label_width_override(display, view_width) as settings:
            session.serialized.update()
            factor = label_factor(settings, view_width)

            # ── Position ──────────────────────────────────────────────────────
            label, field = _field_row(layout, factor)
            _button(label, styles.reset, "tinsp.reset_position", "P")
            draw_vector_field(field, wm, "tinsp_location")

            # ── Rotation ──────────────────────────────────────────────────────
            label, field = _field_row(layout, factor)
            _button(label, styles.reset, "tinsp.reset_rotation", "R")
            session.rotation_field.draw(field, wm)

            # ── Scale ─────────────────────────────────────────────────────────
            label, field = _field_row(layout, factor)
            _button(label, styles.reset, "tinsp.reset_scale", "S")
            draw_vector_field(field, wm, "tinsp_scale")

            # ── Inverse rotation ──────────────────────────────────────────────
            row = layout.row(align=True)
            for axis in ('X', 'Y', 'Z'):
                op = _button(row, styles.inverse, "tinsp.inverse_rotation", f"{axis}Inv")
                op.axis = axis

            session.serialized.apply_modified_properties(session.recorder)


classes = (TINSP_PT_transform,)


def register():
    for cls in classes:
        bpy.utils.register_class(cls)


def unregister():
    for cls in reversed(classes):
        bpy.utils.unregister_class(cls)
