"""
Transform Inspector — Session

InspectorSession holds everything the panel keeps between redraws:
the three bound properties, the resolved rotation operations, the rotation
field and the button styles.  It is either UNINITIALIZED or READY; `activate()`
moves it to READY for a selection and replaces every handle of the previous
one, `deactivate()` drops them.

The session is invalidated on undo / redo / file load, since Blender rebuilds
the data blocks the handles point at.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import NamedTuple

import bpy
from bpy.app.handlers import persistent

from .binding import SerializedSelection, selection_key
from .errors import ConfigurationError
from .rotation import resolve_operations
from .rotation_field import RotationField
from .undo import UndoRecorder

log = logging.getLogger(__name__)


# Width left to the fields when wide mode is forced on for the draw.
WIDE_LABEL_MARGIN = 212

# Regions at least this wide are drawn in wide mode without forcing it.
WIDE_MODE_MIN_WIDTH = 330


# ── Display settings ──────────────────────────────────────────────────────────

class DisplaySettings:
    """Process-wide label width / wide mode shared by every inspector draw."""

    def __init__(self, label_width: float = 150.0, wide_mode: bool = False) -> None:
        self.label_width = label_width
        self.wide_mode = wide_mode


display = DisplaySettings()


def refresh_display(settings: DisplaySettings, view_width: float) -> None:
    """Recompute wide mode for a new draw of a region `view_width` pixels wide."""
    settings.wide_mode = view_width >= WIDE_MODE_MIN_WIDTH


def label_factor(settings: DisplaySettings, view_width: float) -> float:
    """Share of the row given to the label column, 0.0 when there is no room for one."""
    if view_width <= 0:
        return 0.0
    return min(max(settings.label_width / view_width, 0.0), 1.0)


@contextmanager
def label_width_override(settings: DisplaySettings, view_width: float):
    """Force wide mode for the duration of a draw; the label width is always restored."""
    old_label_width = settings.label_width
    if not settings.wide_mode:
        settings.wide_mode = True
        settings.label_width = max(0.0, view_width - WIDE_LABEL_MARGIN)
    try:
        yield settings
    finally:
        settings.label_width = old_label_width


# ── Button styles ─────────────────────────────────────────────────────────────

class ButtonStyle(NamedTuple):
    ui_units_x: float
    scale_y: float


class ButtonStyles(NamedTuple):
    reset: ButtonStyle
    inverse: ButtonStyle


TOOLBAR_BUTTON = ButtonStyle(ui_units_x=0.0, scale_y=1.0)


def build_button_styles() -> ButtonStyles:
    return ButtonStyles(
        reset=TOOLBAR_BUTTON._replace(ui_units_x=1.0),
        inverse=TOOLBAR_BUTTON._replace(ui_units_x=2.5),
    )


# ── Selection ─────────────────────────────────────────────────────────────────

def collect_targets(context) -> list:
    """Selected pose bones in Pose mode, selected objects otherwise; active item first."""
    if context.mode == 'POSE':
        targets = list(context.selected_pose_bones or ())
        active = context.active_pose_bone
    else:
        targets = list(context.selected_objects or ())
        active = context.active_object

    # An active item that is not selected is never edited.
    if active is not None and active in targets:
        targets.remove(active)
        targets.insert(0, active)
    return targets


# ── Session ───────────────────────────────────────────────────────────────────

class PanelState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class InspectorSession:
    def __init__(self) -> None:
        self.state = PanelState.UNINITIALIZED
        self.recorder = UndoRecorder()
        self.serialized: SerializedSelection | None = None
        self.position = None
        self.rotation = None
        self.scale = None
        self.operations = None
        self.rotation_field: RotationField | None = None
        self.styles: ButtonStyles | None = None
        self.activations = 0

    @property
    def ready(self) -> bool:
        return self.state is PanelState.READY

    @property
    def targets(self) -> tuple:
        if self.serialized is None:
            return ()
        return self.serialized.targets

    def activate(self, targets) -> None:
        self.deactivate()

        serialized = SerializedSelection(targets)
        target_types = serialized.target_types
        if len(target_types) > 1:
            names = ", ".join(t.__name__ for t in target_types)
            raise ConfigurationError(f"Cannot inspect a selection mixing {names}")

        position = serialized.find_property('location')
        rotation = serialized.find_property('rotation')
        scale = serialized.find_property('scale')

        if self.rotation_field is None:
            self.rotation_field = RotationField()
        self.rotation_field.on_activate(rotation)

        self.operations = resolve_operations(target_types[0])

        if self.styles is None:
            self.styles = build_button_styles()

        self.serialized = serialized
        self.position = position
        self.rotation = rotation
        self.scale = scale
        self.state = PanelState.READY
        self.activations += 1
        log.debug("Activated inspector on %d %s(s)", len(serialized.targets), target_types[0].__name__)

    def ensure_active(self, targets) -> bool:
        """Re-activate only when the selection changed; False when nothing is selected."""
        targets = list(targets)
        if not targets:
            self.deactivate()
            return False
        if self.ready and self.serialized.key == selection_key(targets):
            return True
        self.activate(targets)
        return True

    def deactivate(self) -> None:
        if self.serialized is not None:
            self.serialized.close()
        self.serialized = None
        self.position = None
        self.rotation = None
        self.scale = None
        self.operations = None
        # Recorded transactions point at the targets of the dropped selection.
        self.recorder.clear()
        self.state = PanelState.UNINITIALIZED


_session = InspectorSession()


def get_session() -> InspectorSession:
    return _session


# ── Handlers ──────────────────────────────────────────────────────────────────

@persistent
def _invalidate_session(*_args) -> None:
    _session.deactivate()


_HANDLERS = ("undo_post", "redo_post", "load_post")


def register():
    for name in _HANDLERS:
        handlers = getattr(bpy.app.handlers, name)
        if _invalidate_session not in handlers:
            handlers.append(_invalidate_session)


def unregister():
    for name in _HANDLERS:
        handlers = getattr(bpy.app.handlers, name)
        if _invalidate_session in handlers:
            handlers.remove(_invalidate_session)
    _session.deactivate()
