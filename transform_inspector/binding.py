"""
Transform Inspector — Bound properties

SerializedSelection hands out one BoundProperty per transform field of the
inspected selection.  A property caches the latest value of every target,
reports MIXED when they disagree, and stages edits that are written to every
target at once by `apply_modified_properties()`.

Properties belong to the selection they were bound against.  Once that
selection is closed (the inspector moved on), using them raises
StaleBindingError.
"""

import logging
import math

from mathutils import Vector

from .errors import ConfigurationError, StaleBindingError
from .rotation import ROTATION_MEMBERS, TransformHandle

log = logging.getLogger(__name__)


TOLERANCE = 1e-6


class _Mixed:
    def __repr__(self) -> str:
        return "MIXED"

    def __bool__(self) -> bool:
        return False


MIXED = _Mixed()


def _same(a, b) -> bool:
    return all(math.isclose(x, y, abs_tol=TOLERANCE) for x, y in zip(a, b))


def selection_key(targets) -> tuple:
    """Identity of a selection: RNA pointer and name of each target, in order."""
    return tuple((target.as_pointer(), target.name) for target in targets)


# ── Properties ────────────────────────────────────────────────────────────────

class BoundProperty:
    """Read/write handle to one vector field of every target in a selection."""

    def __init__(self, selection: "SerializedSelection", name: str) -> None:
        self.name = name
        self._selection = selection
        self._values: list = []
        self._staged = None
        self._mask = None

    @property
    def targets(self) -> tuple:
        return self._selection.targets

    @property
    def has_staged(self) -> bool:
        return self._staged is not None

    def _check(self) -> None:
        if self._selection.closed:
            raise StaleBindingError(
                f"'{self.name}' is bound to a selection that is no longer inspected"
            )

    def _read(self, target):
        return Vector(getattr(target, self.name))

    def _write(self, target, value) -> None:
        setattr(target, self.name, value)

    def update(self) -> None:
        self._check()
        self._values = [self._read(target) for target in self._selection.targets]

    def current_value(self):
        """Shared value of all targets, or MIXED when they differ."""
        self._check()
        first = self._values[0]
        for value in self._values[1:]:
            if not _same(first, value):
                return MIXED
        return first.copy()

    def display_value(self):
        """Value of the first (active) target."""
        self._check()
        return self._values[0].copy()

    def stage(self, value, mask=None) -> None:
        """
        Stage `value` for every target.
        `mask` (one bool per component) restricts the write to edited components,
        leaving the others at each target's own value.
        """
        self._check()
        self._staged = Vector(value)
        self._mask = tuple(mask) if mask is not None else None

    def clear(self) -> None:
        self._staged = None
        self._mask = None

    def apply_to(self, target) -> None:
        if self._mask is None:
            value = self._staged.copy()
        else:
            value = self._read(target)
            for index, edited in enumerate(self._mask):
                if edited:
                    value[index] = self._staged[index]
        self._write(target, value)


class RotationProperty(BoundProperty):
    """
    Local rotation as Euler angles, read and written through the target's rotation mode.
    `hints` maps a target pointer to the Euler last shown for it; reads stay
    compatible with it, so a masked edit keeps the other components as displayed.
    """

    def __init__(self, selection: "SerializedSelection", name: str) -> None:
        super().__init__(selection, name)
        self.hints: dict = {}

    def _read(self, target):
        return TransformHandle(target).local_euler_angles(self.hints.get(target.as_pointer()))

    def _write(self, target, value) -> None:
        TransformHandle(target).set_euler_angles(value)


_PROPERTY_TYPES = {
    'location': (BoundProperty, ('location',)),
    'rotation': (RotationProperty, ROTATION_MEMBERS),
    'scale': (BoundProperty, ('scale',)),
}


# ── Selection ─────────────────────────────────────────────────────────────────

class SerializedSelection:
    def __init__(self, targets) -> None:
        self.targets = tuple(targets)
        if not self.targets:
            raise ConfigurationError("Nothing selected to inspect")
        self.key = selection_key(self.targets)
        self.closed = False
        self._properties: list[BoundProperty] = []

    @property
    def target_types(self) -> list:
        types = []
        for target in self.targets:
            if type(target) not in types:
                types.append(type(target))
        return types

    def find_property(self, name: str) -> BoundProperty:
        try:
            cls, members = _PROPERTY_TYPES[name]
        except KeyError:
            raise ConfigurationError(f"Unknown transform field '{name}'") from None

        for target_type in self.target_types:
            rna = getattr(target_type, "bl_rna", None)
            missing = [m for m in members if rna is None or m not in rna.properties]
            if missing:
                raise ConfigurationError(
                    f"{target_type.__name__} has no '{name}' field "
                    f"(missing {', '.join(missing)})"
                )

        prop = cls(self, name)
        prop.update()
        self._properties.append(prop)
        return prop

    def update(self) -> None:
        for prop in self._properties:
            prop.update()

    def apply_modified_properties(self, recorder, label: str = "Inspector", push: bool = False) -> bool:
        """Write every staged value to every target as one undo transaction."""
        staged = [prop for prop in self._properties if prop.has_staged]
        if not staged:
            return False
        if self.closed:
            raise StaleBindingError("Cannot apply edits to a selection that is no longer inspected")

        try:
            with recorder.transaction(label, self.targets, push=push):
                for target in self.targets:
                    for prop in staged:
                        prop.apply_to(target)
        finally:
            for prop in staged:
                prop.clear()

        log.info(
            "%s: applied %s to %d target(s)",
            label, ", ".join(prop.name for prop in staged), len(self.targets),
        )
        self.update()
        return True

    def close(self) -> None:
        self.closed = True
