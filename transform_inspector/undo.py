"""
Transform Inspector — Undo recording

Every batch edit issued by the inspector runs inside
`UndoRecorder.transaction()`: the local transform of every target is
snapshotted first, and the whole batch is reverted if any target fails,
so one click is always all-or-nothing.

Host undo
---------
Operators carry bl_options {'UNDO'}, so Blender pushes one step per click
after execute.  Edits coming from the proxy fields on WindowManager do not get
a host step of their own, so those transactions are opened with push=True.
"""

import logging
from collections import deque
from contextlib import contextmanager

import bpy

log = logging.getLogger(__name__)


HISTORY_LIMIT = 64


class TransformSnapshot:
    __slots__ = (
        "target",
        "location",
        "rotation_mode",
        "rotation_euler",
        "rotation_quaternion",
        "rotation_axis_angle",
        "scale",
    )

    @classmethod
    def capture(cls, target) -> "TransformSnapshot":
        snap = cls()
        snap.target = target
        snap.location = target.location.copy()
        snap.rotation_mode = target.rotation_mode
        snap.rotation_euler = target.rotation_euler.copy()
        snap.rotation_quaternion = target.rotation_quaternion.copy()
        snap.rotation_axis_angle = tuple(target.rotation_axis_angle)
        snap.scale = target.scale.copy()
        return snap

    def restore(self) -> None:
        target = self.target
        # Changing rotation_mode converts the stored rotation, so set it first.
        target.rotation_mode = self.rotation_mode
        target.location = self.location
        target.rotation_euler = self.rotation_euler
        target.rotation_quaternion = self.rotation_quaternion
        target.rotation_axis_angle = self.rotation_axis_angle
        target.scale = self.scale


class Transaction:
    """Pre-mutation state of a set of targets, reverted as one unit."""

    def __init__(self, label: str, targets) -> None:
        self.label = label
        self.snapshots = [TransformSnapshot.capture(target) for target in targets]

    @property
    def targets(self) -> list:
        return [snap.target for snap in self.snapshots]

    def revert(self) -> None:
        for snap in self.snapshots:
            snap.restore()

    def __repr__(self) -> str:
        return f"<Transaction {self.label!r} targets={len(self.snapshots)}>"


def push_host_step(label: str) -> bool:
    """Ask Blender for an undo step named `label`; False when it has no undo context."""
    if not bpy.ops.ed.undo_push.poll():
        log.debug("Host undo unavailable, '%s' not pushed", label)
        return False
    bpy.ops.ed.undo_push(message=label)
    return True


class UndoRecorder:
    def __init__(self, limit: int = HISTORY_LIMIT) -> None:
        self.history: deque = deque(maxlen=limit)

    def record_objects(self, targets, label: str) -> Transaction:
        txn = Transaction(label, targets)
        self.history.append(txn)
        log.debug("Recorded %r", txn)
        return txn

    def clear(self) -> None:
        self.history.clear()

    @contextmanager
    def transaction(self, label: str, targets, push: bool = False):
        txn = self.record_objects(targets, label)
        try:
            yield txn
        except Exception:
            log.warning("'%s' failed, reverting %d target(s)", label, len(txn.snapshots))
            txn.revert()
            self.history.remove(txn)
            raise
        if push:
            push_host_step(label)
