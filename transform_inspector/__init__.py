"""
Transform Inspector - Blender Addon
Position / rotation / scale inspector with one-click resets and 180° inverse
rotations, applied to every selected object or pose bone at once.
"""

bl_info = {
    "name": "Transform Inspector",
    "author": "Transform Inspector developers",
    "version": (0, 1, 0),
    "blender": (5, 0, 0),
    "location": "View3D > Sidebar > Item > Transform Inspector",
    "description": "Multi-edit transform inspector with reset and inverse rotation buttons",
    "category": "Object",
}

from . import properties
from . import operators
from . import panels
from . import session


def register():
    properties.register()
    operators.register()
    panels.register()
    session.register()


def unregister():
    session.unregister()
    panels.unregister()
    operators.unregister()
    properties.unregister()


if __name__ == "__main__":
    register()
