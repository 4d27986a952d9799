"""Navigation mesh building blocks: triangle rasterization, span filtering and polygon mesh building."""

__version__ = "0.0.2"

__all__ = [
    "build",
    "navmesh",
    "polygon_ops",
    "pre_filter",
    "rasterize",
    "region",
    "span",
    "triangulation",
    "trimesh",
    "vertex_removal",
]