"""
PySide6 layer: paints the model's geometry and drives the frame cycle.

Nothing in `curvegraph.model` imports from here.
"""
