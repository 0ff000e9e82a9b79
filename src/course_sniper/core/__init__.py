"""Navigation, timing and enrollment primitives."""
