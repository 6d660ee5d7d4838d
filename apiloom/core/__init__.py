# Subsystems are imported directly, e.g. `from apiloom.core.graph import build_graph`
