"""simgraph - scheduling core of an interactive physics simulation.

A scene graph of pluggable components (solvers, force fields, collision
pipelines, mechanical states) stepped by visitors in a fixed phase order,
with a key-indexed factory to plug implementations in at runtime.
"""

__version__ = "0.1.0"
