"""Backend package for the simgraph HTTP driver.

This package provides a FastAPI server that owns a scene graph, steps it
on request and exposes the component factory for inspection.
"""
