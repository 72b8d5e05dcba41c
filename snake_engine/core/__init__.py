"""Pure gameplay primitives (grid moves, level/speed progression, clocks).

Kept free of FastAPI concerns so the engine, the API and tests can share them.
"""
