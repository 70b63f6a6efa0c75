"""
py-imperia: procedural hex-grid world generation for the ImperiaNova prototype.

Generates a sphere-mapped fBm heightmap, classifies it into terrain, stores
the result in a hex grid and materialises it as a chunked tile map.
"""

__version__ = "0.1.0"
