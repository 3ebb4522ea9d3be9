"""
Segment Compass: customer proximity analytics over a satisfaction/loyalty grid.
"""

__version__ = "1.0.0"
