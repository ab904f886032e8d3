"""
clinicgrid - calendar availability and appointment layout engine.
"""

__version__ = "0.1.0"
