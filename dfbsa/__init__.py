"""Readers for Daggerfall BSA archives and the 3D object records stored in them."""

__version__ = "0.1.0"