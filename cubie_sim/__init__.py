"""Cinemática de cubos N×N×N y solver de la cruz blanca."""

__version__ = "0.1.0"
