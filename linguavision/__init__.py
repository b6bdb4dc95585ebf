"""
LinguaVision: segmented English translation of Korean and Spanish images.
"""

__version__ = "1.0.0"
