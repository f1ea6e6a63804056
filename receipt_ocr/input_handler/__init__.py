"""
Input Handler Module for the Receipt OCR System.

Resolves file paths, remote URLs and base64 data URLs into image sources
that can be submitted to the OCR engine.

Author: ML Engineering Team
"""

from .handler import InputHandler, ImageSource

__all__ = ['InputHandler', 'ImageSource']
