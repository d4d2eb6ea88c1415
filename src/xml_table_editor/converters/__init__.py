"""
XML conversion between raw bytes and element trees.
"""

from .xml_bridge import XMLBridge

__all__ = ["XMLBridge"]
