"""
Selection model: the ordered set of primitives drawn in an editing session.
"""

from .model import SelectionModel

__all__ = ['SelectionModel']
