"""
Data management package.
"""

from data.model import MoleculeModel

__all__ = [
    'MoleculeModel',
]
