"""
Export models from each Python module in this package.
"""
# pylint: disable=W0401

from .base import *
from .peer import *
