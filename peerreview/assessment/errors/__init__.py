"""
Export errors from all modules defined in this package.
"""

# pylint:disable=W0401

from .base import *
from .peer import *
from .staff import *
