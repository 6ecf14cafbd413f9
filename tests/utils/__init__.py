"""
Test Utilities
==============

Sample components, models and test doubles.
"""

from .components import *
from .mocks import *
