"""
DAJAJ POS - Restaurant point-of-sale core

Order construction, pricing with tax, and sequentially numbered,
token-protected bills stored in MongoDB.
"""

__version__ = "0.1.0"
__author__ = "DAJAJ"
__email__ = "pos@dajaj.in"

from . import billing
from . import cart
from . import menu
from . import utils

__all__ = ["billing", "cart", "menu", "utils"]
