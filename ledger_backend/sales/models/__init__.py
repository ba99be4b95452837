# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .sale import Sale
from .sale_attachment import SaleAttachment
from .sale_bank_split import SaleBankSplit

__all__ = [
    "Sale",
    "SaleBankSplit",
    "SaleAttachment",
]
