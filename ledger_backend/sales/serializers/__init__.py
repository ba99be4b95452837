from .sale import (
    BankSplitInputSerializer,
    SaleAttachmentSerializer,
    SaleBankSplitSerializer,
    SaleCreateSerializer,
    SaleDetailSerializer,
    SaleLockSerializer,
    SaleSerializer,
    SaleUpdateSerializer,
)

__all__ = [
    "SaleSerializer",
    "SaleDetailSerializer",
    "SaleBankSplitSerializer",
    "SaleAttachmentSerializer",
    "SaleCreateSerializer",
    "SaleUpdateSerializer",
    "SaleLockSerializer",
    "BankSplitInputSerializer",
]
