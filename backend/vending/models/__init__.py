from .catalog import ProductRow, SaleRow

__all__ = [
    'ProductRow', 'SaleRow',
]
