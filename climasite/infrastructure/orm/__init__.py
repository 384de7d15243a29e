"""Infrastructure ORM Models"""

from .order_model import OrderModel, OrderItemModel, OrderNoteModel

__all__ = [
    'OrderModel',
    'OrderItemModel',
    'OrderNoteModel',
]
