from .action_handler import ActionHandler
from .cart_actions import CartActions

__all__ = ["ActionHandler", "CartActions"]
