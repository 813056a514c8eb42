from lending.api.errors import register_lending_exception_handlers
from lending.api.routes import item_router, order_router

__all__ = ["order_router", "item_router", "register_lending_exception_handlers"]
