from quickbill.models.base import Base
from quickbill.models.order import Order
from quickbill.models.order_item import OrderItem
from quickbill.models.product import Product
from quickbill.models.profile import Profile
from quickbill.models.subscription import SubscriptionPlan, UserSubscription

__all__ = [
    "Base",
    "Order",
    "OrderItem",
    "Product",
    "Profile",
    "SubscriptionPlan",
    "UserSubscription",
]
