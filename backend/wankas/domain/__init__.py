"""
Domain Layer - Business Entities

This layer contains Pydantic models representing store entities
(products, carts, orders, locations, users, recipes).

Author: Wanka's
Date: 2025-06-02
"""
from wankas.domain.product import Product
from wankas.domain.cart import Cart, CartItem, CartLine
from wankas.domain.order import Order, OrderItem, EnrichedOrder, EnrichedOrderItem
from wankas.domain.location import StoreLocation, TimeSlot, PickupSlot, PickupSchedule
from wankas.domain.user import User
from wankas.domain.recipe import Recipe, IdentifiedItem, IngredientActionItem

__all__ = [
    'Product', 'Cart', 'CartItem', 'CartLine',
    'Order', 'OrderItem', 'EnrichedOrder', 'EnrichedOrderItem',
    'StoreLocation', 'TimeSlot', 'PickupSlot', 'PickupSchedule',
    'User', 'Recipe', 'IdentifiedItem', 'IngredientActionItem'
]
