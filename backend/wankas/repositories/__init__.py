"""
Repository Layer - Data Access

This layer handles all Supabase table calls and returns domain models.
Repositories abstract away PostgREST details from business logic.

Author: Wanka's
Date: 2025-06-02
"""
from wankas.repositories.product_repository import ProductRepository
from wankas.repositories.location_repository import LocationRepository
from wankas.repositories.order_repository import OrderRepository
from wankas.repositories.profile_repository import ProfileRepository

__all__ = [
    'ProductRepository',
    'LocationRepository',
    'OrderRepository',
    'ProfileRepository'
]
