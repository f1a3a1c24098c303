"""
Catálogo local de respaldo

Se sirve cuando Supabase no responde (CATALOG_FALLBACK_ENABLED=true) para
que la tienda siga mostrando productos. El stock es 0: estos productos no
se pueden comprar hasta que vuelva la base de datos.
"""
from decimal import Decimal
from typing import List

from wankas.domain.product import Product


FALLBACK_PRODUCTS: List[Product] = [
    Product(
        id="fallback-arroz-extra",
        name="Arroz Extra 5kg",
        description="Arroz extra graneado, bolsa de 5 kg.",
        price=Decimal("24.90"),
        image_url="https://placehold.co/600x400.png",
        category="Abarrotes",
        stock=0,
    ),
    Product(
        id="fallback-aceite-vegetal",
        name="Aceite Vegetal 1L",
        description="Aceite vegetal para cocinar, botella de 1 litro.",
        price=Decimal("10.50"),
        image_url="https://placehold.co/600x400.png",
        category="Abarrotes",
        stock=0,
    ),
    Product(
        id="fallback-papa-amarilla",
        name="Papa Amarilla",
        description="Papa amarilla por kilo, ideal para causa y puré.",
        price=Decimal("4.80"),
        image_url="https://placehold.co/600x400.png",
        category="Verduras",
        stock=0,
    ),
    Product(
        id="fallback-cebolla-roja",
        name="Cebolla Roja",
        description="Cebolla roja por kilo.",
        price=Decimal("3.20"),
        image_url="https://placehold.co/600x400.png",
        category="Verduras",
        stock=0,
    ),
    Product(
        id="fallback-aji-amarillo",
        name="Ají Amarillo",
        description="Ají amarillo fresco, bandeja de 250 g.",
        price=Decimal("3.50"),
        image_url="https://placehold.co/600x400.png",
        category="Verduras",
        stock=0,
    ),
    Product(
        id="fallback-limon",
        name="Limón",
        description="Limón sutil por kilo.",
        price=Decimal("6.90"),
        image_url="https://placehold.co/600x400.png",
        category="Frutas",
        stock=0,
    ),
    Product(
        id="fallback-pollo-entero",
        name="Pollo Entero",
        description="Pollo fresco entero por kilo.",
        price=Decimal("11.90"),
        image_url="https://placehold.co/600x400.png",
        category="Carnes",
        stock=0,
    ),
    Product(
        id="fallback-leche-evaporada",
        name="Leche Evaporada 400g",
        description="Leche evaporada entera, lata de 400 g.",
        price=Decimal("4.20"),
        image_url="https://placehold.co/600x400.png",
        category="Lácteos",
        stock=0,
    ),
]
