"""
Wanka's Compras Inteligentes - backend API

Catalog, pickup orders, boletas and AI pantry assistant.
"""
__version__ = "1.0.0"
