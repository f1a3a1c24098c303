"""
Localization dictionaries (es / en)

Every user-facing message of the API and every label printed on the
boleta lives here. Placeholders use the {name} form.

Author: Wanka's
Date: 2025-06-02
"""
from typing import Optional

from fastapi import Request

from wankas.core.config import settings

SUPPORTED_LOCALES = ("es", "en")


ES = {
    # Common
    "currency_symbol": "S/ ",
    "subtotal": "Subtotal",
    "total": "Total",
    "not_available": "N/A",

    # Catalog / locations
    "products_fetch_failed": "No se pudieron obtener los productos.",
    "product_not_found": "El producto no existe.",
    "locations_fetch_failed": "No se pudieron obtener las tiendas.",
    "slots_for_tomorrow": "Ya no quedan horarios para hoy. Mostrando horarios para mañana.",
    "slots_for_monday": "No atendemos recojos el fin de semana. Mostrando horarios para el lunes.",

    # Auth
    "name_too_short": "El nombre debe tener al menos 2 caracteres.",
    "invalid_email": "Por favor, introduce una dirección de correo válida.",
    "email_provider_not_allowed": "Por favor, utiliza un proveedor de correo electrónico válido (ej: Gmail, Outlook).",
    "password_too_short": "La contraseña debe tener al menos 6 caracteres.",
    "password_required": "La contraseña es requerida.",
    "email_taken": "Ya existe una cuenta con este correo electrónico.",
    "register_failed": "No se pudo crear la cuenta. Por favor, inténtalo de nuevo.",
    "invalid_credentials": "Correo electrónico o contraseña inválidos.",
    "legacy_account": "Esta cuenta antigua no tiene contraseña. Contacta a soporte o crea una cuenta nueva.",
    "profile_not_found": "No se encontró el perfil.",
    "profile_update_failed": "No se pudo actualizar el perfil.",
    "db_unavailable": "El servicio de base de datos no está disponible.",

    # Checkout / orders
    "empty_cart": "Tu carrito está vacío.",
    "invalid_time_slot": "El horario seleccionado no es válido.",
    "pickup_in_past": "El horario de recojo seleccionado ya pasó. Elige otro horario.",
    "pickup_date_unavailable": "La fecha de recojo elegida no está disponible. Elige uno de los horarios ofrecidos.",
    "location_not_found": "La tienda seleccionada no existe.",
    "location_check_failed": "No se pudo verificar la tienda de recojo.",
    "stock_check_failed": "No se pudo verificar el stock de los productos.",
    "insufficient_stock": "No hay suficiente stock para '{name}'. Solo quedan {stock}.",
    "stock_update_failed": "No se pudo actualizar el stock de un producto. La orden no fue creada. Intente de nuevo.",
    "order_create_failed": "No se pudo crear la orden. Se ha intentado revertir el stock. Por favor, verifique el carrito y reintente.",
    "order_items_failed": "No se pudieron guardar los detalles de la orden. La orden ha sido cancelada. Por favor, reintente.",
    "orders_fetch_failed": "No se pudieron obtener tus pedidos.",
    "order_not_found": "La orden no existe o no tienes permiso para verla.",
    "order_not_cancellable": "Solo se pueden cancelar pedidos que están en estado 'pendiente'.",
    "order_cancel_lookup_failed": "No se pudo encontrar la orden para cancelar.",
    "order_cancel_status_failed": "Se restauró el stock pero no se pudo actualizar el estado de la orden. Contacta a soporte.",
    "order_placed": "¡Pedido realizado! Te esperamos en la tienda.",
    "order_cancelled": "Tu pedido fue cancelado y el stock fue restaurado.",
    "boleta_generation_failed": "No se pudo generar la boleta.",
    "status_pending": "Pendiente",
    "status_cancelled": "Cancelado",
    "status_completed": "Completado",
    "status_ready": "Listo para recoger",

    # Pantry
    "no_files": "Sube al menos una imagen.",
    "max_files": "Puedes subir hasta {max_files} imágenes.",
    "file_too_large": "Cada imagen debe pesar menos de {max_size} MB.",
    "invalid_file_type": "Solo se aceptan archivos de imagen.",
    "ai_not_configured": "El servicio de IA no está configurado.",
    "ai_invalid_output": "La API de IA no devolvió una salida válida o la solicitud fue bloqueada.",
    "ai_blocked": "La imagen fue bloqueada por los filtros de seguridad. Prueba con otra foto.",
    "identify_failed": "Ocurrió un error al identificar los alimentos.",
    "no_items_for_recipe": "Primero identifica algunos alimentos para sugerir recetas.",
    "recipes_failed": "No se pudieron sugerir recetas.",
    "missing_ingredients_failed": "No se pudieron obtener los ingredientes faltantes.",
    "recipe_image_failed": "No se pudo generar la imagen de la receta.",

    # Boleta
    "boleta_online_tag": "Compras inteligentes en línea",
    "boleta_pickup_tag": "Recojo en tienda - Paga al recoger",
    "boleta_order_title": "Comprobante de pedido",
    "boleta_order_num_label": "N°",
    "boleta_status_pending_pay": "PENDIENTE DE PAGO",
    "boleta_status_not_paid": "NO PAGADO",
    "boleta_date_label": "Fecha",
    "boleta_time_label": "Hora",
    "boleta_client_details_title": "Datos del cliente",
    "boleta_client_name_label": "Nombre",
    "boleta_client_email_label": "Correo",
    "boleta_client_phone_label": "Teléfono",
    "boleta_client_name_placeholder": "Cliente",
    "boleta_client_email_placeholder": "No registrado",
    "boleta_client_phone_placeholder": "No registrado",
    "boleta_pickup_location_title": "Lugar de recojo",
    "boleta_store_label": "Tienda",
    "boleta_address_label": "Dirección",
    "boleta_pickup_date_label": "Recojo",
    "boleta_location_not_available": "Ubicación no disponible",
    "boleta_pickup_address_placeholder": "Dirección no disponible",
    "boleta_items_title": "Productos del pedido",
    "boleta_items_continued": "Productos del pedido (continuación)",
    "boleta_qty_header": "Cant.",
    "boleta_desc_header": "Descripción",
    "boleta_unit_price_header": "P. Unit.",
    "boleta_total_to_pay_label": "Total a pagar",
    "boleta_footer_thanks": "¡Gracias por comprar en Wanka's!",
    "boleta_footer_disclaimer": "Este documento no es un comprobante de pago. Presenta este pedido al recoger y pagar en tienda.",
}


EN = {
    "currency_symbol": "S/ ",
    "subtotal": "Subtotal",
    "total": "Total",
    "not_available": "N/A",

    "products_fetch_failed": "Products could not be loaded.",
    "product_not_found": "Product not found.",
    "locations_fetch_failed": "Stores could not be loaded.",
    "slots_for_tomorrow": "No slots left for today. Showing slots for tomorrow.",
    "slots_for_monday": "We do not offer pickups on weekends. Showing slots for Monday.",

    "name_too_short": "Name must be at least 2 characters long.",
    "invalid_email": "Please enter a valid email address.",
    "email_provider_not_allowed": "Please use a valid email provider (e.g. Gmail, Outlook).",
    "password_too_short": "Password must be at least 6 characters long.",
    "password_required": "Password is required.",
    "email_taken": "An account with this email already exists.",
    "register_failed": "The account could not be created. Please try again.",
    "invalid_credentials": "Invalid email or password.",
    "legacy_account": "This legacy account has no password. Contact support or create a new account.",
    "profile_not_found": "Profile not found.",
    "profile_update_failed": "The profile could not be updated.",
    "db_unavailable": "The database service is unavailable.",

    "empty_cart": "Your cart is empty.",
    "invalid_time_slot": "The selected time slot is not valid.",
    "pickup_in_past": "The selected pickup time has already passed. Please choose another slot.",
    "pickup_date_unavailable": "The selected pickup date is not available. Please choose one of the offered slots.",
    "location_not_found": "The selected store does not exist.",
    "location_check_failed": "The pickup store could not be verified.",
    "stock_check_failed": "Product stock could not be verified.",
    "insufficient_stock": "Not enough stock for '{name}'. Only {stock} left.",
    "stock_update_failed": "A product's stock could not be updated. The order was not created. Please try again.",
    "order_create_failed": "The order could not be created. Stock changes were reverted. Please check your cart and try again.",
    "order_items_failed": "The order details could not be saved. The order was cancelled. Please try again.",
    "orders_fetch_failed": "Your orders could not be loaded.",
    "order_not_found": "The order does not exist or you are not allowed to see it.",
    "order_not_cancellable": "Only orders in 'pending' status can be cancelled.",
    "order_cancel_lookup_failed": "The order to cancel could not be found.",
    "order_cancel_status_failed": "Stock was restored but the order status could not be updated. Please contact support.",
    "order_placed": "Order placed! See you at the store.",
    "order_cancelled": "Your order was cancelled and stock was restored.",
    "boleta_generation_failed": "The receipt could not be generated.",
    "status_pending": "Pending",
    "status_cancelled": "Cancelled",
    "status_completed": "Completed",
    "status_ready": "Ready for pickup",

    "no_files": "Upload at least one image.",
    "max_files": "You can upload up to {max_files} images.",
    "file_too_large": "Each image must be smaller than {max_size} MB.",
    "invalid_file_type": "Only image files are accepted.",
    "ai_not_configured": "The AI service is not configured.",
    "ai_invalid_output": "The AI API did not return a valid output or the request was blocked.",
    "ai_blocked": "The image was blocked by safety filters. Try another photo.",
    "identify_failed": "An error occurred while identifying the food items.",
    "no_items_for_recipe": "Identify some food items first to get recipe suggestions.",
    "recipes_failed": "Recipes could not be suggested.",
    "missing_ingredients_failed": "Missing ingredients could not be retrieved.",
    "recipe_image_failed": "The recipe image could not be generated.",

    "boleta_online_tag": "Smart online shopping",
    "boleta_pickup_tag": "Store pickup - Pay on pickup",
    "boleta_order_title": "Order receipt",
    "boleta_order_num_label": "No.",
    "boleta_status_pending_pay": "PAYMENT PENDING",
    "boleta_status_not_paid": "NOT PAID",
    "boleta_date_label": "Date",
    "boleta_time_label": "Time",
    "boleta_client_details_title": "Customer details",
    "boleta_client_name_label": "Name",
    "boleta_client_email_label": "Email",
    "boleta_client_phone_label": "Phone",
    "boleta_client_name_placeholder": "Customer",
    "boleta_client_email_placeholder": "Not provided",
    "boleta_client_phone_placeholder": "Not provided",
    "boleta_pickup_location_title": "Pickup location",
    "boleta_store_label": "Store",
    "boleta_address_label": "Address",
    "boleta_pickup_date_label": "Pickup",
    "boleta_location_not_available": "Location not available",
    "boleta_pickup_address_placeholder": "Address not available",
    "boleta_items_title": "Order items",
    "boleta_items_continued": "Order items (continued)",
    "boleta_qty_header": "Qty",
    "boleta_desc_header": "Description",
    "boleta_unit_price_header": "Unit price",
    "boleta_total_to_pay_label": "Total to pay",
    "boleta_footer_thanks": "Thank you for shopping at Wanka's!",
    "boleta_footer_disclaimer": "This document is not a payment receipt. Show this order when you pick up and pay in store.",
}


TRANSLATIONS = {"es": ES, "en": EN}


def resolve_locale(value: Optional[str]) -> str:
    """
    Pick a supported locale from a query value or an Accept-Language header.

    "en-US,en;q=0.9" -> "en", "fr" -> default locale.
    """
    if value:
        for part in value.split(","):
            tag = part.split(";")[0].strip().lower()
            base = tag.split("-")[0]
            if base in SUPPORTED_LOCALES:
                return base
    default = settings.DEFAULT_LOCALE
    return default if default in SUPPORTED_LOCALES else "es"


def translate(key: str, locale: Optional[str] = None, **params) -> str:
    """Return the message for key in locale, falling back to Spanish and then to the key"""
    messages = TRANSLATIONS.get(locale or resolve_locale(None), ES)
    text = messages.get(key) or ES.get(key) or key
    for name, value in params.items():
        text = text.replace("{" + name + "}", str(value))
    return text


def get_locale(request: Request) -> str:
    """FastAPI dependency: ?locale= wins over Accept-Language"""
    return resolve_locale(request.query_params.get("locale") or request.headers.get("Accept-Language"))
