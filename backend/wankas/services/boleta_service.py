"""
Boleta (order receipt) PDF

Draws the A4 receipt a customer shows at pickup: store header, order
number and pending-payment badge, customer and pickup details, the items
table and totals, a diagonal "not paid" stamp and the footer.

Author: Wanka's
Date: 2025-06-06
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

import fitz  # PyMuPDF

from wankas.core.config import settings
from wankas.core.i18n import translate
from wankas.domain.order import EnrichedOrder
from wankas.domain.user import User
from wankas.services.pickup_service import store_timezone

logger = logging.getLogger(__name__)

# A4 in points
PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN = 40

FONT = "helv"
FONT_BOLD = "hebo"

PRIMARY_COLOR = (0.831, 0.675, 0.051)    # #D4AC0D
TEXT_COLOR = (0.2, 0.2, 0.2)
LIGHT_TEXT_COLOR = (0.333, 0.333, 0.333)
BORDER_COLOR = (0.878, 0.878, 0.878)
LIGHT_BG_COLOR = (0.976, 0.976, 0.976)
BADGE_BG_COLOR = (1.0, 0.953, 0.804)     # #FFF3CD
BADGE_TEXT_COLOR = (0.522, 0.392, 0.016)  # #856404
STAMP_COLOR = (1.0, 0.85, 0.85)

MIN_TABLE_ROWS = 3
ROW_HEIGHT = 22
STAMP_ANGLE = 30

FOOTER_TOP = PAGE_HEIGHT - MARGIN - 50
# Rows and totals stay above this line
TABLE_BOTTOM = FOOTER_TOP - 10
TOTALS_HEIGHT = 60


def boleta_filename(order: EnrichedOrder) -> str:
    return f"boleta-orden-{order.short_id}.pdf"


def format_money(amount, locale: str) -> str:
    value = Decimal(str(amount or 0)).quantize(Decimal("0.01"))
    return f"{translate('currency_symbol', locale)}{value}"


def format_datetime(value: Optional[datetime], pattern: str, locale: str) -> str:
    """Format in store time; 'N/A' when missing"""
    if value is None:
        return translate("not_available", locale)
    if value.tzinfo is not None:
        value = value.astimezone(store_timezone())
    return value.strftime(pattern)


class _Canvas:
    """Small helpers over a fitz.Page"""

    def __init__(self, page: fitz.Page):
        self.page = page

    def text(self, x, y, text, size=10, bold=False, color=TEXT_COLOR):
        self.page.insert_text(
            fitz.Point(x, y), text,
            fontsize=size, fontname=FONT_BOLD if bold else FONT, color=color
        )

    def text_right(self, right_x, y, text, size=10, bold=False, color=TEXT_COLOR):
        width = fitz.get_text_length(text, fontname=FONT_BOLD if bold else FONT, fontsize=size)
        self.text(right_x - width, y, text, size, bold, color)

    def text_center(self, center_x, y, text, size=10, bold=False, color=TEXT_COLOR):
        width = fitz.get_text_length(text, fontname=FONT_BOLD if bold else FONT, fontsize=size)
        self.text(center_x - width / 2, y, text, size, bold, color)

    def line(self, x0, y0, x1, y1, color=BORDER_COLOR, width=1):
        self.page.draw_line(fitz.Point(x0, y0), fitz.Point(x1, y1), color=color, width=width)

    def box(self, rect, color=BORDER_COLOR, fill=None, width=1):
        self.page.draw_rect(rect, color=color, fill=fill, width=width)


def _fit(text: str, max_width: float, size: float) -> str:
    """Truncate with '...' so the text fits the column"""
    if fitz.get_text_length(text, fontname=FONT, fontsize=size) <= max_width:
        return text
    while text and fitz.get_text_length(text + "...", fontname=FONT, fontsize=size) > max_width:
        text = text[:-1]
    return text + "..."


def _draw_stamp(page: fitz.Page, stamp: str):
    """Diagonal stamp across the middle of the page, drawn before the content"""
    stamp_size = 64
    stamp_width = fitz.get_text_length(stamp, fontname=FONT_BOLD, fontsize=stamp_size)
    center = fitz.Point(PAGE_WIDTH / 2, PAGE_HEIGHT / 2)
    page.insert_text(
        fitz.Point(center.x - stamp_width / 2, center.y + stamp_size / 3), stamp,
        fontsize=stamp_size, fontname=FONT_BOLD, color=STAMP_COLOR,
        morph=(center, fitz.Matrix(STAMP_ANGLE))
    )


def _draw_footer(page: fitz.Page, text: str):
    c = _Canvas(page)
    c.line(MARGIN, FOOTER_TOP, PAGE_WIDTH - MARGIN, FOOTER_TOP)
    page.insert_textbox(
        fitz.Rect(MARGIN, FOOTER_TOP + 10, PAGE_WIDTH - MARGIN, PAGE_HEIGHT - MARGIN),
        text, fontsize=8, fontname=FONT, color=LIGHT_TEXT_COLOR, align=fitz.TEXT_ALIGN_CENTER
    )


def render_boleta(order: EnrichedOrder, user: Optional[User] = None, locale: str = "es") -> bytes:
    """
    Render the boleta of an order

    Items that do not fit above the footer continue on a new page with
    the table header repeated; the totals follow the last item.

    Args:
        order: Order with items and pickup store
        user: Customer shown on the receipt (placeholders when missing)
        locale: Label language

    Returns:
        PDF bytes
    """
    t = lambda key: translate(key, locale)  # noqa: E731

    stamp = t("boleta_status_not_paid").upper()
    right = PAGE_WIDTH - MARGIN

    with fitz.open() as doc:
        page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        _draw_stamp(page, stamp)
        pages = [page]
        c = _Canvas(page)

        # Header: store identity
        y = MARGIN + 24
        c.text(MARGIN, y, settings.STORE_NAME.upper(), size=22, bold=True, color=PRIMARY_COLOR)
        y += 22
        for tag in (t("boleta_online_tag"), *t("boleta_pickup_tag").split(" - ")):
            c.text(MARGIN, y, tag, size=9, bold=True, color=PRIMARY_COLOR)
            y += 13
        y += 4
        for line in (f"RUC: {settings.STORE_RUC}", f"Tel: {settings.STORE_PHONE}", f"Email: {settings.STORE_EMAIL}"):
            c.text(MARGIN, y, line, size=8, color=LIGHT_TEXT_COLOR)
            y += 11

        # Header: order box
        order_date = order.order_date or order.created_at
        box = fitz.Rect(right - 210, MARGIN, right, MARGIN + 110)
        c.box(box, fill=LIGHT_BG_COLOR)
        box_right = box.x1 - 12
        c.text_right(box_right, box.y0 + 20, t("boleta_order_title").upper(), size=11, bold=True)
        c.text_right(box_right, box.y0 + 40, f"{t('boleta_order_num_label')} {order.order_number}",
                     size=13, bold=True, color=PRIMARY_COLOR)

        badge_text = t("boleta_status_pending_pay")
        badge_width = fitz.get_text_length(badge_text, fontname=FONT_BOLD, fontsize=8) + 16
        badge = fitz.Rect(box_right - badge_width, box.y0 + 50, box_right, box.y0 + 64)
        c.box(badge, color=BADGE_BG_COLOR, fill=BADGE_BG_COLOR)
        c.text_right(box_right - 8, box.y0 + 60, badge_text, size=8, bold=True, color=BADGE_TEXT_COLOR)

        c.text_right(box_right, box.y0 + 84,
                     f"{t('boleta_date_label')}: {format_datetime(order_date, '%d/%m/%Y', locale)}",
                     size=9, color=LIGHT_TEXT_COLOR)
        c.text_right(box_right, box.y0 + 98,
                     f"{t('boleta_time_label')}: {format_datetime(order_date, '%H:%M', locale)}",
                     size=9, color=LIGHT_TEXT_COLOR)

        y = max(y, box.y1) + 14
        c.line(MARGIN, y, right, y)
        y += 28

        def section(title: str, y: float) -> float:
            c.text(MARGIN, y, title.upper(), size=12, bold=True)
            c.line(MARGIN, y + 6, right, y + 6, color=PRIMARY_COLOR, width=1.5)
            return y + 24

        def detail(label: str, value: str, y: float) -> float:
            c.text(MARGIN, y, f"{label}:", size=10, bold=True)
            c.text(MARGIN + 110, y, _fit(value, right - MARGIN - 110, 10), size=10)
            return y + 16

        def next_page() -> float:
            """Start a new page and return the first baseline"""
            new_page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            _draw_stamp(new_page, stamp)
            pages.append(new_page)
            c.page = new_page
            return MARGIN + 24

        # Customer
        y = section(t("boleta_client_details_title"), y)
        y = detail(t("boleta_client_name_label"),
                   (user.name if user else None) or t("boleta_client_name_placeholder"), y)
        y = detail(t("boleta_client_email_label"),
                   (user.email if user else None) or t("boleta_client_email_placeholder"), y)
        y = detail(t("boleta_client_phone_label"),
                   (user.phone_number if user else None) or t("boleta_client_phone_placeholder"), y)
        y += 14

        # Pickup
        y = section(t("boleta_pickup_location_title"), y)
        y = detail(t("boleta_store_label"), order.location_name or t("boleta_location_not_available"), y)
        y = detail(t("boleta_address_label"), order.location_address or t("boleta_pickup_address_placeholder"), y)
        y = detail(t("boleta_pickup_date_label"), format_datetime(order.pickup_date, "%d/%m/%Y %H:%M", locale), y)
        y += 14

        # Items
        qty_center = MARGIN + 25
        desc_x = MARGIN + 60
        unit_right = right - 100
        total_right = right - 6

        def table_header(title: str, y: float) -> float:
            y = section(title, y)
            header = fitz.Rect(MARGIN, y - 14, right, y + 8)
            c.box(header, color=LIGHT_BG_COLOR, fill=LIGHT_BG_COLOR)
            c.text_center(qty_center, y, t("boleta_qty_header").upper(), size=9, bold=True)
            c.text(desc_x, y, t("boleta_desc_header").upper(), size=9, bold=True)
            c.text_right(unit_right, y, t("boleta_unit_price_header").upper(), size=9, bold=True)
            c.text_right(total_right, y, t("total").upper(), size=9, bold=True)
            c.line(MARGIN, y + 8, right, y + 8, color=TEXT_COLOR, width=2)
            return y + 8

        y = table_header(t("boleta_items_title"), y)

        rows = list(order.items) + [None] * max(0, MIN_TABLE_ROWS - len(order.items))
        for item in rows:
            if y + ROW_HEIGHT > TABLE_BOTTOM:
                y = table_header(t("boleta_items_continued"), next_page())
            y += ROW_HEIGHT
            if item is not None:
                c.text_center(qty_center, y - 7, str(item.quantity), size=9)
                c.text(desc_x, y - 7, _fit(item.product_name or t("not_available"), unit_right - desc_x - 80, 9),
                       size=9)
                c.text_right(unit_right, y - 7, format_money(item.price_at_purchase, locale), size=9)
                c.text_right(total_right, y - 7, format_money(item.line_total, locale), size=9, bold=True)
            c.line(MARGIN, y, right, y)

        # Totals
        if y + TOTALS_HEIGHT > TABLE_BOTTOM:
            y = next_page()
        y += 24
        totals_left = right - 230
        c.text(totals_left, y, f"{t('subtotal')}:", size=10)
        c.text_right(right, y, format_money(order.total_price, locale), size=10)
        y += 12
        c.line(totals_left, y, right, y, color=TEXT_COLOR, width=1.5)
        y += 18
        c.text(totals_left, y, f"{t('boleta_total_to_pay_label')}:", size=13, bold=True, color=PRIMARY_COLOR)
        c.text_right(right, y, format_money(order.total_price, locale), size=13, bold=True, color=PRIMARY_COLOR)

        footer = f"{t('boleta_footer_thanks')}\n{t('boleta_footer_disclaimer')}"
        for each_page in pages:
            _draw_footer(each_page, footer)

        pdf_bytes = doc.tobytes()
    logger.info(f"Rendered boleta for order {order.id} ({len(pages)} pages, {len(pdf_bytes)} bytes)")
    return pdf_bytes
