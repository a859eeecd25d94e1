import logging
from typing import Iterable, List, Optional, Sequence

from playwright.async_api import Locator

from greenkart_e2e.actions.action_handler import ActionHandler, Target

SEARCH_INPUT = ".search-keyword"
PRODUCTS = ".products"
PRODUCT = ".product"
PRODUCT_NAME = "h4.product-name"
PRODUCT_BUTTON = "button"
CART_ICON = ".cart-icon > img"
CART_PRODUCT_NAME = "p.product-name:visible"


def first_match(text: str, needles: Iterable[str]) -> Optional[str]:
    """Return the first needle contained in ``text`` (case-sensitive), if any."""
    for needle in needles:
        if needle and needle in text:
            return needle
    return None


class CartActions:
    """Product list and cart operations on the GreenKart page."""

    def __init__(self, handler: ActionHandler):
        self.handler = handler

    async def add_matching_products(self, products: Target, names: Sequence[str]) -> List[str]:
        """Click the button of every product card whose name contains one of
        ``names``.

        Args:
            products: Product cards, a selector, alias or Locator.
            names: Substrings to look for in each card's product name.

        Returns:
            Names of the products that were clicked, in page order. Empty when
            nothing matched.
        """
        clicked: List[str] = []
        if not names:
            return clicked

        async def add_if_matching(card: Locator, index: int, cards: List[Locator]):
            product_name = await card.locator(PRODUCT_NAME).text_content() or ""
            if first_match(product_name, names):
                await self.handler.click(card.locator(PRODUCT_BUTTON))
                clicked.append(product_name.strip())

        await self.handler.each(products, add_if_matching)
        logging.info(f"Added {len(clicked)} matching product(s): {clicked}")
        return clicked

    async def open_cart(self):
        await self.handler.click(CART_ICON)

    async def cart_product_names(self) -> List[str]:
        names: List[str] = []

        async def collect(row: Locator, index: int, rows: List[Locator]):
            names.append((await row.text_content() or "").strip())

        await self.handler.each(CART_PRODUCT_NAME, collect)
        return names

    async def log_cart_presence(self, names: Sequence[str]) -> List[str]:
        """Log every expected product found in the cart preview.

        Each cart row is reported once, for the first of ``names`` it contains.
        """
        present: List[str] = []
        for product_name in await self.cart_product_names():
            match = first_match(product_name, names)
            if match:
                await self.handler.log(f"{match} is present in the cart")
                present.append(match)
        return present
