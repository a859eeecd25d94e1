from greenkart_e2e.actions.cart_actions import PRODUCT, PRODUCTS, SEARCH_INPUT
from greenkart_e2e.specs import Spec, it

BERRIES = ("Strawberry", "Raspberry")


class CheckoutSpec(Spec):
    describe = "navigate to Website, add items and checkout"

    @it("Navigates to Website")
    async def navigates_to_website(self):
        a = self.actions

        await a.visit(self.base_url)
        await a.type_text(SEARCH_INPUT, "be")
        await a.wait(2000)

        a.alias("itemList", a.find(PRODUCTS, PRODUCT))
        await self.cart.add_matching_products("@itemList", BERRIES)

        await self.cart.open_cart()
        await self.cart.log_cart_presence(BERRIES)

        await a.click(a.contains("PROCEED TO CHECKOUT", selector="button"))
        await a.click(a.contains("Place Order", selector="button"))
        await a.wait(2000)

        await a.select("select", "India")
        await a.click(".chkAgree")
        await a.click("button")
