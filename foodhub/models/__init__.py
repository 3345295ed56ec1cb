from foodhub.models.vendor import Vendor
from foodhub.models.merchant import Merchant, OperationalStatus
from foodhub.models.product import Product
from foodhub.models.merchant_product import MerchantProduct
from foodhub.models.customer import Customer
from foodhub.models.cart_item import CartItem, ProductSize
from foodhub.models.account import Account, AccountRole

__all__ = [
    "Vendor",
    "Merchant",
    "OperationalStatus",
    "Product",
    "MerchantProduct",
    "Customer",
    "CartItem",
    "ProductSize",
    "Account",
    "AccountRole"
]
