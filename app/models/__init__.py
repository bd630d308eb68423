from app.models.user import User
from app.models.catalog import Brand, Color, Size
from app.models.category import Category
from app.models.product import Product, Variant, ProductImage, ProductDetails
from app.models.cart import CartItem, BuyNowItem
from app.models.wishlist import Wishlist
from app.models.coupon import Coupon, AppliedCoupon
from app.models.address import Address
from app.models.order import Order
from app.models.order_item import OrderItem
from app.models.payment import Payment

# add ALL models here
