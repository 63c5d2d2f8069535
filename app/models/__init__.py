from app.models.product import Product, ProductOptionValue
from app.models.cart import Cart, CartItem

# add ALL models here
