from .product import ProductCategory, Product
