"""City Roots storefront: cart, checkout and order relay."""

__version__ = "1.0.0"
