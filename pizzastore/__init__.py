"""
Pizza store order management: users, menu catalog, stores and orders.
"""
__version__ = "1.0.0"
