"""
Shop backend: catalog, cart, orders and payments
"""
