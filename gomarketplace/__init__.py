"""
GoMarketplace Cart

Shopping cart state for the marketplace client:
- cart: models, store, provider and storage backends
- db: Upstash Redis client and storage factory
- config: environment settings
"""

__version__ = "1.0.0"
