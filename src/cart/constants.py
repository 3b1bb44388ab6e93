DEFAULT_STORAGE_KEY = "@GoMarketplace:cart-items"
