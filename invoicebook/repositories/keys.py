"""Storage keys, one whole document each. The configured prefix is prepended."""

BUSINESS = "business"
USERS = "app_users"
INVOICES = "invoices"
CUSTOMERS = "customers"
PRODUCTS = "products"
SESSION = "auth"
WALLET_TRANSACTIONS = "wallet_data_v2"
WALLET_PROFILE = "wallet_profile_v2"
