"""
Import source registry and wizard step constants.

Source ids are assigned by the back-office API (GET /import/sources).
"""

# =============================================================================
# SOURCE IDS
# =============================================================================

# Supplier web catalog, searched page by page
RAINBOW_SILVER = "rainbow-silver"

# Supplier PDF invoice, parsed server-side
RAINBOW_INVOICE = "rainbow-invoice"

# Order confirmation email (.eml), parsed server-side
PANBUBU_EMAIL = "panbubu-email"

# Supplier Excel sheet, parsed server-side
EXCEL_SUPPLIER = "excel-supplier"

# Wholesaler PDF invoice, parsed server-side
MAYORISTA_PLATA = "mayorista-plata"

# Listed by the API but not selectable yet
CSV = "csv"

SEARCH_SOURCES = frozenset({RAINBOW_SILVER})

FILE_SOURCES = frozenset({
    RAINBOW_INVOICE,
    PANBUBU_EMAIL,
    EXCEL_SUPPLIER,
    MAYORISTA_PLATA,
})

DISABLED_SOURCES = frozenset({CSV})

# Sources whose uploaded file is forwarded again on execute
FILE_FORWARDED_ON_EXECUTE = frozenset({RAINBOW_INVOICE, EXCEL_SUPPLIER})


# =============================================================================
# WIZARD STEPS
# =============================================================================

STEP_SOURCE = 0
STEP_LOAD = 1  # search or upload
STEP_CONFIGURE = 2  # select rows and set prices
STEP_CONFIRM = 3

FIRST_STEP = STEP_SOURCE
LAST_STEP = STEP_CONFIRM

# Fallback prefix for generated codes when no supplier is chosen
DEFAULT_SUPPLIER_PREFIX = "AT"

# Where the client lands after a successful import
PRODUCTS_PATH = "/products"
