APP_NAME = "Retail Ledger"

DATA_DIR = "data"
DB_FILE_NAME = "ledger.db"
LOG_DIR_NAME = "logs"

TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "1.0.0"

# Prices are tax-inclusive; the combined rate is split equally into CGST/SGST.
GST_RATE = 0.05
CGST_PERCENT = 2.5
SGST_PERCENT = 2.5

# Balances below this magnitude are float drift, not real credit.
CREDIT_EPSILON = 0.001

TRANSACTION_SALE = "Sale"
TRANSACTION_EXCHANGE = "Exchange"
TRANSACTION_RETURN = "Return"
TRANSACTION_TYPES = (TRANSACTION_SALE, TRANSACTION_EXCHANGE, TRANSACTION_RETURN)

PAYMENT_CASH = "Cash"
PAYMENT_CARD = "Card"
PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_CARD)

DEFAULT_DB_TIMEOUT_SECONDS = 5.0
