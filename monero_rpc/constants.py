"""
Monero RPC Client Constants

This module consolidates the protocol constants and environment configuration
used throughout the client. Constants are organized by category for easy
reference and maintenance.
"""
import ast
import re
from decimal import Decimal
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

CLIENT_DEFAULTS = {
    'MONERO_DAEMON_URL':               'http://127.0.0.1:18081',
    'MONERO_WALLET_URL':               'http://127.0.0.1:18083',
}

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_FILE':                        '',
    'LOG_INCLUDE_RESPONSE_CONTENT':    'False',
    'LOG_INCLUDE_REQUEST_CONTENT':     'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_MAX_BODY_LENGTH = 2048  # Request/response bodies longer than this are truncated in logs
LOG_BACKUP_COUNT = 5


# ==================================================================================
# JSON-RPC PROTOCOL CONSTANTS
# ==================================================================================
JSON_RPC_VERSION = '2.0'
JSON_RPC_ENDPOINT = '/json_rpc'

# Success token of the node's {"status": ...} result envelope
STATUS_OK = 'OK'


# ==================================================================================
# WIRE VALUE LIMITS
# ==================================================================================
HASH_LENGTH = 32  # Block hashes, transaction ids and tx keys
PRIVATE_KEY_LENGTH = 32
SHORT_PAYMENT_ID_LENGTH = 8
LONG_PAYMENT_ID_LENGTH = 32  # Deprecated, still reported for old transfers

U64_MAX = 2 ** 64 - 1
U32_MAX = 2 ** 32 - 1


# ==================================================================================
# MONETARY UNITS
# ==================================================================================
ATOMIC_UNITS_PER_XMR = Decimal(10) ** 12  # 1 XMR = 10^12 piconero


# ==================================================================================
# VALIDATION PATTERNS
# ==================================================================================
# Lowercase or uppercase hex, matched with fullmatch; even length is checked separately
VALID_HEX_PATTERN = re.compile(r'[0-9a-fA-F]*')


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    def __hash__(self):
        return hash(bool(self))


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = CLIENT_DEFAULTS | LOGGER_DEFAULTS
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        return ast.literal_eval(s.title())
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value_raw, default_val)
