"""Inventory configuration constants and environment parsing."""
import logging
import os

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in ('0', 'false', 'no', 'off')


# ============================================================================
# STORAGE
# ============================================================================

INVENTORY_DATA_DIR = os.environ.get('INVENTORY_DATA_DIR', './data')
INVENTORY_STORAGE_KEY = os.environ.get('INVENTORY_STORAGE_KEY', 'simpleInventory')
INVENTORY_SEED_SAMPLE = _env_flag('INVENTORY_SEED_SAMPLE', True)

# ============================================================================
# ANALYTICS DEFAULTS
# ============================================================================

LOW_STOCK_THRESHOLD = _env_int('LOW_STOCK_THRESHOLD', 5)
DISTRIBUTION_TOP_N = _env_int('DISTRIBUTION_TOP_N', 10)
DISTRIBUTION_BAR_WIDTH = _env_int('DISTRIBUTION_BAR_WIDTH', 30)
DISTRIBUTION_NAME_WIDTH = 20

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

# ============================================================================
# PATH HELPERS
# ============================================================================

def storage_path(data_dir: str = None, storage_key: str = None) -> str:
    """Path of the JSON file holding the inventory list."""
    data_dir = data_dir or INVENTORY_DATA_DIR
    storage_key = storage_key or INVENTORY_STORAGE_KEY
    return os.path.join(data_dir, f'{storage_key}.json')


def ensure_directories(path: str = None) -> None:
    """Create the directory that will hold the inventory file."""
    directory = os.path.dirname(path) if path else INVENTORY_DATA_DIR
    if directory:
        os.makedirs(directory, exist_ok=True)
