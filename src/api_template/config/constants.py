from pathlib import Path

# =============================================================================
#   Project-level path constants
# =============================================================================
# __file__ is src/api_template/config/constants.py
# parents[3] → project root
PROJECT_ROOT: Path = Path(__file__).parents[3]
CONFIG_DIR:   Path = PROJECT_ROOT / "config"
