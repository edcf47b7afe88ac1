"""Vulture whitelist: references that appear unused but are called dynamically.

Usage:
    vulture equityhub tests vulture_whitelist.py
"""

# ── Entry points (console_scripts, not imported) ──
from equityhub.cli import main as cli_main  # noqa: F401
from equityhub.main import main as sidecar_main  # noqa: F401

# ── Pytest fixtures (injected by pytest, never called directly) ──
from tests.conftest import sample_holdings  # noqa: F401
from tests.conftest import sector_holdings  # noqa: F401
from tests.conftest import fake_backend  # noqa: F401

# ── Dataclass lifecycle hooks (called by @dataclass, not user code) ──
from equityhub.config import Settings  # noqa: F401
from equityhub.portfolio.models import EquityHolding  # noqa: F401

EquityHolding.__post_init__  # noqa: B018
Settings.__post_init__  # noqa: B018
