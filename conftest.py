import os
import sys
from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

REPO_ROOT = Path(__file__).resolve().parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# The autouse config fixture below is function-scoped; property tests never
# depend on its state between examples.
_SUPPRESS = (HealthCheck.too_slow, HealthCheck.function_scoped_fixture)
settings.register_profile("dev", max_examples=100, deadline=None, suppress_health_check=_SUPPRESS)
settings.register_profile(
    "ci", max_examples=200, deadline=None, derandomize=True, suppress_health_check=_SUPPRESS
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE") or ("ci" if os.getenv("CI") else "dev"))

from ttoken import config as tconfig  # noqa: E402
from ttoken.auth.signatures import Ed25519Signer  # noqa: E402
from ttoken.config import TokenConfig, TokenMetadata  # noqa: E402
from ttoken.contract import TokenContract  # noqa: E402

GENESIS_SUPPLY = 100


def make_signer(i: int) -> Ed25519Signer:
    """Deterministic Ed25519 signer from a one-byte seed pattern."""
    return Ed25519Signer.from_seed(bytes([i]) * 32)


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Keep TTOKEN_* from the developer's shell out of tests and reset the config cache."""
    for var in (
        "TTOKEN_NAME",
        "TTOKEN_SYMBOL",
        "TTOKEN_DECIMALS",
        "TTOKEN_SIG_SCHEME",
        "TTOKEN_DOMAIN",
        "TTOKEN_LOG_LEVEL",
        "TTOKEN_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    tconfig.get_config.cache_clear()
    yield
    tconfig.get_config.cache_clear()


@pytest.fixture
def alice() -> Ed25519Signer:
    return make_signer(1)


@pytest.fixture
def bob() -> Ed25519Signer:
    return make_signer(2)


@pytest.fixture
def carol() -> Ed25519Signer:
    return make_signer(3)


@pytest.fixture
def signer_factory():
    return make_signer


@pytest.fixture
def cfg() -> TokenConfig:
    return TokenConfig(metadata=TokenMetadata())


@pytest.fixture
def contract(alice, cfg) -> TokenContract:
    """Fresh contract with the whole supply (100) owned by alice."""
    return TokenContract.deploy(alice.public_key, GENESIS_SUPPLY, config=cfg)
