"""
ttoken.config — static configuration for a token deployment.

This module centralizes:
  • Token metadata (name, symbol, decimals) served by the read-only queries
  • The signature scheme used to verify signed calls
  • The signing domain mixed into every signed message
  • Logging defaults for the CLI

Configuration may be provided via environment variables. Defaults match the
reference deployment so a local run works out of the box.

Environment variables (all optional):
  TTOKEN_NAME        -> token display name (default: "Transparent Fungible Token Sample")
  TTOKEN_SYMBOL      -> ticker symbol (default: "TFTS")
  TTOKEN_DECIMALS    -> integer 0..255 (default: 18)
  TTOKEN_SIG_SCHEME  -> registered signature scheme (default: "ed25519")
  TTOKEN_DOMAIN      -> signing domain; "0x..." is hex, anything else UTF-8 (default: empty)
  TTOKEN_LOG_LEVEL   -> DEBUG/INFO/WARNING/ERROR (default: INFO)
  TTOKEN_LOG_FORMAT  -> json/text (default: auto)

Programmatic usage:
    from ttoken.config import get_config
    cfg = get_config()
    cfg.metadata.symbol
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

from .auth.signatures import known_schemes
from .encoding.canonical import MAX_DOMAIN_LEN
from .types.uint import U8_MAX

DEFAULT_NAME = "Transparent Fungible Token Sample"
DEFAULT_SYMBOL = "TFTS"
DEFAULT_DECIMALS = 18


# ----------------------------- helpers -------------------------------------


def _parse_domain(value: Union[str, bytes, None]) -> bytes:
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    s = value.strip()
    if s[:2] in ("0x", "0X"):
        try:
            return bytes.fromhex(s[2:])
        except ValueError as e:
            raise ValueError(f"invalid hex domain: {value!r}") from e
    return s.encode("utf-8")


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class TokenMetadata:
    name: str = DEFAULT_NAME
    symbol: str = DEFAULT_SYMBOL
    decimals: int = DEFAULT_DECIMALS


@dataclass(frozen=True)
class TokenConfig:
    metadata: TokenMetadata
    signature_scheme: str = "ed25519"
    domain: bytes = b""
    log_level: str = "INFO"
    log_format: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.metadata.name,
            "symbol": self.metadata.symbol,
            "decimals": self.metadata.decimals,
            "signature_scheme": self.signature_scheme,
            "domain": "0x" + self.domain.hex(),
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


# ------------------------------ loader --------------------------------------


def _validate(cfg: TokenConfig) -> TokenConfig:
    md = cfg.metadata
    if not md.name.strip():
        raise ValueError("token name must not be empty")
    if not md.symbol.strip():
        raise ValueError("token symbol must not be empty")
    if not (0 <= md.decimals <= U8_MAX):
        raise ValueError("decimals must fit in a u8 (0..255)")
    if cfg.signature_scheme not in known_schemes():
        raise ValueError(
            f"unknown signature scheme {cfg.signature_scheme!r}; known: {', '.join(known_schemes())}"
        )
    if len(cfg.domain) > MAX_DOMAIN_LEN:
        raise ValueError(f"domain must be at most {MAX_DOMAIN_LEN} bytes")
    if cfg.log_format not in (None, "json", "text"):
        raise ValueError("log_format must be 'json' or 'text'")
    return cfg


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int, bytes]]] = None,
) -> TokenConfig:
    """
    Build a TokenConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys: 'name', 'symbol', 'decimals',
          'signature_scheme', 'domain', 'log_level', 'log_format'
    """
    env = os.environ if env is None else env
    o = dict(overrides or {})

    try:
        decimals = int(o.get("decimals", env.get("TTOKEN_DECIMALS", DEFAULT_DECIMALS)))
    except ValueError as e:
        raise ValueError(f"decimals must be an integer: {e}") from e

    metadata = TokenMetadata(
        name=str(o.get("name", env.get("TTOKEN_NAME", DEFAULT_NAME))),
        symbol=str(o.get("symbol", env.get("TTOKEN_SYMBOL", DEFAULT_SYMBOL))),
        decimals=decimals,
    )
    log_format = o.get("log_format", env.get("TTOKEN_LOG_FORMAT"))
    cfg = TokenConfig(
        metadata=metadata,
        signature_scheme=str(o.get("signature_scheme", env.get("TTOKEN_SIG_SCHEME", "ed25519")))
        .strip()
        .lower(),
        domain=_parse_domain(o.get("domain", env.get("TTOKEN_DOMAIN"))),
        log_level=str(o.get("log_level", env.get("TTOKEN_LOG_LEVEL", "INFO"))).upper(),
        log_format=str(log_format).strip().lower() if log_format else None,
    )
    return _validate(cfg)


@lru_cache(maxsize=1)
def get_config() -> TokenConfig:
    """
    Cached global config. Suitable for application bootstraps and module-level consumers.
    """
    return load_config()


def summary(cfg: Optional[TokenConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the deployment knobs.
    """
    cfg = cfg or get_config()
    md = cfg.metadata
    return (
        "ttoken{"
        f"name={md.name!r}, symbol={md.symbol}, decimals={md.decimals}, "
        f"sig={cfg.signature_scheme}, domain=0x{cfg.domain.hex()}"
        "}"
    )


__all__ = [
    "TokenMetadata",
    "TokenConfig",
    "load_config",
    "get_config",
    "summary",
    "DEFAULT_NAME",
    "DEFAULT_SYMBOL",
    "DEFAULT_DECIMALS",
]
