"""Structured, secret-free trace events for protocol steps.

Every step of the credential and trade pipelines logs through
``log_step`` so records share the ``operation``, ``step`` and ``wallet``
keys.  Wallet addresses are reduced to a short SHA-256 tag; callers must
never pass credentials or raw signatures as fields.
"""

import hashlib
import logging
from typing import Any

_TAG_LENGTH = 10


def wallet_tag(address: str | None) -> str:
    """Return a short, stable, non-reversible tag for a wallet address.

    Args:
        address: Hex wallet address, or ``None``.

    Returns:
        First ten hex characters of the SHA-256 of the lowercase address,
        or ``"-"`` when no address is given.

    """
    if not address:
        return "-"
    digest = hashlib.sha256(address.lower().encode("utf-8")).hexdigest()
    return digest[:_TAG_LENGTH]


def log_step(
    logger: logging.Logger,
    operation: str,
    step: str,
    wallet: str | None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit one leveled trace event for a pipeline step.

    Args:
        logger: Module logger to emit through.
        operation: Pipeline name (e.g. ``"bootstrap"``, ``"trade"``).
        step: Step or state name within the pipeline.
        wallet: Wallet address the step acts for; logged only as a tag.
        level: Logging level for the record.
        **fields: Extra non-secret key/value context.

    """
    if not logger.isEnabledFor(level):
        return
    tag = wallet_tag(wallet)
    detail = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
    logger.log(
        level,
        "%s step=%s wallet=%s%s",
        operation,
        step,
        tag,
        f" {detail}" if detail else "",
        extra={"operation": operation, "step": step, "wallet": tag},
    )
