"""Batched license key redemption against the Krampus tRPC API"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Sequence

import requests

from .config import Config
from .credentials import CredentialStore
from .extractor import CandidateKey
from .logs import Colors, log_key
from .trpc import INVALID_RESPONSE, decode_batch, dig, encode_batch, error_message


# -------------------------------
# Enums and Data Classes
# -------------------------------

class RedemptionStatus(Enum):
    """Enumeration of possible redemption outcomes"""
    SUCCESS = "success"
    FAILURE = "failure"  # the API answered and rejected the key
    TRANSPORT_ERROR = "transport_error"  # the batch request itself failed


@dataclass
class RedemptionResult:
    """Result of a key redemption attempt"""
    key: str
    status: RedemptionStatus
    message: str
    timestamp: datetime

    @property
    def ok(self) -> bool:
        return self.status == RedemptionStatus.SUCCESS


def parse_claim_entry(key: str, entry: Any, timestamp: datetime) -> RedemptionResult:
    """Classify one response entry: error message, then result status, else invalid"""
    message = error_message(entry)
    if message is not None:
        return RedemptionResult(key, RedemptionStatus.FAILURE, message, timestamp)

    status = dig(entry, "result", "data", "json", "status")
    if status is not None:
        return RedemptionResult(key, RedemptionStatus.SUCCESS, str(status), timestamp)

    return RedemptionResult(key, RedemptionStatus.FAILURE, INVALID_RESPONSE, timestamp)


# -------------------------------
# Key Redemption
# -------------------------------

class KeyRedeemer:
    """Claims keys in one HTTP call per batch and reports every key individually"""

    def __init__(self, cfg: Config, store: CredentialStore, session: requests.Session):
        self.cfg = cfg
        self.store = store
        self.session = session
        self.claim_url = f"{cfg.api_url}/trpc/license.claim"

    def claim(self, keys: Sequence[str]) -> List[RedemptionResult]:
        """Submit keys as a single batch and return one result per key, in order"""
        keys = list(keys)
        if not keys:
            return []

        # One snapshot per batch; a login finishing mid-request doesn't touch it
        token = self.store.get()

        try:
            resp = self.session.post(
                self.claim_url,
                params={"batch": len(keys)},
                json=encode_batch(keys),
                headers={
                    'Authorization': f"Bearer {token}",
                    'Referer': f"{self.cfg.origin}/dashboard/licenses",
                },
                timeout=self.cfg.timeout
            )
            entries = decode_batch(resp.json(), len(keys))
        except Exception as e:
            # Any failure sending or decoding the batch is shared by every key in it
            timestamp = datetime.now(timezone.utc)
            message = str(e) or type(e).__name__
            return [RedemptionResult(key, RedemptionStatus.TRANSPORT_ERROR, message, timestamp) for key in keys]

        timestamp = datetime.now(timezone.utc)
        return [parse_claim_entry(key, entry, timestamp) for key, entry in zip(keys, entries)]

    def redeem(self, candidates: Sequence[CandidateKey]) -> List[RedemptionResult]:
        """Claim a batch of candidates, printing the attempt and outcome for each key"""
        if not candidates:
            return []

        for candidate in candidates:
            details = f"from {candidate.source}" if self.cfg.verbose else ""
            log_key(candidate.value, "Redeeming Key", details, Colors.CYAN)

        results = self.claim([candidate.value for candidate in candidates])

        for result in results:
            if result.status == RedemptionStatus.SUCCESS:
                log_key(result.key, "Redeemed Key", result.message, Colors.GREEN)
            else:
                log_key(result.key, "Failed to Redeem Key", result.message, Colors.RED)

        return results
