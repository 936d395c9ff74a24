from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from bgv.core.classifier import Outcome, classify
from bgv.core.status_codes import method_value
from bgv.utils.time import parse_timestamp_ms


@dataclass(frozen=True)
class VerificationAttempt:
    method: str
    rawResponse: Dict[str, Any] = field(default_factory=dict)
    statusCode: Optional[int] = None
    outcome: Outcome = Outcome.ERROR
    reason: str = ""
    # epoch ms
    timestamp: int = 0
    # What the lookup was run against (mobile / PAN / UAN), for display
    inputValue: str = ""
    provider: str = ""

    @classmethod
    def from_raw(
        cls,
        method: str,
        raw_response: Any,
        timestamp: Any = None,
        input_value: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> "VerificationAttempt":
        """Classify a stored record. The outcome is never trusted from storage."""
        c = classify(method, raw_response)
        return cls(
            method=method_value(method),
            rawResponse=raw_response if isinstance(raw_response, dict) else {},
            statusCode=c.status_code,
            outcome=c.outcome,
            reason=c.reason,
            timestamp=parse_timestamp_ms(timestamp),
            inputValue=str(input_value or ""),
            provider=str(provider or ""),
        )

    @property
    def succeeded(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "statusCode": self.statusCode,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "timestamp": self.timestamp,
            "inputValue": self.inputValue,
            "provider": self.provider,
        }
