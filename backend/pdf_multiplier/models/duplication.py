"""Batch duplication models"""
from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Tuple
from .recipient import Recipient


class NamingPattern(str, Enum):
    """Source of the per-recipient identifier used in output filenames"""
    USERNAME = "username"
    EMAIL = "email"
    EMPLOYEE_ID = "employee_id"
    FULL_NAME = "full_name"


class Outcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class DuplicationProgress(BaseModel):
    """Progress event emitted after each recipient"""
    current: int
    total: int
    recipient_name: str
    percentage: int


class DuplicationResult(BaseModel):
    """Outcome of producing one recipient's copy"""
    recipient: Recipient
    filename: str
    outcome: Outcome
    content: Optional[bytes] = None
    error: Optional[str] = None

    class Config:
        frozen = True

    @property
    def succeeded(self) -> bool:
        return self.outcome == Outcome.SUCCESS

    @property
    def size(self) -> int:
        return len(self.content) if self.content else 0

    @classmethod
    def success(cls, recipient: Recipient, filename: str, content: bytes) -> "DuplicationResult":
        return cls(recipient=recipient, filename=filename, outcome=Outcome.SUCCESS, content=content)

    @classmethod
    def failure(cls, recipient: Recipient, filename: str, error: str) -> "DuplicationResult":
        return cls(recipient=recipient, filename=filename, outcome=Outcome.FAILURE, error=error)


class BatchReport(BaseModel):
    """Ordered, immutable result of one duplication run (one entry per recipient)"""
    results: Tuple[DuplicationResult, ...] = Field(default_factory=tuple)

    class Config:
        frozen = True

    @property
    def successes(self) -> List[DuplicationResult]:
        return [r for r in self.results if r.succeeded]

    @property
    def failures(self) -> List[DuplicationResult]:
        return [r for r in self.results if not r.succeeded]

    @property
    def stats(self) -> Dict[str, Any]:
        total = len(self.results)
        successful = len(self.successes)
        return {
            "total": total,
            "successful": successful,
            "failed": total - successful,
            "success_rate": (successful / total) * 100 if total else 0.0,
        }
