"""
Readiness checklist and score for booked jobs.
"""
from dataclasses import dataclass, asdict, fields

from ..engine.errors import InvalidInputError


@dataclass
class ReadinessChecklist:
    """The fixed six-item pre-move checklist."""
    deposit: bool = False
    address: bool = False
    inventory: bool = False
    elevator: bool = False
    confirmation: bool = False
    agreement_signed: bool = False

    @classmethod
    def items(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def checked_count(self) -> int:
        return sum(1 for name in self.items() if getattr(self, name))

    def toggle(self, item: str):
        """Flip a single checklist item."""
        if item not in self.items():
            raise InvalidInputError(
                f"Unknown checklist item '{item}'. Expected one of {self.items()}",
                field='checklist',
            )
        setattr(self, item, not getattr(self, item))

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'ReadinessChecklist':
        return cls(**{k: bool(v) for k, v in data.items() if k in cls.items()})


def readiness_score(checklist: ReadinessChecklist) -> int:
    """Percentage of checklist items completed, rounded to a whole number."""
    total = len(ReadinessChecklist.items())
    return int(checklist.checked_count() * 100 / total + 0.5)


def is_at_risk(score: int, threshold: int = 70) -> bool:
    """Dispatch board flag for jobs that are not ready."""
    return score < threshold
