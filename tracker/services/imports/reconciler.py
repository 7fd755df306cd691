"""
Duplicate reconciliation for imported contacts.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Set, Tuple

from tracker.services.imports.extractor import CandidateRow

logger = logging.getLogger("tracker.imports")


class MembershipSet:
    """
    Emails and phones known to belong to a contact, for one import.

    Seeded from storage and grown as rows are accepted, so a value repeated
    later in the same file is caught without another query.
    """

    def __init__(self, values: Iterable[str] = ()):
        self._values: Set[str] = {v for v in values if v}

    def __contains__(self, value: str) -> bool:
        return bool(value) and value in self._values

    def __len__(self) -> int:
        return len(self._values)

    def update(self, values: Iterable[str]) -> None:
        self._values.update(v for v in values if v)

    def is_known(self, candidate: CandidateRow) -> bool:
        """True when the candidate's email or phone is already taken."""
        return candidate.email in self or candidate.phone in self

    def admit(self, candidate: CandidateRow) -> None:
        self.update((candidate.email, candidate.phone))


@dataclass
class Reconciliation:
    """Candidates split into rows to insert and rows to skip."""
    accepted: List[CandidateRow] = field(default_factory=list)
    skipped: List[CandidateRow] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def lookup_values(candidates: Iterable[CandidateRow]) -> Tuple[List[str], List[str]]:
    """Distinct non-empty emails and phones among the candidates, in first-seen order."""
    emails = list(dict.fromkeys(c.email for c in candidates if c.email))
    phones = list(dict.fromkeys(c.phone for c in candidates if c.phone))
    return emails, phones


def reconcile(candidates: Iterable[CandidateRow], membership: MembershipSet) -> Reconciliation:
    """
    Accept the first occurrence of each email/phone and skip the rest.

    A row is skipped if it has neither email nor phone, or if either of them
    is already known, even when the two belong to different contacts.
    Accepted rows add their values to ``membership`` straight away, before
    they are written; a row that later fails to insert still claims its
    values for the rest of the file.

    Args:
        candidates: Rows in sheet order
        membership: Known values; mutated as rows are accepted

    Returns:
        Reconciliation: Accepted and skipped rows
    """
    result = Reconciliation()
    for candidate in candidates:
        if not candidate.is_reachable or membership.is_known(candidate):
            result.skipped.append(candidate)
            continue
        membership.admit(candidate)
        result.accepted.append(candidate)

    logger.debug(f"Reconciled {len(result.accepted)} accepted, {result.skipped_count} skipped")
    return result
