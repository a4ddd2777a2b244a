"""Bulk reclassification proposals and their state."""
from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ledger_classifier.classification.bulk import BulkProposal
from ledger_classifier.models.base import BaseModel


class BulkReclassificationBatch(BaseModel):
    __tablename__ = "bulk_reclassification_batches"

    batch_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    account_code: Mapped[str] = mapped_column(String(8), nullable=False)
    corrected_description: Mapped[str] = mapped_column(Text, nullable=False)
    key_pattern: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    candidate_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default="proposed")
    applied_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def to_domain(self) -> BulkProposal:
        return BulkProposal(
            batch_id=self.batch_id,
            account_code=self.account_code,
            corrected_description=self.corrected_description,
            key_pattern=tuple(self.key_pattern or ()),
            candidate_ids=tuple(self.candidate_ids or ()),
            state=self.state,
            applied_count=self.applied_count,
        )

    @classmethod
    def from_domain(cls, proposal: BulkProposal) -> "BulkReclassificationBatch":
        return cls(
            batch_id=proposal.batch_id,
            account_code=proposal.account_code,
            corrected_description=proposal.corrected_description,
            key_pattern=list(proposal.key_pattern),
            candidate_ids=list(proposal.candidate_ids),
            state=proposal.state.value,
            applied_count=proposal.applied_count,
        )

    def __repr__(self) -> str:
        return f"<BulkReclassificationBatch(batch_id={self.batch_id}, state={self.state})>"
