from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Numeric, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class PrescriptionOrder(Base):
    """OCR-related columns of a prescription order.

    ocr_status values: pending | processing | completed | failed
    """
    __tablename__ = "prescription_orders"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    original_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    ocr_status: Mapped[str] = mapped_column(String(32), default="pending")
    extracted_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    ocr_confidence: Mapped[float | None] = mapped_column(Numeric(5, 4), nullable=True)
    ocr_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    ocr_processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
