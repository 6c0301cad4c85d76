"""Confidence scoring for recognition output.

Vision returns the full text as the first annotation and the individual
words after it. The full-text score wins when the service provides one;
otherwise the word scores are averaged.
"""
from __future__ import annotations

from collections.abc import Sequence

from pharmarx_ocr.ocr.base_ocr import Annotation


def compute_confidence(annotations: Sequence[Annotation]) -> float | None:
    if not annotations:
        return None

    full_text = annotations[0]
    if full_text.confidence is not None:
        return full_text.confidence

    word_scores = [
        float(a.confidence)
        for a in annotations[1:]
        if isinstance(a, Annotation) and isinstance(a.confidence, (int, float))
    ]
    if not word_scores:
        return None

    return round(sum(word_scores) / len(word_scores), 2)
