"""
ConversionStage value object

Tracks how far a single conversion request has progressed through the
pipeline. The pipeline is linear; ``FAILED`` is reachable from every
non-terminal stage.
"""
from __future__ import annotations

from enum import Enum


class ConversionStage(str, Enum):
    """Pipeline stages in execution order."""
    RECEIVED = "received"
    VALIDATED = "validated"
    DOWNLOADED = "downloaded"
    RASTERIZED = "rasterized"
    PAGES_PUBLISHED = "pages_published"
    MANIFEST_BUILT = "manifest_built"
    MANIFEST_PUBLISHED = "manifest_published"
    COMPLETED = "completed"
    FAILED = "failed"

    def next_stage(self) -> ConversionStage:
        """Return the stage that follows this one on the success path."""
        if self.is_terminal():
            raise ValueError(f"{self.value} is a terminal stage")
        order = _SUCCESS_PATH
        return order[order.index(self) + 1]

    def can_transition_to(self, new_stage: ConversionStage) -> bool:
        """
        Check whether moving to ``new_stage`` is allowed.

        Valid transitions:
        - any non-terminal stage -> the next stage on the success path
        - any non-terminal stage -> FAILED
        - COMPLETED, FAILED -> (none)
        """
        if self.is_terminal():
            return False
        if new_stage == ConversionStage.FAILED:
            return True
        return new_stage == self.next_stage()

    def is_terminal(self) -> bool:
        return self in {ConversionStage.COMPLETED, ConversionStage.FAILED}


_SUCCESS_PATH = [
    ConversionStage.RECEIVED,
    ConversionStage.VALIDATED,
    ConversionStage.DOWNLOADED,
    ConversionStage.RASTERIZED,
    ConversionStage.PAGES_PUBLISHED,
    ConversionStage.MANIFEST_BUILT,
    ConversionStage.MANIFEST_PUBLISHED,
    ConversionStage.COMPLETED,
]
