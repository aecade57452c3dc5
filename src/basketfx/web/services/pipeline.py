"""Request pipeline stage tracking.

Every intent runs the same linear sequence of stages. The tracker logs
transitions under a short request ID and records where a request failed.
"""

import logging
import uuid
from enum import Enum
from typing import Optional

from basketfx.exceptions import BasketFxError

logger = logging.getLogger(__name__)


class PipelineStage(str, Enum):
    """Stages of a transaction preparation request."""

    VALIDATING = "validating"
    FETCHING_PRICES = "fetching_prices"
    COMPUTING_FEE = "computing_fee"
    COMPUTING_AMOUNTS = "computing_amounts"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


class RequestPipeline:
    """Context manager tracking one request through its stages.

    Example:
        with RequestPipeline("buy") as pipeline:
            ...validate...
            pipeline.advance(PipelineStage.FETCHING_PRICES)
            ...
    """

    def __init__(self, intent: str, request_id: Optional[str] = None):
        self.intent = intent
        self.request_id = request_id or uuid.uuid4().hex[:8]
        self.stage = PipelineStage.VALIDATING
        self.failed_stage: Optional[PipelineStage] = None

    def advance(self, stage: PipelineStage) -> None:
        """Move to the next stage."""
        logger.debug(f"[{self.request_id}] {self.intent}: {self.stage.value} -> {stage.value}")
        self.stage = stage

    def __enter__(self) -> "RequestPipeline":
        logger.info(f"[{self.request_id}] {self.intent} request started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.advance(PipelineStage.DONE)
            logger.info(f"[{self.request_id}] {self.intent} request prepared")
            return False

        self.failed_stage = self.stage
        self.stage = PipelineStage.FAILED
        if isinstance(exc_val, BasketFxError):
            logger.warning(
                f"[{self.request_id}] {self.intent} failed during "
                f"{self.failed_stage.value}: {type(exc_val).__name__}: {exc_val}"
            )
        else:
            logger.error(
                f"[{self.request_id}] {self.intent} crashed during "
                f"{self.failed_stage.value}: {type(exc_val).__name__}: {exc_val}"
            )
        return False
