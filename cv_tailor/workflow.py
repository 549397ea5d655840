"""
Three-step tailoring run: score the original CV, tailor it, score the result.
"""

import logging
from typing import AsyncGenerator, Dict, Optional

from .client import ServiceClient
from .errors import TailoringError
from .state import (
    AppState, Failed, JobDescriptionChanged, RunFailed, RunRequested, RunSucceeded,
    StepStarted, TailoringSucceeded, TextExtracted, is_running, reduce,
)


logger = logging.getLogger(__name__)

STEP_SCORE_ORIGINAL = "Analyzing your CV for ATS compatibility..."
STEP_TAILOR = "Tailoring your CV for maximum ATS compatibility..."
STEP_SCORE_TAILORED = "Calculating final ATS score..."


class TailorWorkflow:
    """Runs one tailoring session against the remote services."""

    def __init__(self, client: ServiceClient, state: Optional[AppState] = None):
        self.client = client
        self.state = state or AppState()

    def dispatch(self, event) -> AppState:
        self.state = reduce(self.state, event)
        return self.state

    def load(self, cv_text: str, job_description: str) -> AppState:
        """Set the CV text and job description for the next run."""
        self.dispatch(TextExtracted(cv_text))
        return self.dispatch(JobDescriptionChanged(job_description))

    async def run_with_progress(self) -> AsyncGenerator[Dict, None]:
        """Run the workflow, yielding a progress update before each step."""
        if is_running(self.state):
            logger.debug("Run already in progress; ignoring request")
            return

        self.dispatch(RunRequested())
        if isinstance(self.state.phase, Failed):
            yield {"step": "error", "message": self.state.error, "progress": 0}
            yield {"step": "result", "state": self.state}
            return

        cv_text = self.state.cv_text
        job_description = self.state.job_description

        # Step 1: informational only, the score is not kept
        self.dispatch(StepStarted(STEP_SCORE_ORIGINAL))
        yield {"step": "scoring_original", "message": STEP_SCORE_ORIGINAL, "progress": 10}
        original_score = await self.client.score_ats(cv_text, job_description)
        logger.info("Original CV scored %d", original_score.score)

        # Step 2
        self.dispatch(StepStarted(STEP_TAILOR))
        yield {"step": "tailoring", "message": STEP_TAILOR, "progress": 40}
        try:
            tailored = await self.client.tailor(cv_text, job_description)
        except TailoringError as e:
            self.dispatch(RunFailed(f"Error: {e.message}"))
            yield {"step": "error", "message": self.state.error, "progress": 100}
            yield {"step": "result", "state": self.state}
            return
        self.dispatch(TailoringSucceeded(tailored))

        # Step 3
        self.dispatch(StepStarted(STEP_SCORE_TAILORED))
        yield {"step": "scoring_tailored", "message": STEP_SCORE_TAILORED, "progress": 75}
        final_score = await self.client.score_ats(tailored, job_description)
        self.dispatch(RunSucceeded(final_score))
        logger.info("Tailored CV scored %d", final_score.score)

        yield {"step": "complete", "message": "Done!", "progress": 100}
        yield {"step": "result", "state": self.state}

    async def run(self) -> AppState:
        """Non-streaming version; returns the final state."""
        async for _ in self.run_with_progress():
            pass
        return self.state
