"""
Presentation state for a tailoring session.

The whole UI is driven from one immutable AppState. Every change goes
through reduce(), so the legal transitions live in one place:

    Idle -> Extracting -> Ready -> Running(step) -> Done
                 |                      |
                 v                      v
               Failed  <-------------  Failed
"""

from dataclasses import dataclass, replace
from typing import Optional, Union

from .client import AtsScore


MISSING_INPUT_MESSAGE = "Please provide both CV and job description"
EXTRACTING_MESSAGE = "Extracting text from your CV..."


# === Run phases ===

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Extracting:
    filename: str


@dataclass(frozen=True)
class Ready:
    pass


@dataclass(frozen=True)
class Running:
    step: str


@dataclass(frozen=True)
class Done:
    pass


@dataclass(frozen=True)
class Failed:
    error: str


Phase = Union[Idle, Extracting, Ready, Running, Done, Failed]


@dataclass(frozen=True)
class AppState:
    phase: Phase = Idle()
    cv_filename: Optional[str] = None
    cv_text: str = ""
    job_description: str = ""
    tailored_cv: str = ""
    ats_score: Optional[AtsScore] = None

    @property
    def error(self) -> str:
        return self.phase.error if isinstance(self.phase, Failed) else ""

    def to_dict(self) -> dict:
        return {
            "phase": type(self.phase).__name__.lower(),
            "processing_step": processing_step(self),
            "cv_filename": self.cv_filename,
            "tailored_cv": self.tailored_cv,
            "ats_score": self.ats_score.to_dict() if self.ats_score else None,
            "rating": score_rating(self.ats_score.score) if self.ats_score else None,
            "error": self.error,
        }


# === Events ===

@dataclass(frozen=True)
class FileSelected:
    filename: str


@dataclass(frozen=True)
class TextExtracted:
    text: str


@dataclass(frozen=True)
class FileRejected:
    message: str


@dataclass(frozen=True)
class ExtractionFailed:
    message: str


@dataclass(frozen=True)
class JobDescriptionChanged:
    text: str


@dataclass(frozen=True)
class RunRequested:
    pass


@dataclass(frozen=True)
class StepStarted:
    step: str


@dataclass(frozen=True)
class TailoringSucceeded:
    tailored_cv: str


@dataclass(frozen=True)
class RunSucceeded:
    ats_score: AtsScore


@dataclass(frozen=True)
class RunFailed:
    message: str


Event = Union[
    FileSelected, TextExtracted, FileRejected, ExtractionFailed, JobDescriptionChanged,
    RunRequested, StepStarted, TailoringSucceeded, RunSucceeded, RunFailed,
]


def is_running(state: AppState) -> bool:
    return isinstance(state.phase, Running)


def can_run(state: AppState) -> bool:
    """Whether the trigger control is enabled."""
    return (
        not is_running(state)
        and not isinstance(state.phase, Extracting)
        and bool(state.cv_text.strip())
        and bool(state.job_description.strip())
    )


def processing_step(state: AppState) -> str:
    """Human-readable label for the work in progress, or ''."""
    if isinstance(state.phase, Running):
        return state.phase.step
    if isinstance(state.phase, Extracting):
        return EXTRACTING_MESSAGE
    return ""


def score_rating(score: int) -> str:
    if score >= 80:
        return "Excellent!"
    if score >= 60:
        return "Good"
    return "Needs Improvement"


def reduce(state: AppState, event: Event) -> AppState:
    """Apply one event. Events that are illegal in the current phase are ignored."""
    # Nothing but run progress may touch the state while a run is in flight
    if is_running(state) and not isinstance(event, (StepStarted, TailoringSucceeded, RunSucceeded, RunFailed)):
        return state

    if isinstance(event, FileSelected):
        return replace(state, phase=Extracting(event.filename), cv_filename=event.filename)

    if isinstance(event, TextExtracted):
        return replace(state, phase=Ready(), cv_text=event.text)

    if isinstance(event, (FileRejected, ExtractionFailed)):
        return replace(state, phase=Failed(event.message), cv_filename=None, cv_text="")

    if isinstance(event, JobDescriptionChanged):
        return replace(state, job_description=event.text)

    if isinstance(event, RunRequested):
        if not state.cv_text.strip() or not state.job_description.strip():
            return replace(state, phase=Failed(MISSING_INPUT_MESSAGE))
        return replace(state, phase=Running(""), tailored_cv="", ats_score=None)

    if not is_running(state):
        return state

    if isinstance(event, StepStarted):
        return replace(state, phase=Running(event.step))

    if isinstance(event, TailoringSucceeded):
        return replace(state, tailored_cv=event.tailored_cv)

    if isinstance(event, RunSucceeded):
        return replace(state, phase=Done(), ats_score=event.ats_score)

    if isinstance(event, RunFailed):
        return replace(state, phase=Failed(event.message), tailored_cv="", ats_score=None)

    return state
