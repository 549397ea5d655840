"""
HTTP client for the remote ATS scoring and CV tailoring services.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx

from .config import DEFAULT_SERVICE_URL, DEFAULT_TIMEOUT
from .errors import TailoringError


logger = logging.getLogger(__name__)

ATS_SCORE_PATH = "/api/ats-score"
TAILOR_PATH = "/api/tailor-cv"

BREAKDOWN_KEYS = ("keywords", "skills", "experience", "format", "structure")
FALLBACK_RECOMMENDATION = "Unable to calculate score. Please try again."


def _clamp(value, low: int = 0, high: int = 100) -> int:
    """Round a numeric value into [low, high]; ValueError if it is not a finite number."""
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"not a finite number: {value!r}")
    return max(low, min(high, number))


@dataclass
class AtsScore:
    """ATS compatibility estimate returned by the scoring service."""
    score: int = 0
    breakdown: Dict[str, int] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict) -> "AtsScore":
        if not isinstance(payload, dict):
            raise ValueError("ATS score payload must be an object")

        breakdown = payload.get("breakdown") or {}
        if not isinstance(breakdown, dict):
            raise ValueError("ATS score breakdown must be an object")

        recommendations = payload.get("recommendations") or []
        if isinstance(recommendations, str):
            recommendations = [recommendations]
        if not isinstance(recommendations, list):
            raise ValueError("ATS score recommendations must be a list")

        return cls(
            score=_clamp(payload.get("score", 0)),
            breakdown={str(k): _clamp(v) for k, v in breakdown.items()},
            recommendations=[str(r) for r in recommendations],
        )

    def to_dict(self) -> Dict:
        return {
            "score": self.score,
            "breakdown": dict(self.breakdown),
            "recommendations": list(self.recommendations),
        }


def fallback_score() -> AtsScore:
    """Zero-valued score used whenever the scoring service is unavailable."""
    return AtsScore(
        score=0,
        breakdown={key: 0 for key in BREAKDOWN_KEYS},
        recommendations=[FALLBACK_RECOMMENDATION],
    )


class ServiceClient:
    """
    JSON-over-HTTP client for the tailoring and scoring endpoints.

    Scoring degrades to `fallback_score()` on any failure; tailoring raises
    TailoringError so the caller can abort the run.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SERVICE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "ServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def score_ats(self, cv_text: str, job_description: str) -> AtsScore:
        """Score a CV against a job description; never raises."""
        try:
            response = await self._client.post(
                ATS_SCORE_PATH,
                json={"cvContent": cv_text, "jobDescription": job_description},
            )
            response.raise_for_status()
            return AtsScore.from_payload(response.json())
        except (httpx.HTTPError, ValueError, TypeError, OverflowError) as e:
            logger.warning("ATS score error: %s", e)
            return fallback_score()

    async def tailor(self, cv_text: str, job_description: str) -> str:
        """Return the tailored CV text, or raise TailoringError."""
        try:
            response = await self._client.post(
                TAILOR_PATH,
                json={"cvText": cv_text, "jobDescription": job_description},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Tailoring request failed: %s", e)
            raise TailoringError() from e

        tailored = data.get("tailoredCV") if isinstance(data, dict) else None
        if not isinstance(tailored, str):
            logger.error("Tailoring response has no tailoredCV text")
            raise TailoringError()

        return tailored
