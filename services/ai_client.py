"""Client for the AI text-completion gateway that writes study schedules."""

from typing import Optional

import requests
from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_AI_ENDPOINT, DEFAULT_AI_MODEL
from .errors import PaymentRequiredError, RateLimitError, UpstreamError
from .logging_handler import setup_logger

logger = setup_logger(__name__)

SYSTEM_PROMPT = """You are an expert study schedule planner who creates concise, actionable schedules.

Create schedules that:
- Use ONE-LINER format for each time block (max 10 words)
- Focus on clear, specific actions
- Include time ranges (e.g., "7:00 AM - 8:00 AM")
- Minimize explanations and theories
- Use simple, direct language

Format each entry as:
TIME_RANGE - Brief activity description

Example format:
7:00 AM - 8:00 AM - Morning routine & breakfast
8:00 AM - 10:00 AM - Deep focus study session
10:00 AM - 10:15 AM - Quick break, stretch
"""

USER_PROMPT_TEMPLATE = """Create a concise daily study schedule:

Sleep: {sleep_time}
Wake: {wake_time}
Energy peaks: {energy_peaks}
Goals: {study_goals}

Provide a simple hour-by-hour schedule with:
- Time blocks in format "HH:MM - HH:MM - Activity"
- ONE brief line per time block
- Strategic breaks every 90 minutes
- Peak study times during high energy periods
- 3-4 key tips at the end (one line each)

Keep it simple and scannable. No long explanations."""


class ScheduleRequest(BaseModel):
    """The user's routine, as sent by the schedule form."""

    model_config = ConfigDict(populate_by_name=True)

    sleep_time: str = Field(..., alias="sleepTime", min_length=1)
    wake_time: str = Field(..., alias="wakeTime", min_length=1)
    energy_peaks: str = Field(..., alias="energyPeaks", min_length=1)
    study_goals: str = Field(..., alias="studyGoals", min_length=1)

    def user_prompt(self) -> str:
        return USER_PROMPT_TEMPLATE.format(
            sleep_time=self.sleep_time,
            wake_time=self.wake_time,
            energy_peaks=self.energy_peaks,
            study_goals=self.study_goals,
        )


class ScheduleGenerator:
    """Asks an OpenAI-compatible chat-completions endpoint for a schedule."""

    TIMEOUT = 60

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_AI_ENDPOINT,
        model: str = DEFAULT_AI_MODEL,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._model = model
        self._session = session or requests.Session()

    def generate(self, request: ScheduleRequest) -> str:
        """Generate freeform schedule text for ``request``.

        Raises:
            RateLimitError: The gateway answered 429.
            PaymentRequiredError: The gateway answered 402.
            UpstreamError: Any other failure, or an empty completion.
        """
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": request.user_prompt()},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self._session.post(
                self._endpoint, json=payload, headers=headers, timeout=self.TIMEOUT
            )
        except requests.RequestException as e:
            logger.error("AI gateway unreachable: %s", e)
            raise UpstreamError("AI gateway error") from e

        if response.status_code == 429:
            raise RateLimitError("Rate limit exceeded. Please try again later.")
        if response.status_code == 402:
            raise PaymentRequiredError("Payment required. Please add credits to your workspace.")
        if not response.ok:
            logger.error("AI gateway error: %s %s", response.status_code, response.text)
            raise UpstreamError("AI gateway error")

        try:
            schedule = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("Unexpected AI gateway response: %s", e)
            raise UpstreamError("No schedule received") from e

        if not schedule:
            raise UpstreamError("No schedule received")
        logger.info("Generated schedule (%d lines)", len(schedule.splitlines()))
        return schedule
