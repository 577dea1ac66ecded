"""
Poll template.

The published config holds the question and the answer options.  The
frame's ``storage`` column holds the ``PollState``: vote totals per
option and the option each voter picked.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class PollOption(BaseModel):
    display_label: str = ""
    button_label: str


class PollConfig(BaseModel):
    """Config shape of the poll template."""

    question: str = ""
    options: List[PollOption] = Field(default_factory=list, max_length=4)
    text_color: str = "#ffffff"
    background_color: str = "#1c1c1e"

    model_config = {
        "extra": "allow",
    }


class PollState(BaseModel):
    """Runtime state of a poll, persisted in the frame's storage blob."""

    votes: Dict[str, int] = Field(default_factory=dict)
    voters: Dict[str, int] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.votes.values())


initial_config: Dict[str, Any] = {
    "question": "What should we build next?",
    "options": [
        {"display_label": "A mobile app", "button_label": "App"},
        {"display_label": "A browser extension", "button_label": "Extension"},
    ],
    "text_color": "#ffffff",
    "background_color": "#1c1c1e",
}

from .functions.initial import initial  # noqa: E402
from .functions.vote import vote  # noqa: E402

__all__ = ["PollOption", "PollConfig", "PollState", "initial_config", "initial", "vote"]
