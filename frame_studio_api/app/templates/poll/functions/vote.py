"""
Vote transition of the poll template.

``vote`` records the option picked by ``voter`` and renders the
results card.  Each voter counts once: a repeated vote leaves the
tallies unchanged and simply shows the results again.  The incoming
state is never mutated; a new ``PollState`` is returned for the caller
to persist.
"""

from typing import Tuple

from frame_studio_api.app.schemas.template import FrameRender
from frame_studio_api.app.services import font_service

from .. import PollConfig, PollState
from ..views.vote import results_view


async def vote(
    config: PollConfig,
    state: PollState,
    button_index: int,
    voter: str,
) -> Tuple[PollState, FrameRender]:
    """Apply a vote for the option behind button ``button_index`` (1-based).

    Raises ``ValueError`` when the button does not map to an option.
    """
    if not 1 <= button_index <= len(config.options):
        raise ValueError(f"Button {button_index} does not match any poll option")

    new_state = state.model_copy(deep=True)
    if voter not in new_state.voters:
        key = str(button_index)
        new_state.votes[key] = new_state.votes.get(key, 0) + 1
        new_state.voters[voter] = button_index

    roboto = await font_service.load_google_font_all_variants("Roboto")
    render = FrameRender(
        buttons=[],
        aspect_ratio="1.91:1",
        fonts=roboto,
        component=results_view(config, new_state),
        function_name=None,
    )
    return new_state, render
