from frame_studio_api.app.schemas.template import FrameButton, FrameRender
from frame_studio_api.app.services import font_service

from .. import PollConfig, PollState
from ..views.vote import vote_view


async def initial(config: PollConfig, state: PollState) -> FrameRender:
    """First card of a poll: one button per option, answered by ``vote``."""
    roboto = await font_service.load_google_font_all_variants("Roboto")

    return FrameRender(
        buttons=[FrameButton(label=option.button_label) for option in config.options],
        aspect_ratio="1.91:1",
        fonts=roboto,
        component=vote_view(config),
        function_name="vote",
    )
