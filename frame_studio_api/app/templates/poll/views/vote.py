"""
Poll views.

Views return the markup handed to the image renderer.  User-supplied
text is escaped before it is embedded.
"""

import html

from .. import PollConfig, PollState


def _container(config: PollConfig, body: str) -> str:
    style = (
        "display:flex;flex-direction:column;width:100%;height:100%;padding:48px;"
        f"font-family:Roboto;color:{html.escape(config.text_color)};"
        f"background-color:{html.escape(config.background_color)}"
    )
    return f'<div style="{style}">{body}</div>'


def vote_view(config: PollConfig) -> str:
    """Question with the list of options to vote on."""
    options = "".join(
        f'<li style="font-size:36px">{html.escape(option.display_label or option.button_label)}</li>'
        for option in config.options
    )
    body = f'<h1 style="font-size:56px">{html.escape(config.question)}</h1><ol>{options}</ol>'
    return _container(config, body)


def results_view(config: PollConfig, state: PollState) -> str:
    """Question with the share of votes each option received."""
    total = state.total
    rows = []
    for index, option in enumerate(config.options, start=1):
        count = state.votes.get(str(index), 0)
        percent = round(count * 100 / total) if total else 0
        label = html.escape(option.display_label or option.button_label)
        rows.append(
            f'<div style="display:flex;font-size:32px">'
            f'<span style="flex-grow:1">{label}</span><span>{percent}% ({count})</span></div>'
        )
    body = (
        f'<h1 style="font-size:56px">{html.escape(config.question)}</h1>'
        + "".join(rows)
        + f'<p style="font-size:24px">{total} votes</p>'
    )
    return _container(config, body)
