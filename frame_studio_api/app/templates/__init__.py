"""
Template registry.

A template is a family of render functions plus the initial config a
new frame starts from.  Every template exposes an ``initial`` function
producing the first card and one function per interactive transition,
registered under the name that ``FrameRender.function_name`` refers
to.  New templates are added to ``TEMPLATES`` under their tag.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from pydantic import BaseModel

from . import poll


@dataclass(frozen=True)
class TemplateDescriptor:
    """Everything the service needs to know about one template."""

    name: str
    initial_config: Dict[str, Any]
    config_model: Type[BaseModel]
    state_model: Type[BaseModel]
    initial: Callable[..., Awaitable[Any]]
    functions: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    description: Optional[str] = None


TEMPLATES: Dict[str, TemplateDescriptor] = {
    "poll": TemplateDescriptor(
        name="Poll",
        description="Ask a question and let the feed vote on up to four options.",
        initial_config=poll.initial_config,
        config_model=poll.PollConfig,
        state_model=poll.PollState,
        initial=poll.initial,
        functions={"vote": poll.vote},
    ),
}
