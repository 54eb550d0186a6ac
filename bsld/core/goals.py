"""
Boskeopolis Land Data - Level Goals

Goal templates and the immutable Goal model.

A level stores its goal as a Uint8 template id followed by the template's
export fields, in order. Option values are kept as strings, the way the
editor's form fields hold them, and parsed as integers when encoded.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, NamedTuple

from .byte_utils import FieldSpec, WireType
from .errors import UnknownGoalError


class GoalOption(NamedTuple):
    slug: str
    title: str
    type: str
    default: str
    atts: Mapping


class GoalTemplate(NamedTuple):
    name: str
    options: tuple[GoalOption, ...] = ()
    export_data: tuple[FieldSpec, ...] = ()

    @property
    def export_size(self) -> int:
        return sum(wtype.size for wtype, _ in self.export_data)


GOALS: tuple[GoalTemplate, ...] = (
    GoalTemplate(name="Reach Keycane"),
    GoalTemplate(
        name="Collect ₧",
        options=(
            GoalOption(
                slug="amount",
                title="Amount",
                type="number",
                default="10000",
                atts=MappingProxyType({"min": "1", "max": "99999"}),
            ),
        ),
        export_data=(FieldSpec(WireType.UINT32, "amount"),),
    ),
)


def get_goal_template(goal_id: int) -> GoalTemplate:
    """
    Get the goal template for a goal id.

    Raises:
        UnknownGoalError: If goal_id does not select a template
    """
    if not 0 <= goal_id < len(GOALS):
        raise UnknownGoalError(f"Unknown goal id: {goal_id}")
    return GOALS[goal_id]


@dataclass(frozen=True)
class Goal:
    id: int = 0
    options: Mapping = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def __hash__(self):
        return hash((self.id, frozenset(self.options.items())))

    @property
    def template(self) -> GoalTemplate:
        return get_goal_template(self.id)

    def get_option(self, slug: str) -> str:
        if slug not in self.options:
            raise KeyError(f"Invalid goal option: {slug}")
        return self.options[slug]

    def update_option(self, slug: str, value: str) -> "Goal":
        return replace(self, options={**self.options, slug: value})

    def to_json(self) -> dict:
        return {"id": self.id, "options": dict(self.options)}


def create_goal(goal_id: int, options: dict | None = None) -> Goal:
    """Create a goal, filling options from the template defaults if not given."""
    if options is None:
        template = get_goal_template(goal_id)
        options = {option.slug: option.default for option in template.options}
    return Goal(goal_id, options)
