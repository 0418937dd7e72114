"""Flow graph data model: nodes, edges and edge conditions.

Nodes are a tagged union over ``entry`` / ``question`` / ``exit`` keyed on
``kind``. Edge conditions are a tagged union over the three ways an answer
can be matched; the flat wire shape used by the editor is converted on input.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flowform.utils.exceptions import ConditionFormatError

Scalar = Union[str, int, float, bool]
AnswerValue = Union[Scalar, list[Scalar]]

QuestionKind = Literal[
    "multiple_choice_single",
    "multiple_choice_multi",
    "short_text",
    "long_text",
    "rating",
    "yes_no",
    "number",
    "email",
    "dropdown",
    "date",
    "nps",
]

Comparator = Literal["equals", "not_equals", "contains", "greater_than", "less_than"]
MatchMode = Literal["any", "all", "exactly"]


# ── Node payloads ────────────────────────────────────────────────────


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class EntryPayload(BaseModel):
    title: str = "Welcome"
    description: str = ""
    button_label: str = "Start"


class QuestionOption(BaseModel):
    id: str
    text: str
    points: float | None = None


class QuestionPayload(BaseModel):
    question_kind: QuestionKind
    text: str = ""
    description: str | None = None
    required: bool = True

    options: list[QuestionOption] | None = None
    # Per-option output slots on single-select / yes-no questions
    enable_branching: bool = False

    min_value: float | None = None
    max_value: float | None = None
    min_label: str | None = None
    max_label: str | None = None

    placeholder: str | None = None
    max_length: int | None = None

    min_selections: int | None = None
    max_selections: int | None = None

    points: float | None = None
    correct_answer: AnswerValue | None = None


class ExitPayload(BaseModel):
    title: str = "Thank You!"
    description: str = ""
    show_score: bool = False
    redirect_url: str | None = None


# ── Nodes ────────────────────────────────────────────────────────────


class EntryNode(BaseModel):
    id: str
    kind: Literal["entry"] = "entry"
    payload: EntryPayload = Field(default_factory=EntryPayload)
    position: Position | None = None


class QuestionNode(BaseModel):
    id: str
    kind: Literal["question"] = "question"
    payload: QuestionPayload
    position: Position | None = None


class ExitNode(BaseModel):
    id: str
    kind: Literal["exit"] = "exit"
    payload: ExitPayload = Field(default_factory=ExitPayload)
    position: Position | None = None


FlowNode = Annotated[Union[EntryNode, QuestionNode, ExitNode], Field(discriminator="kind")]


# ── Edge conditions ──────────────────────────────────────────────────


class SingleOptionMatch(BaseModel):
    """Matches when the single selected option id equals ``option_id``."""

    match: Literal["single_option"] = "single_option"
    option_id: str


class MultiOptionMatch(BaseModel):
    """Matches a multi-select answer against a set of option ids."""

    match: Literal["multi_option"] = "multi_option"
    option_ids: list[str]
    match_mode: MatchMode = "any"


class ScalarCompare(BaseModel):
    """Compares a free value (text, number, rating) against ``operand``.

    A list operand matches when any of its elements matches.
    """

    match: Literal["scalar"] = "scalar"
    comparator: Comparator
    operand: AnswerValue = ""


EdgeCondition = Annotated[
    Union[SingleOptionMatch, MultiOptionMatch, ScalarCompare],
    Field(discriminator="match"),
]


def condition_from_wire(raw: dict[str, Any]) -> SingleOptionMatch | MultiOptionMatch | ScalarCompare:
    """Convert the editor's flat condition dict into a tagged condition.

    ``option_ids`` wins over ``option_id``, which wins over a free-value
    comparison. Both snake_case and camelCase keys are accepted.
    """
    option_ids = raw.get("option_ids", raw.get("optionIds"))
    option_id = raw.get("option_id", raw.get("optionId"))
    comparator = raw.get("comparator", raw.get("type"))
    operand = raw.get("operand", raw.get("value", ""))

    if option_ids is not None:
        if not isinstance(option_ids, (list, tuple)):
            raise ConditionFormatError("option_ids must be a list of option ids")
        match_mode = raw.get("match_mode", raw.get("matchMode")) or "any"
        if match_mode not in ("any", "all", "exactly"):
            raise ConditionFormatError(f"Unknown match mode: {match_mode!r}")
        return MultiOptionMatch(option_ids=[str(o) for o in option_ids], match_mode=match_mode)

    if option_id is not None:
        return SingleOptionMatch(option_id=str(option_id))

    if comparator not in ("equals", "not_equals", "contains", "greater_than", "less_than"):
        raise ConditionFormatError(f"Unknown comparator: {comparator!r}")
    return ScalarCompare(comparator=comparator, operand=operand)


def condition_to_wire(condition: SingleOptionMatch | MultiOptionMatch | ScalarCompare) -> dict[str, Any]:
    """Flatten a tagged condition back into the editor's shape."""
    if isinstance(condition, MultiOptionMatch):
        return {
            "comparator": "equals",
            "operand": list(condition.option_ids),
            "option_ids": list(condition.option_ids),
            "match_mode": condition.match_mode,
        }
    if isinstance(condition, SingleOptionMatch):
        return {"comparator": "equals", "operand": condition.option_id, "option_id": condition.option_id}
    return {"comparator": condition.comparator, "operand": condition.operand}


# ── Edges and graph ──────────────────────────────────────────────────


class FlowEdge(BaseModel):
    id: str
    source_node_id: str
    target_node_id: str
    output_slot: str | None = None
    condition: EdgeCondition | None = None

    @field_validator("condition", mode="before")
    @classmethod
    def _accept_wire_condition(cls, value: Any) -> Any:
        if isinstance(value, dict) and "match" not in value:
            return condition_from_wire(value)
        return value

    @property
    def is_default(self) -> bool:
        return self.condition is None


class FlowGraph(BaseModel):
    """An immutable snapshot of an assessment's nodes and edges."""

    model_config = ConfigDict(frozen=True)

    nodes: list[FlowNode] = Field(default_factory=list)
    edges: list[FlowEdge] = Field(default_factory=list)

    def nodes_by_id(self) -> dict[str, EntryNode | QuestionNode | ExitNode]:
        return {node.id: node for node in self.nodes}

    def get_node(self, node_id: str) -> EntryNode | QuestionNode | ExitNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def entry_node(self) -> EntryNode | None:
        for node in self.nodes:
            if node.kind == "entry":
                return node
        return None

    def question_nodes(self) -> list[QuestionNode]:
        return [n for n in self.nodes if n.kind == "question"]

    def outgoing_edges(self, node_id: str) -> list[FlowEdge]:
        """Edges leaving ``node_id`` in authoring order."""
        return [e for e in self.edges if e.source_node_id == node_id]

    def incoming_edges(self, node_id: str) -> list[FlowEdge]:
        return [e for e in self.edges if e.target_node_id == node_id]
