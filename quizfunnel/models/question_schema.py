"""
Question set schema models.

Shape of the JSON stored on question_sets.json_schema and of submitted
answers. Extra keys (titles, option copy, scoring method) are tolerated so
authored schemas can carry presentation data.

Dependencies: pydantic
System role: Scoring engine input contracts
"""

from pydantic import BaseModel, ConfigDict, Field


class Question(BaseModel):
    """Single quiz question; only the id matters for scoring."""

    model_config = ConfigDict(extra="ignore")

    id: str
    text: str | None = None
    options: list[str] = Field(default_factory=list)


class Archetype(BaseModel):
    """Declared archetype; declaration order breaks scoring ties."""

    model_config = ConfigDict(extra="ignore")

    key: str
    name: str


class Scoring(BaseModel):
    """Choice-to-archetype map keyed by question id, then choice key."""

    model_config = ConfigDict(extra="ignore")

    map: dict[str, dict[str, str]] = Field(default_factory=dict)
    method: str = "plurality"


class QuestionSchema(BaseModel):
    """Complete question set as stored for a category version."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    questions: list[Question] = Field(default_factory=list)
    archetypes: list[Archetype] = Field(default_factory=list)
    scoring: Scoring = Field(default_factory=Scoring)

    def archetype_name(self, key: str) -> str:
        """Display name for an archetype key, falling back to the key."""
        for archetype in self.archetypes:
            if archetype.key == key:
                return archetype.name
        return key


class Answer(BaseModel):
    """One submitted answer: question id plus chosen option key."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="Question id")
    choice: str = Field(description="Chosen option key, e.g. 'A'")
