"""Per-pass extraction results.

Each extraction pass produces its own variant carrying only the fields that
pass knows about; the extractor turns them into ExtractedSkill.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from skillgap.models.skills import SkillDefinition


class DirectMatch(BaseModel):
    """Pass 1: a name, synonym or pattern hit in the normalized text."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["direct"] = "direct"
    definition: SkillDefinition
    matched_text: str
    start: int
    context: str


class PosMatch(BaseModel):
    """Pass 2: a noun/adjective token that resolves to a taxonomy entry."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["pos"] = "pos"
    definition: SkillDefinition
    token: str


class PhraseMatch(BaseModel):
    """Pass 3: a token in the tail of an 'experience with ...' style phrase."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["phrase"] = "phrase"
    definition: SkillDefinition
    token: str
    phrase: str


PassMatch = Annotated[Union[DirectMatch, PosMatch, PhraseMatch], Field(discriminator="kind")]
