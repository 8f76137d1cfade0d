"""Skill taxonomy: canonical names, categories, synonyms and match patterns.

Loaded once from a YAML asset and read-only afterwards. Lookups go through a
key index where every canonical name and synonym (normalized with
normalize_skill_name) resolves to its SkillDefinition.
"""

import logging
import re
from pathlib import Path
from typing import Iterable

import yaml
from pydantic import ValidationError

from skillgap.config import Settings, settings as default_settings
from skillgap.errors import TaxonomyDataError, TaxonomyUninitializedError
from skillgap.models.skills import SkillCategory, SkillDefinition
from skillgap.services.base import BaseDataService
from skillgap.services.text_normalizer import normalize_skill_name

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Classification fallback for names that have no taxonomy entry.
# Checked in order; the first family that matches wins.
# ---------------------------------------------------------------------------
_CATEGORY_PATTERNS: list[tuple[re.Pattern, SkillCategory]] = [
    (
        re.compile(
            r"(?<!\w)(js|py|java|cpp|php|ruby|go|rust|swift|kotlin|scala|c#"
            r"|typescript|javascript|python)(?![\w#])"
        ),
        SkillCategory.TECHNICAL,
    ),
    (
        re.compile(r"\b(react|angular|vue|django|flask|spring|laravel|rails|express)\b"),
        SkillCategory.FRAMEWORKS,
    ),
    (
        re.compile(r"\b(git|docker|kubernetes|jenkins|jira|slack|figma|aws|azure|gcp)\b"),
        SkillCategory.TOOLS,
    ),
    (
        re.compile(r"certified|certification|professional|associate|expert"),
        SkillCategory.CERTIFICATIONS,
    ),
    (
        re.compile(r"\b(agile|scrum|kanban|devops|ci/cd)\b"),
        SkillCategory.METHODOLOGIES,
    ),
]


def classify_by_pattern(name: str) -> SkillCategory:
    """Infer a category from the shape of a skill name. Defaults to technical."""
    lowered = name.lower()
    for pattern, category in _CATEGORY_PATTERNS:
        if pattern.search(lowered):
            return category
    return SkillCategory.TECHNICAL


class SkillTaxonomy(BaseDataService):
    """Static skill reference data with normalized key lookups."""

    service_name = "skill_taxonomy"

    def __init__(self, path: str | Path | None = None, config: Settings | None = None) -> None:
        self._config = config or default_settings
        self._path = Path(path or self._config.taxonomy_path)
        self._loaded = False
        self._version = ""
        self._definitions: list[SkillDefinition] = []
        self._index: dict[str, SkillDefinition] = {}

    @classmethod
    def from_definitions(
        cls, definitions: Iterable[SkillDefinition], version: str = "inline"
    ) -> "SkillTaxonomy":
        """Build an already-loaded taxonomy from in-memory definitions."""
        taxonomy = cls()
        taxonomy._install(list(definitions), version)
        return taxonomy

    def load(self) -> None:
        try:
            raw = yaml.safe_load(self._path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise TaxonomyDataError(f"Cannot read taxonomy {self._path}: {e}") from e

        if not isinstance(raw, dict) or not isinstance(raw.get("skills"), list):
            raise TaxonomyDataError(f"Taxonomy {self._path} has no 'skills' list")

        definitions: list[SkillDefinition] = []
        for i, entry in enumerate(raw["skills"]):
            try:
                definitions.append(SkillDefinition.model_validate(entry))
            except ValidationError as e:
                raise TaxonomyDataError(f"Invalid taxonomy entry #{i} in {self._path}: {e}") from e

        self._install(definitions, str(raw.get("version", "")))
        logger.info(
            "Taxonomy %s loaded: %d skills, %d keys",
            self._version, len(self._definitions), len(self._index),
        )

    def _install(self, definitions: list[SkillDefinition], version: str) -> None:
        index: dict[str, SkillDefinition] = {}
        seen: set[str] = set()
        normalized: list[SkillDefinition] = []

        for definition in definitions:
            key = normalize_skill_name(definition.name)
            if not key:
                raise TaxonomyDataError("Taxonomy entry with empty name")
            if key in seen:
                raise TaxonomyDataError(f"Duplicate taxonomy entry: {definition.name!r}")
            seen.add(key)
            normalized.append(definition.model_copy(update={"name": definition.name.lower().strip()}))

        # Canonical names claim their keys before any synonym does
        for definition in normalized:
            index[normalize_skill_name(definition.name)] = definition
        for definition in normalized:
            for synonym in definition.synonyms:
                key = normalize_skill_name(synonym)
                if key and key not in index:
                    index[key] = definition

        self._definitions = normalized
        self._index = index
        self._version = version
        self._loaded = True

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise TaxonomyUninitializedError(
                f"Taxonomy {self.service_name} used before load()", stage="taxonomy"
            )

    @property
    def version(self) -> str:
        self._require_loaded()
        return self._version

    @property
    def definitions(self) -> list[SkillDefinition]:
        self._require_loaded()
        return list(self._definitions)

    def is_key(self, term: str) -> bool:
        """True when term normalizes to a canonical name or synonym."""
        self._require_loaded()
        return normalize_skill_name(term) in self._index

    def lookup(self, term: str) -> SkillDefinition | None:
        self._require_loaded()
        key = normalize_skill_name(term)
        if not key:
            return None
        return self._index.get(key)

    def find_synonyms(self, name: str) -> list[str]:
        definition = self.lookup(name)
        return list(definition.synonyms) if definition else []

    def classify(self, name: str) -> SkillCategory:
        """Taxonomy category for a name, falling back to pattern families."""
        definition = self.lookup(name)
        if definition is not None:
            return definition.category
        return classify_by_pattern(name)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, term: str) -> bool:
        return self.lookup(term) is not None
