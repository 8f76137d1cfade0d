"""Taxonomy-driven skill extraction from job posting text.

Three passes, merged by canonical name (first pass to find a skill wins):
1. Direct scan for every taxonomy name, synonym and pattern with
   boundary-aware regexes. Confidence is built from the match context.
2. POS-assisted scan: noun/adjective tokens looked up in the taxonomy.
3. Contextual phrases ("experience with ...", "proficient in ...") whose
   tails are tokenized and looked up.

Each pass yields its own tagged match type (see models.extraction); only the
merge step turns them into ExtractedSkill.
"""

import logging
import re

import nltk
from nltk.tokenize import RegexpTokenizer

from skillgap.config import Settings, settings as default_settings
from skillgap.models.extraction import DirectMatch, PassMatch, PhraseMatch, PosMatch
from skillgap.models.skills import ExtractedSkill, SkillDefinition
from skillgap.services.taxonomy import SkillTaxonomy
from skillgap.services.text_normalizer import normalize_text

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Context heuristics
# ---------------------------------------------------------------------------
_REQUIRED_PATTERN = re.compile(
    r"required|must have|essential|mandatory|necessary|need|should have"
)
_EXPERIENCE_PATTERN = re.compile(r"experience|proficient|skilled|expertise")

_SKILL_PHRASES = (
    "experience with", "proficient in", "knowledge of",
    "familiar with", "expertise in", "skilled in",
)
# Tail runs to the next clause boundary: , ; : newline, sentence-ending period, or end
_PHRASE_PATTERN = re.compile(
    r"(?:" + "|".join(re.escape(p) for p in _SKILL_PHRASES) + r")\s+(.+?)(?=[,;:\n]|\.(?:\s|$)|$)"
)
_TAIL_SPLIT = re.compile(r"[,\s]+")
_HORIZONTAL_SPACE = re.compile(r"[ \t\r\f\v]+")

BASE_CONFIDENCE = 0.6
KEY_BONUS = 0.2
REQUIRED_BONUS = 0.1
EXPERIENCE_BONUS = 0.1
POS_CONFIDENCE = 0.7
PHRASE_CONFIDENCE = 0.8

_tokenizer = RegexpTokenizer(r"[a-z0-9#+][a-z0-9.#+/-]*")
_NOUN_ADJ_PREFIXES = ("NN", "JJ")

# None until the first tagging attempt; False when the tagger model is missing
_tagger_available: bool | None = None


def is_required_context(text: str) -> bool:
    """True if the text uses requirement vocabulary ("required", "must have", ...)."""
    return bool(_REQUIRED_PATTERN.search(text.lower()))


def _has_symbols(term: str) -> bool:
    return bool(re.search(r"[^a-z0-9 ]", term))


def compile_term(term: str) -> re.Pattern:
    """Boundary-aware regex for a normalized scan term.

    Plain alphanumeric terms must not touch word characters or the symbols
    used inside other skill names, so "js" does not fire inside "node.js"
    and "c" does not fire inside "c#". Terms that already carry symbols only
    need to avoid letters and digits on either side.
    """
    escaped = re.escape(term)
    if _has_symbols(term):
        return re.compile(rf"(?<![a-z0-9]){escaped}(?![a-z0-9])")
    return re.compile(rf"(?<![\w.#+]){escaped}(?![\w#+])")


def _pos_candidates(tokens: list[str]) -> list[str]:
    """Noun and adjective tokens. Every token when the tagger model is missing."""
    global _tagger_available
    if not tokens:
        return []
    if _tagger_available is not False:
        try:
            tagged = nltk.pos_tag(tokens)
            _tagger_available = True
            return [tok for tok, tag in tagged if tag.startswith(_NOUN_ADJ_PREFIXES)]
        except LookupError as e:
            _tagger_available = False
            logger.warning("POS tagger unavailable, pass 2 falls back to all tokens: %s", e)
    return list(tokens)


class SkillExtractor:
    """Extracts ExtractedSkill records from free-form job text."""

    def __init__(self, taxonomy: SkillTaxonomy, config: Settings | None = None) -> None:
        self._taxonomy = taxonomy
        self._config = config or default_settings
        self._scanners: list[tuple[SkillDefinition, list[tuple[str, re.Pattern]]]] | None = None

    @property
    def taxonomy_version(self) -> str:
        self._taxonomy.ensure_loaded()
        return self._taxonomy.version

    def _get_scanners(self) -> list[tuple[SkillDefinition, list[tuple[str, re.Pattern]]]]:
        """Compiled regexes per taxonomy entry, in name > synonyms > patterns order."""
        if self._scanners is None:
            self._taxonomy.ensure_loaded()
            scanners = []
            for definition in self._taxonomy.definitions:
                terms: list[tuple[str, re.Pattern]] = []
                seen: set[str] = set()
                for raw in (definition.name, *definition.synonyms, *definition.patterns):
                    term = normalize_text(raw)
                    if term and term not in seen:
                        seen.add(term)
                        terms.append((term, compile_term(term)))
                scanners.append((definition, terms))
            self._scanners = scanners
            logger.debug("Compiled scanners for %d taxonomy entries", len(scanners))
        return self._scanners

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def direct_pass(self, normalized: str) -> list[DirectMatch]:
        window = self._config.context_window
        matches: list[DirectMatch] = []
        for definition, terms in self._get_scanners():
            for _term, pattern in terms:
                hit = pattern.search(normalized)
                if hit is None:
                    continue
                context = normalized[max(0, hit.start() - window): hit.end() + window]
                matches.append(DirectMatch(
                    definition=definition,
                    matched_text=hit.group(0),
                    start=hit.start(),
                    context=context.strip(),
                ))
                break
        return matches

    def pos_pass(self, normalized: str) -> list[PosMatch]:
        tokens = [tok.rstrip(".-/") for tok in _tokenizer.tokenize(normalized)]
        tokens = [tok for tok in tokens if tok]
        matches: list[PosMatch] = []
        for token in _pos_candidates(tokens):
            definition = self._taxonomy.lookup(token)
            if definition is not None:
                matches.append(PosMatch(definition=definition, token=token))
        return matches

    def phrase_pass(self, text: str) -> list[PhraseMatch]:
        prepared = _HORIZONTAL_SPACE.sub(" ", text.lower())
        matches: list[PhraseMatch] = []
        for hit in _PHRASE_PATTERN.finditer(prepared):
            phrase = hit.group(0).strip()
            words = [w.strip(".") for w in _TAIL_SPLIT.split(hit.group(1))]
            words = [w for w in words if len(w) > 1]
            candidates = words + [f"{a} {b}" for a, b in zip(words, words[1:])]
            for candidate in candidates:
                definition = self._taxonomy.lookup(candidate)
                if definition is not None:
                    matches.append(PhraseMatch(definition=definition, token=candidate, phrase=phrase))
        return matches

    # ------------------------------------------------------------------
    # Merge
    # ------------------------------------------------------------------

    def _to_skill(self, match: PassMatch) -> ExtractedSkill:
        definition = match.definition
        if isinstance(match, DirectMatch):
            confidence = BASE_CONFIDENCE
            if self._taxonomy.is_key(match.matched_text):
                confidence += KEY_BONUS
            required = is_required_context(match.context)
            if required:
                confidence += REQUIRED_BONUS
            if _EXPERIENCE_PATTERN.search(match.context):
                confidence += EXPERIENCE_BONUS
            context = match.context
        elif isinstance(match, PosMatch):
            confidence = POS_CONFIDENCE
            required = False
            context = match.token
        else:
            confidence = PHRASE_CONFIDENCE
            required = is_required_context(match.phrase)
            context = match.phrase

        return ExtractedSkill(
            name=definition.name,
            category=definition.category,
            confidence=round(min(1.0, confidence), 2),
            context=context,
            is_required=required,
            synonyms=list(definition.synonyms),
        )

    def extract(self, text: str) -> list[ExtractedSkill]:
        """Extract de-duplicated skills in discovery order.

        Blank text yields an empty list. Output is deterministic for a given
        taxonomy version and input text.
        """
        if not text or not text.strip():
            return []
        self._taxonomy.ensure_loaded()

        normalized = normalize_text(text)
        found: dict[str, ExtractedSkill] = {}
        pass_results: list[list] = [
            self.direct_pass(normalized),
            self.pos_pass(normalized),
            self.phrase_pass(text),
        ]
        for results in pass_results:
            for match in results:
                if match.definition.name not in found:
                    found[match.definition.name] = self._to_skill(match)

        logger.debug(
            "Extracted %d skills (direct=%d, pos=%d, phrase=%d)",
            len(found), *(len(r) for r in pass_results),
        )
        return list(found.values())
