"""Pipeline orchestrator: wires extraction, matching and recommendations behind the cache.

Flow:
    url + JobText
      ├─ is_valid_job_content()            → NoContentError if it fails
      ├─ AnalysisCache.lookup(url, hash)   → cached GapAnalysisResult (hit)
      │       ↓ miss
      ├─ ProfileProvider.get_user_profile() (await)
      ├─ SkillExtractor.extract(text)      → list[ExtractedSkill]
      ├─ GapAnalyzer.analyze(profile, ...) → GapAnalysisResult
      ├─ RecommendationEngine.recommend()  → attached recommendations
      ├─ AnalysisCache.store()
      └─ HistoryStore.append_history()     (await, failures logged)

One engine serves one page context. Components are constructed per engine
and can be injected for tests or to share a loaded taxonomy.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Protocol, Sequence

from skillgap.config import Settings, settings as default_settings
from skillgap.errors import (
    AnalysisError,
    NoContentError,
    ProfileUnavailableError,
    SkillGapError,
)
from skillgap.models.analysis import GapAnalysisResult, Recommendation
from skillgap.models.job import AnalysisProgress, AnalysisStage, JobText
from skillgap.models.profile import UserProfile
from skillgap.models.skills import ExtractedSkill
from skillgap.models.trends import KeywordSuggestion, ResumeSuggestion, SkillTrend
from skillgap.services.analysis_cache import AnalysisCache, cache_key, content_hash
from skillgap.services.fuzzy_matcher import FuzzyMatcher
from skillgap.services.gap_analyzer import GapAnalyzer
from skillgap.services.keyword_optimizer import KeywordOptimizer
from skillgap.services.recommendation_engine import RecommendationEngine
from skillgap.services.skill_extractor import SkillExtractor
from skillgap.services.taxonomy import SkillTaxonomy
from skillgap.services.text_normalizer import is_valid_job_content
from skillgap.services.trend_analyzer import TrendAnalyzer

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[AnalysisProgress], None]


class ProfileProvider(Protocol):
    async def get_user_profile(self) -> UserProfile | None: ...


class HistoryStore(Protocol):
    async def append_history(self, result: GapAnalysisResult) -> None: ...

    async def query_history(self) -> list[GapAnalysisResult]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SkillGapEngine:
    """Skill gap analysis for one page context."""

    def __init__(
        self,
        profile_provider: ProfileProvider | None = None,
        history_store: HistoryStore | None = None,
        taxonomy: SkillTaxonomy | None = None,
        extractor: SkillExtractor | None = None,
        gap_analyzer: GapAnalyzer | None = None,
        recommender: RecommendationEngine | None = None,
        trend_analyzer: TrendAnalyzer | None = None,
        keyword_optimizer: KeywordOptimizer | None = None,
        cache: AnalysisCache | None = None,
        clock: Callable[[], datetime] = _utcnow,
        config: Settings | None = None,
    ) -> None:
        self._config = config or default_settings
        self._clock = clock
        self.profile_provider = profile_provider
        self.history_store = history_store

        self.taxonomy = taxonomy or SkillTaxonomy(config=self._config)
        self.extractor = extractor or SkillExtractor(self.taxonomy, config=self._config)
        self.gap_analyzer = gap_analyzer or GapAnalyzer(FuzzyMatcher(config=self._config), clock=clock)
        self.recommender = recommender or RecommendationEngine(config=self._config)
        self.trend_analyzer = trend_analyzer or TrendAnalyzer()
        self.keyword_optimizer = keyword_optimizer or KeywordOptimizer(
            trend_analyzer=self.trend_analyzer, config=self._config
        )
        self.cache = cache or AnalysisCache(clock=clock, config=self._config)

        self._pending: dict[str, asyncio.Task] = {}
        self._callbacks: list[ProgressCallback] = []

    # ------------------------------------------------------------------
    # Synchronous stages
    # ------------------------------------------------------------------

    def extract_skills(self, text: str) -> list[ExtractedSkill]:
        return self.extractor.extract(text)

    def analyze_gap(
        self, profile: UserProfile, job_skills: Iterable[ExtractedSkill], job_id: str
    ) -> GapAnalysisResult:
        return self.gap_analyzer.analyze(profile, job_skills, job_id)

    def recommend(self, missing: Iterable[ExtractedSkill], profile: UserProfile) -> list[Recommendation]:
        return self.recommender.recommend(missing, profile)

    def trends(self, history: Sequence[GapAnalysisResult], limit: int | None = None) -> list[SkillTrend]:
        return self.trend_analyzer.trends(history, limit)

    def keyword_suggestions(
        self, history: Sequence[GapAnalysisResult], profile: UserProfile
    ) -> list[KeywordSuggestion]:
        return self.keyword_optimizer.keyword_suggestions(history, profile)

    def optimization_suggestions(
        self, history: Sequence[GapAnalysisResult], profile: UserProfile
    ) -> list[ResumeSuggestion]:
        return self.keyword_optimizer.optimization_suggestions(history, profile)

    async def trends_from_history(self, limit: int | None = None) -> list[SkillTrend]:
        """Trends over the history store's entries, newest `history_limit` at most."""
        if self.history_store is None:
            return []
        history = await self.history_store.query_history()
        return self.trends(history[-self._config.history_limit:], limit)

    # ------------------------------------------------------------------
    # Progress reporting
    # ------------------------------------------------------------------

    def on_progress(self, callback: ProgressCallback) -> None:
        self._callbacks.append(callback)

    def remove_progress_callback(self, callback: ProgressCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    @property
    def is_analyzing(self) -> bool:
        return any(not task.done() for task in self._pending.values())

    def _emit(self, stage: AnalysisStage, progress: int, message: str) -> None:
        update = AnalysisProgress(stage=stage, progress=progress, message=message, timestamp=self._clock())
        for callback in list(self._callbacks):
            try:
                callback(update)
            except Exception as e:
                logger.warning("Progress callback failed at %s: %s", stage.value, e)

    # ------------------------------------------------------------------
    # Cached pipeline
    # ------------------------------------------------------------------

    async def analyze_cached(
        self, url: str, content: JobText, force_refresh: bool = False
    ) -> GapAnalysisResult:
        """Full pipeline behind the cache.

        A second call for the same URL and content while the first is still
        running awaits the same result instead of starting another analysis.
        force_refresh always starts a new computation, which overwrites the
        cache entry when it completes.

        Raises:
            NoContentError: content does not look like a job posting.
            ProfileUnavailableError: no profile could be obtained.
            AnalysisError: any other stage failure, with stage and job id.
        """
        key = cache_key(url, content_hash(content))
        pending = self._pending.get(key)
        if pending is not None and not pending.done() and not force_refresh:
            logger.debug("Joining in-flight analysis for %s", key)
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._run(url, content, force_refresh))
        self._pending[key] = task
        task.add_done_callback(lambda done: self._forget(key, done))
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        # A forced refresh may have replaced the pending task for this key
        if self._pending.get(key) is task:
            del self._pending[key]

    async def _run(self, url: str, content: JobText, force_refresh: bool) -> GapAnalysisResult:
        self._emit(AnalysisStage.INITIALIZING, 0, "Starting analysis")
        self._emit(AnalysisStage.EXTRACTING_CONTENT, 10, "Validating job content")
        if not is_valid_job_content(content, self._config):
            logger.warning("Invalid job content at %s", url)
            self._emit(AnalysisStage.ERROR, 100, "Job content not found")
            raise NoContentError(
                "Job content is missing or does not look like a job posting",
                stage=AnalysisStage.EXTRACTING_CONTENT.value,
            )

        job_id = f"job_{content_hash(content)}"
        try:
            result = await self.cache.get_or_compute_async(
                url,
                content,
                lambda: self._compute(content, job_id),
                force_refresh=force_refresh,
            )
        except SkillGapError:
            self._emit(AnalysisStage.ERROR, 100, "Analysis failed")
            raise

        self._emit(AnalysisStage.COMPLETE, 100, "Analysis complete")
        logger.info("Analysis complete for %s: overall match %.2f", job_id, result.overall_match)
        return result

    async def _load_profile(self, job_id: str) -> UserProfile:
        stage = AnalysisStage.INITIALIZING.value
        if self.profile_provider is None:
            raise ProfileUnavailableError("No profile provider configured", stage=stage, job_id=job_id)
        try:
            profile = await self.profile_provider.get_user_profile()
        except Exception as e:
            raise ProfileUnavailableError(
                f"Profile provider failed: {e}", stage=stage, job_id=job_id
            ) from e
        if profile is None:
            raise ProfileUnavailableError("No user profile found", stage=stage, job_id=job_id)
        return profile

    async def _compute(self, content: JobText, job_id: str) -> GapAnalysisResult:
        profile = await self._load_profile(job_id)

        stage = AnalysisStage.EXTRACTING_SKILLS
        try:
            self._emit(stage, 30, "Extracting skills")
            skills = self.extract_skills(content.full_text())

            stage = AnalysisStage.MATCHING_SKILLS
            self._emit(stage, 60, f"Matching {len(skills)} skills")
            result = self.analyze_gap(profile, skills, job_id)

            stage = AnalysisStage.GENERATING_RECOMMENDATIONS
            self._emit(stage, 80, "Generating recommendations")
            recommendations = self.recommend(result.missing, profile)
            result = result.model_copy(update={"recommendations": recommendations})
        except SkillGapError:
            raise
        except Exception as e:
            logger.error("Analysis failed at %s for %s: %s", stage.value, job_id, e)
            raise AnalysisError(str(e), stage=stage.value, job_id=job_id) from e

        await self._append_history(result)
        return result

    async def _append_history(self, result: GapAnalysisResult) -> None:
        if self.history_store is None:
            return
        try:
            await self.history_store.append_history(result)
        except Exception as e:
            logger.warning("Failed to append %s to history: %s", result.job_id, e)
