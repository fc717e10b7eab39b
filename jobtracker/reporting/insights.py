"""
AI insight generation for custom reports.

Fans a report's aggregated data out to one text-generation call per requested
focus area. Calls run concurrently; a failed or slow focus area is dropped on
its own and never takes the others (or the report) down with it.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from jobtracker.core.ai_client import GenerationOptions, TextGenerator
from jobtracker.core.config import settings
from jobtracker.core.models import FocusArea, resolve_focus_areas
from jobtracker.reporting import prompts
from jobtracker.reporting.schemas import Insight, ReportConfig, ReportData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsightGenerator:
    """How one focus area turns report data into a prompt, and how hard to sample."""
    title: str
    build_prompt: Callable[[ReportData], str]
    options: GenerationOptions


INSIGHT_GENERATORS: Dict[FocusArea, InsightGenerator] = {
    FocusArea.TRENDS: InsightGenerator(
        title="Job Search Trends",
        build_prompt=prompts.build_trends_prompt,
        options=GenerationOptions(temperature=0.7, max_tokens=300),
    ),
    FocusArea.RECOMMENDATIONS: InsightGenerator(
        title="Strategic Recommendations",
        build_prompt=prompts.build_recommendations_prompt,
        options=GenerationOptions(temperature=0.8, max_tokens=400),
    ),
    FocusArea.STRENGTHS: InsightGenerator(
        title="Your Strengths",
        build_prompt=prompts.build_strengths_prompt,
        options=GenerationOptions(temperature=0.7, max_tokens=250),
    ),
    FocusArea.IMPROVEMENTS: InsightGenerator(
        title="Areas for Improvement",
        build_prompt=prompts.build_improvements_prompt,
        options=GenerationOptions(temperature=0.8, max_tokens=300),
    ),
    FocusArea.PATTERNS: InsightGenerator(
        title="Pattern Analysis",
        build_prompt=prompts.build_patterns_prompt,
        options=GenerationOptions(temperature=0.7, max_tokens=250),
    ),
}

UNAVAILABLE_INSIGHT = Insight(
    title="Insight Generation Unavailable",
    content="AI insights could not be generated at this time. Please try again later.",
)


class InsightOrchestrator:
    """Generates narrative insights for a report using an injected TextGenerator."""

    def __init__(self, text_generator: TextGenerator, timeout: Optional[float] = None):
        self.text_generator = text_generator
        self.timeout = timeout if timeout is not None else settings.insight_timeout_seconds

    async def generate_insights(
        self,
        report_data: Union[ReportData, Dict[str, Any]],
        config: ReportConfig,
    ) -> List[Insight]:
        """
        Generate one insight per requested focus area, in request order.

        Focus areas whose call fails, times out or returns empty text are
        skipped. If the inputs themselves cannot be processed, a single
        'unavailable' placeholder is returned instead of raising.
        """
        try:
            focus_areas = resolve_focus_areas(config.insights_focus)
            if not focus_areas:
                return []

            if not isinstance(report_data, ReportData):
                report_data = ReportData.model_validate(report_data)

            # Prompts are built up front: bad input is a whole-report problem, not a per-area one.
            requests = [
                (area, INSIGHT_GENERATORS[area], INSIGHT_GENERATORS[area].build_prompt(report_data))
                for area in focus_areas
            ]

            results = await asyncio.gather(
                *(self._generate_one(area, generator, prompt) for area, generator, prompt in requests)
            )
            insights = [insight for insight in results if insight is not None]
            logger.info(
                "Generated %d/%d insights for report %r",
                len(insights), len(requests), report_data.report_name,
            )
            return insights
        except Exception:
            logger.exception("Insight generation failed for the whole report")
            return [UNAVAILABLE_INSIGHT.model_copy()]

    async def _generate_one(
        self,
        area: FocusArea,
        generator: InsightGenerator,
        prompt: str,
    ) -> Optional[Insight]:
        try:
            text = await asyncio.wait_for(
                self.text_generator.generate(prompt, generator.options),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Insight '%s' timed out after %.1fs", area.value, self.timeout)
            return None
        except Exception as e:
            logger.warning("Insight '%s' failed: %s", area.value, e)
            return None

        if not isinstance(text, str) or not text.strip():
            logger.warning("Insight '%s' returned no usable text", area.value)
            return None

        return Insight(title=generator.title, content=text.strip(), type=area)
