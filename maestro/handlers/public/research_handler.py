"""Market research handler -- competitive analysis and tool evaluation."""

from maestro.core.task.models import QualityLevel
from maestro.handlers.base import PromptHandler


class ResearchHandler(PromptHandler):
    NAME = "research"
    ROLE = "Market Research Specialist"
    SKILLS = [
        "competitive analysis",
        "market research",
        "strategic thinking",
        "data analysis",
        "tool evaluation",
        "comparative analysis",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: "Provide basic analysis with key findings and recommendations",
        QualityLevel.HIGH: (
            "Comprehensive analysis with detailed methodology, data sources, "
            "and strategic insights"
        ),
        QualityLevel.CRITICAL: (
            "Exhaustive research with multiple data sources, risk analysis, "
            "and implementation roadmap"
        ),
    }
    DESCRIPTION = "Researches markets, competitors and tools and recommends a course of action."
    GUIDELINES = """
## Research Guidelines:

1. **Methodology**: State how the information was gathered and compared
2. **Comparison Matrix**: Put competing options side by side on the same criteria
3. **Key Findings**: Summarize what matters most for the decision
4. **Recommendations**: Give a clear, justified recommendation with next steps

Structure the output as Markdown with an executive summary first.
"""
