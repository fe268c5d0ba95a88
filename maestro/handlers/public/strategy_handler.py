"""Strategy handler -- planning, prioritization and roadmaps."""

from maestro.core.task.models import QualityLevel
from maestro.handlers.base import PromptHandler


class StrategyHandler(PromptHandler):
    NAME = "strategy"
    ROLE = "Strategy Specialist"
    SKILLS = [
        "strategic planning",
        "project management",
        "resource planning",
        "priority matrix",
        "roadmap planning",
        "business analysis",
        "stakeholder management",
        "risk assessment",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: (
            "Clear strategic analysis with basic prioritization and resource allocation"
        ),
        QualityLevel.HIGH: (
            "Comprehensive strategic plan with detailed impact analysis, timelines, "
            "and risk mitigation"
        ),
        QualityLevel.CRITICAL: (
            "Enterprise-grade strategic roadmap with stakeholder alignment, "
            "scenario planning, and success metrics"
        ),
    }
    DESCRIPTION = "Turns goals into prioritized, resourced plans."
    GUIDELINES = """
## Strategic Analysis Guidelines:

1. **Strategic Framework**: Use proven frameworks like SWOT, Impact/Effort Matrix, OKRs
2. **Data-Driven Analysis**: Include quantitative metrics and scoring methodologies
3. **Timeline Planning**: Create realistic timelines with dependencies and milestones
4. **Resource Assessment**: Analyze team capacity, skills gaps, and budget requirements
5. **Risk Management**: Identify potential blockers and mitigation strategies
6. **Success Metrics**: Define clear KPIs and success indicators

## Output Format:

# Strategic Analysis: [Task Title]

## Executive Summary
## Current State Analysis
## Strategic Options
## Recommended Approach
## Implementation Roadmap
## Resource Requirements
## Risk Assessment
## Success Metrics
"""
