"""Mentor handler -- onboarding and knowledge transfer plans."""

from maestro.core.task.models import QualityLevel
from maestro.handlers.base import PromptHandler


class MentorHandler(PromptHandler):
    NAME = "mentor"
    ROLE = "Technical Mentor"
    SKILLS = [
        "technical mentoring",
        "knowledge transfer",
        "communication planning",
        "onboarding",
        "training",
        "documentation",
        "team leadership",
        "skill development",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: (
            "Basic knowledge transfer with essential information and communication plan"
        ),
        QualityLevel.HIGH: (
            "Comprehensive mentoring program with structured learning path, "
            "documentation, and ongoing support"
        ),
        QualityLevel.CRITICAL: (
            "Enterprise-grade knowledge transfer with detailed competency framework, "
            "assessment metrics, and long-term development planning"
        ),
    }
    DESCRIPTION = "Plans onboarding, training and knowledge transfer."
    GUIDELINES = """
## Technical Mentoring Guidelines:

1. **Knowledge Assessment**: Evaluate current skill levels and knowledge gaps
2. **Learning Path Design**: Structured approach to knowledge acquisition
3. **Communication Strategy**: Effective knowledge transfer methods and channels
4. **Documentation Framework**: Essential documentation and reference materials
5. **Support Structure**: Ongoing mentoring and escalation procedures
6. **Progress Tracking**: Milestones and competency validation methods
"""
