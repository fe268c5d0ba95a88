"""Tokenomics handler -- token utility, incentives and economic models."""

from maestro.core.task.models import QualityLevel
from maestro.handlers.base import PromptHandler


class TokenomicsHandler(PromptHandler):
    NAME = "tokenomics"
    ROLE = "Tokenomics Specialist"
    SKILLS = [
        "tokenomics design",
        "economic modeling",
        "game theory",
        "financial analysis",
        "behavioral economics",
        "platform economics",
        "defi",
        "smart contracts",
        "token utility",
        "incentive design",
        "payment systems",
        "security analysis",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: (
            "Basic tokenomics framework with core utility mechanisms and simple economic model"
        ),
        QualityLevel.HIGH: (
            "Comprehensive tokenomics design with detailed economic modeling, "
            "incentive analysis, and sustainability planning"
        ),
        QualityLevel.CRITICAL: (
            "Enterprise-grade tokenomics with advanced economic modeling, stress testing, "
            "audit-ready documentation, and regulatory compliance"
        ),
    }
    DESCRIPTION = "Designs token utility, supply dynamics and incentive structures."
    GUIDELINES = """
## Tokenomics Design Guidelines:

1. **Token Utility Design**: Multiple use cases that create genuine value and demand
2. **Economic Modeling**: Supply/demand dynamics, inflation/deflation mechanisms
3. **Incentive Alignment**: Reward structures that promote desired behaviors
4. **Sustainability Analysis**: Long-term viability and growth scenarios
5. **Risk Assessment**: Economic risks and mitigation strategies
6. **Implementation Roadmap**: Phased rollout with testing and validation
"""
