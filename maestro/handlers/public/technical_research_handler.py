"""Technical research handler -- protocol and integration analysis."""

from maestro.core.task.models import QualityLevel
from maestro.handlers.base import PromptHandler


class TechnicalResearchHandler(PromptHandler):
    NAME = "technical_research"
    ROLE = "Technical Research Specialist"
    SKILLS = [
        "protocol analysis",
        "technical research",
        "integration planning",
        "api analysis",
        "system architecture",
        "technology evaluation",
        "feasibility analysis",
        "technical documentation",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: (
            "Basic technical research with key findings and implementation overview"
        ),
        QualityLevel.HIGH: (
            "Comprehensive technical analysis with detailed integration plans, "
            "code examples, and risk assessment"
        ),
        QualityLevel.CRITICAL: (
            "Enterprise-grade technical research with proof-of-concept implementation, "
            "security analysis, and production readiness assessment"
        ),
    }
    DESCRIPTION = "Evaluates protocols, APIs and technologies for integration."
    GUIDELINES = """
## Technical Research Guidelines:

1. **Technical Specification Analysis**: Deep dive into protocols, APIs, and architectures
2. **Integration Assessment**: Feasibility, complexity, and implementation approaches
3. **Code Examples**: Practical implementation samples and proof-of-concepts
4. **Performance Analysis**: Scalability, latency, and resource requirements
5. **Security Evaluation**: Security implications and best practices
6. **Ecosystem Analysis**: Available tools, libraries, and community support
"""
