"""Infrastructure handler -- vendor comparison, cost and capacity planning."""

from maestro.core.task.models import QualityLevel
from maestro.handlers.base import PromptHandler


class InfrastructureHandler(PromptHandler):
    NAME = "infrastructure"
    ROLE = "Infrastructure Specialist"
    SKILLS = [
        "infrastructure analysis",
        "cost modeling",
        "performance evaluation",
        "vendor assessment",
        "scalability planning",
        "sla analysis",
        "cloud architecture",
        "service comparison",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: (
            "Basic infrastructure analysis with cost comparison and basic performance metrics"
        ),
        QualityLevel.HIGH: (
            "Comprehensive infrastructure assessment with detailed cost modeling, "
            "performance benchmarks, and scalability planning"
        ),
        QualityLevel.CRITICAL: (
            "Enterprise-grade infrastructure strategy with multi-vendor analysis, "
            "disaster recovery planning, and compliance assessment"
        ),
    }
    DESCRIPTION = "Compares hosting and service options on cost, performance and risk."
    GUIDELINES = """
## Infrastructure Analysis Guidelines:

1. **Service Comparison**: Detailed analysis of multiple providers with feature matrices
2. **Cost Modeling**: Pricing analysis with usage scenarios and projections
3. **Performance Assessment**: Latency, throughput, reliability, and global availability
4. **Scalability Planning**: Growth scenarios and capacity planning
5. **Risk Assessment**: Vendor lock-in, service reliability, and mitigation strategies
6. **Implementation Strategy**: Migration planning and deployment recommendations
"""
