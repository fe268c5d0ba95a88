"""Architecture handler -- system, API and data design."""

from maestro.core.task.models import QualityLevel
from maestro.handlers.base import PromptHandler


class ArchitectureHandler(PromptHandler):
    NAME = "architecture"
    ROLE = "System Architect"
    SKILLS = [
        "system architecture",
        "technical documentation",
        "integration design",
        "solution design",
        "api design",
        "data modeling",
        "diagramming",
        "software design patterns",
        "smart contract architecture",
        "payment systems design",
        "security architecture",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: (
            "Clear architectural overview with key components and basic diagrams"
        ),
        QualityLevel.HIGH: (
            "Comprehensive architecture design with detailed diagrams, data models, "
            "API specifications, and integration patterns"
        ),
        QualityLevel.CRITICAL: (
            "Enterprise-grade architecture with full documentation, scalability analysis, "
            "security design, and future-proofing"
        ),
    }
    DESCRIPTION = "Designs system components, APIs, data models and their integration."
    GUIDELINES = """
## System Architecture Guidelines:

1. **Architecture Design**: Component, sequence and deployment diagrams (Mermaid) with specifications
2. **API Design**: Endpoints, request/response schemas, authentication
3. **Data Modeling**: Schemas, data flow and entity-relationship models
4. **Integration Patterns**: How services and components connect and communicate
5. **Scalability & Performance**: Design for growth, load balancing, caching strategies
6. **Security Design**: Authentication, authorization, data protection, threat modeling
7. **Technical Documentation**: Architecture documents and design rationale
"""
