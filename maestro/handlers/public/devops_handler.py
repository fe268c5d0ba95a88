"""DevOps handler -- environments, access, CI/CD and monitoring."""

from maestro.core.task.models import QualityLevel
from maestro.handlers.base import PromptHandler


class DevOpsHandler(PromptHandler):
    NAME = "devops"
    ROLE = "DevOps Specialist"
    SKILLS = [
        "devops",
        "access management",
        "environment configuration",
        "infrastructure",
        "deployment",
        "ci/cd",
        "security",
        "monitoring",
        "automation",
    ]
    QUALITY_STANDARDS = {
        QualityLevel.STANDARD: "Basic environment setup with essential tools and access",
        QualityLevel.HIGH: (
            "Comprehensive development environment with automation, monitoring, "
            "and security best practices"
        ),
        QualityLevel.CRITICAL: (
            "Production-grade infrastructure with full automation, security compliance, "
            "and disaster recovery"
        ),
    }
    DESCRIPTION = "Sets up environments, pipelines and access for the team."
    GUIDELINES = """
## DevOps Implementation Guidelines:

1. **Environment Setup**: Complete development environment configuration
2. **Access Management**: Repository access, permissions, and security protocols
3. **Tool Configuration**: IDE setup, build tools, testing frameworks
4. **Automation**: CI/CD pipelines, deployment scripts, monitoring
5. **Security**: Credential management, access controls, security scanning
6. **Documentation**: Setup guides, troubleshooting, best practices
"""
