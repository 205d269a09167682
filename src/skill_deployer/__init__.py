"""Deploy canonical skills to AI coding platforms and keep them in sync."""

__version__ = "0.1.0"

# Export protocol interfaces for type hints and dependency injection
from skill_deployer.protocols import (
    DeploymentAdapter,
    FileSystem,
    SkillSource,
)

__all__ = [
    "__version__",
    "DeploymentAdapter",
    "FileSystem",
    "SkillSource",
]
