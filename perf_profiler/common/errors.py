"""Error handling policy helpers.

Provides consistent error raising and warning patterns across the codebase.
"""

from loguru import logger


def warn_soft_degrade(component: str, issue: str, fallback: str) -> None:
    """Log a warning for optional component failures with soft degradation.

    Parameters
    ----------
    component : str
        Name of the component that degraded
    issue : str
        Description of what failed
    fallback : str
        What behavior will occur instead
    """
    logger.warning(
        "Component '{}' issue: {}. Fallback: {}",
        component,
        issue,
        fallback,
    )
