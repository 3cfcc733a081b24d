"""Default wizard registry.

Builds the StepCatalog with all six wizards. The controller receives it by
injection; nothing else in the engine knows the concrete wizards.
"""

from fanjobo.wizards.path import PATH_WIZARDS
from fanjobo.wizards.profile import PROFILE_WIZARD
from fanjobo.wizards.steps import StepCatalog
from fanjobo.wizards.submission import SUBMISSION_WIZARD


def build_default_catalog() -> StepCatalog:
    """Catalog with the profile, submission and path planner wizards."""
    return StepCatalog([PROFILE_WIZARD, SUBMISSION_WIZARD, *PATH_WIZARDS])
