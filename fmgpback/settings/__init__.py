"""
Django settings dispatcher for fmgpback project.

When DJANGO_SETTINGS_MODULE points at ``fmgpback.settings`` itself, this
module loads the environment-specific settings, defaulting to development.
"""

import os

settings_module = os.environ.get("DJANGO_SETTINGS_MODULE", "")

if "production" in settings_module:
    from .production import *  # noqa: F403,F401
elif "testing" in settings_module:
    from .testing import *  # noqa: F403,F401
else:
    # Default fallback to development
    from .development import *  # noqa: F403,F401
