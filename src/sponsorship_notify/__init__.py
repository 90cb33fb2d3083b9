"""sponsorship-notify Package.

Thanks new GitHub sponsors on X/Twitter. A signed GitHub sponsorship
webhook with action "created" triggers an image upload followed by a
thank-you post that references it.

Exported:
    main: Entry point for the sponsorship-notify console command
    __version__: Semantic version printed by --version
"""
from .sponsorship_notify import main, __version__

__all__ = ["main", "__version__"]
