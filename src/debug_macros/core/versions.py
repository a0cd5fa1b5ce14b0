"""
Version Range Checks.

Deprecation ranges use npm semantics (``>=2.0.0``, ``^3.1``, ``2.x``), so the
comparison is delegated to ``semantic_version.NpmSpec``.
"""

import logging

from semantic_version import NpmSpec, Version

logger = logging.getLogger(__name__)


def satisfies(version: str, version_range: str) -> bool:
  """
  Checks whether ``version`` falls inside ``version_range``.

  Like npm's ``semver.satisfies``, an unparsable version or range never
  matches.

  Args:
      version: A semantic version, e.g. ``"2.3.0"``.
      version_range: An npm range expression.

  Returns:
      bool: True if the version satisfies the range.
  """
  try:
    return Version(version) in NpmSpec(version_range)
  except ValueError:
    logger.warning("Cannot compare version %r against range %r; treating as unsatisfied", version, version_range)
    return False
