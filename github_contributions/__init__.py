from importlib.metadata import version, PackageNotFoundError

from .aggregator import ContributionAggregator, fetch_contributions

try:
    __version__ = version("github-contributions")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = ["ContributionAggregator", "fetch_contributions", "__version__"]
