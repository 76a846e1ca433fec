"""
Marketing toolkit generation pipeline.

Structured ad copy generation and search-grounded trend analysis against a
hosted generative model, plus the markdown tooling that turns analysis
output into renderable blocks and forwardable insight units.

Importing the package leaves logging untouched; embedding applications call
:func:`marketing_toolkit.logging_config.configure_logging` when they want the
package's structlog setup.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
