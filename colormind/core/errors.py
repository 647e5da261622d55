"""
Exception hierarchy for colormind.

Every error derives from :class:`ColorMindError` and from the builtin a
caller would naturally catch, so ``except ValueError`` keeps working for
bad configuration.
"""


class ColorMindError(Exception):
    """Base class for all colormind errors."""


class UnknownDeficiencyKindError(ColorMindError, ValueError):
    """Deficiency kind is not recognised and no custom confusion line was given."""


class InvalidAmountError(ColorMindError, ValueError):
    """Blend amount outside [0, 1]."""


class ColorDivisionError(ColorMindError, ZeroDivisionError):
    """A chromaticity or confusion-line computation divided by zero."""
