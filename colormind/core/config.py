"""
Configuration primitives for colormind.

Defines the RGBA sample type, enums for deficiency kinds and transform
modes, the confusion-line record and a dataclass collecting the options of
a single transform call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, NamedTuple, Optional, Union

from colormind.core.errors import InvalidAmountError, UnknownDeficiencyKindError


class RGBA(NamedTuple):
    """A color sample with integer channels in 0-255."""

    r: int
    g: int
    b: int
    a: int = 255

    @property
    def is_achromatic(self) -> bool:
        return self.r == self.g == self.b


class DeficiencyKind(Enum):
    """Color vision deficiency selection."""

    NORMAL = "Normal"            # No deficiency (identity)
    PROTANOPE = "Protanope"      # L cones missing, reds reduced
    DEUTERANOPE = "Deuteranope"  # M cones missing, greens reduced
    TRITANOPE = "Tritanope"      # S cones missing, blues reduced
    ACHROMATOPE = "Achromatope"  # Luminance-only blend
    CUSTOM = "Custom"            # Caller-supplied confusion line

    @property
    def is_dichromat(self) -> bool:
        return self in (
            DeficiencyKind.PROTANOPE,
            DeficiencyKind.DEUTERANOPE,
            DeficiencyKind.TRITANOPE,
        )


class TransformMode(Enum):
    """Which transform a buffer is run through."""

    SIMULATE = "simulate"    # Render what a CVD viewer sees
    DALTONIZE = "daltonize"  # Shift lost information into visible channels


@dataclass(frozen=True)
class ConfusionLine:
    """
    Confusion line in CIE xy chromaticity space.

    ``(x, y)`` is the copunctal anchor point; ``m`` and ``yint`` are the
    slope and y-intercept of the line colors collapse onto.
    """

    x: float
    y: float
    m: float
    yint: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfusionLine":
        try:
            return cls(
                x=float(data["x"]),
                y=float(data["y"]),
                m=float(data["m"]),
                yint=float(data["yint"]),
            )
        except KeyError as exc:
            raise ValueError(f"Confusion line is missing field {exc.args[0]!r}") from exc


def parse_kind(kind: Union[DeficiencyKind, str]) -> DeficiencyKind:
    """Resolve an enum member or its string value to a :class:`DeficiencyKind`."""

    if isinstance(kind, DeficiencyKind):
        return kind
    try:
        return DeficiencyKind(kind)
    except ValueError:
        pass
    if isinstance(kind, str):
        for member in DeficiencyKind:
            if member.value.lower() == kind.lower() or member.name == kind.upper():
                return member
    raise UnknownDeficiencyKindError(f"Unknown deficiency kind: {kind!r}")


def parse_mode(mode: Union[TransformMode, str]) -> TransformMode:
    """Resolve an enum member or its string value to a :class:`TransformMode`."""

    if isinstance(mode, TransformMode):
        return mode
    try:
        return TransformMode(str(mode).lower())
    except ValueError:
        raise ValueError(f"Unknown transform mode: {mode!r}") from None


def check_amount(amount: Any) -> float:
    """
    Return ``amount`` as a float, rejecting anything outside [0, 1].

    Raises
    ------
    InvalidAmountError
        If the value is not a number, is NaN or infinite, or is out of range.
    """

    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise InvalidAmountError(f"Amount {amount!r} is not a number") from None
    if not math.isfinite(value) or not (0.0 <= value <= 1.0):
        raise InvalidAmountError(f"Amount {amount} out of range [0, 1]")
    return value


@dataclass
class TransformConfig:
    """
    Complete configuration for one transform call.

    Defaults reproduce the plugin's out-of-the-box behaviour: full-strength
    protanope simulation.
    """

    kind: DeficiencyKind = DeficiencyKind.PROTANOPE
    amount: float = 1.0  # 0 = identity, 1 = full effect
    custom_line: Optional[ConfusionLine] = None
    mode: TransformMode = TransformMode.SIMULATE

    # Daltonization ignores ``amount`` unless this is set
    blend_daltonize: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.kind, DeficiencyKind):
            if self.custom_line is not None:
                try:
                    self.kind = parse_kind(self.kind)
                except UnknownDeficiencyKindError:
                    self.kind = DeficiencyKind.CUSTOM
            else:
                self.kind = parse_kind(self.kind)
        self.mode = parse_mode(self.mode)

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "TransformConfig":
        """
        Build a config from the plain option mapping used by UI callers.

        Recognised keys are ``mode``, ``kind``, ``amount``, ``customLine``
        (``custom_line`` is accepted too) and ``blendDaltonize``. Unknown
        keys are rejected so a typo never silently falls back to a default.
        """

        known = {"mode", "kind", "amount", "customLine", "custom_line", "blendDaltonize"}
        unknown = set(options) - known
        if unknown:
            raise ValueError(f"Unknown transform options: {sorted(unknown)}")

        line_data = options.get("customLine", options.get("custom_line"))
        custom_line = None
        if line_data is not None:
            custom_line = (
                line_data
                if isinstance(line_data, ConfusionLine)
                else ConfusionLine.from_dict(line_data)
            )

        return cls(
            kind=options.get("kind", DeficiencyKind.PROTANOPE),
            amount=options.get("amount", 1.0),
            custom_line=custom_line,
            mode=options.get("mode", TransformMode.SIMULATE),
            blend_daltonize=bool(options.get("blendDaltonize", False)),
        )

    def validate(self, mode: Optional[TransformMode] = None) -> None:
        """
        Validate configuration parameters.

        ``mode`` checks the kind against a transform other than ``self.mode``;
        the single-sample entry points pass the transform they run.
        """

        check_amount(self.amount)

        if self.kind == DeficiencyKind.CUSTOM and self.custom_line is None:
            raise UnknownDeficiencyKindError("Custom deficiency requires a custom confusion line")

        if (mode or self.mode) == TransformMode.DALTONIZE and self.kind in (
            DeficiencyKind.ACHROMATOPE,
            DeficiencyKind.CUSTOM,
        ):
            raise UnknownDeficiencyKindError(
                f"No daltonization matrix for deficiency kind {self.kind.value}"
            )
