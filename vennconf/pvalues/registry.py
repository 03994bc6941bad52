"""Lookup of p-value calculators by name or numeric id."""

from typing import Dict, List, Type, Union

from .base import PValueCalculator
from .interpolated import LinearInterpolationPValue, SplineInterpolationPValue
from .standard import SmoothedPValue, StandardPValue

_CALCULATORS: Dict[str, Type[PValueCalculator]] = {
    cls.name.lower(): cls
    for cls in (StandardPValue, SmoothedPValue, LinearInterpolationPValue, SplineInterpolationPValue)
}


def available_calculators() -> List[str]:
    """Registered calculator names ordered by id."""
    return [cls.name for cls in sorted(_CALCULATORS.values(), key=lambda c: c.calculator_id)]


def get_calculator_class(key: Union[str, int]) -> Type[PValueCalculator]:
    if isinstance(key, bool):
        raise ValueError(f"Invalid p-value calculator key: {key!r}")
    if isinstance(key, int):
        for cls in _CALCULATORS.values():
            if cls.calculator_id == key:
                return cls
        raise ValueError(f"Unknown p-value calculator id: {key}")
    normalized = str(key).strip().lower().replace("_", "").replace("-", "")
    for name, cls in _CALCULATORS.items():
        if name == normalized or f"{name}pvalue" == normalized:
            return cls
    raise ValueError(
        f"Unknown p-value calculator: {key!r}, available: {', '.join(available_calculators())}"
    )


def get_calculator(key: Union[str, int], **kwargs) -> PValueCalculator:
    """Instantiate an unbuilt calculator, ``kwargs`` go to the constructor."""
    return get_calculator_class(key)(**kwargs)
