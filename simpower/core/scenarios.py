"""
Effect-size scenarios for SimPower.

A scenario names one (control, treatment, sd) configuration of the
two-group experiment. Analyses run once per scenario so that, for
example, a "biologically important" effect and a "smallest detectable"
effect can be planned side by side without duplicating code.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, List, Optional, Union

from ..exceptions import InvalidParameterError
from ..utils.validators import _validate_mean, _validate_sd


@dataclass(frozen=True)
class EffectScenario:
    """A named two-group effect-size configuration.

    Attributes:
        name: Scenario label used in tables, plots and result keys.
        control_mean: Mean outcome of the control group.
        treatment_mean: Mean outcome of the treatment group.
        sd: Standard deviation of the control group (and of the
            treatment group unless *treatment_sd* is given).
        treatment_sd: Optional separate treatment-group SD.
        description: Free-text note shown in printed results.
    """

    name: str
    control_mean: float
    treatment_mean: float
    sd: float
    treatment_sd: Optional[float] = None
    description: str = field(default="", compare=False)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidParameterError("Scenario name must be a non-empty string")

        result = _validate_mean(self.control_mean, "control_mean")
        result = result.merge(_validate_mean(self.treatment_mean, "treatment_mean"))
        result = result.merge(_validate_sd(self.sd, "sd"))
        if self.treatment_sd is not None:
            result = result.merge(_validate_sd(self.treatment_sd, "treatment_sd"))
        result.raise_if_invalid()

    @property
    def group_sds(self):
        """``(control_sd, treatment_sd)`` pair."""
        return self.sd, (self.treatment_sd if self.treatment_sd is not None else self.sd)

    @property
    def effect_size(self) -> float:
        """Raw difference of means (treatment minus control)."""
        return self.treatment_mean - self.control_mean

    @property
    def cohens_d(self) -> float:
        """Standardised effect size using the pooled SD of both groups."""
        control_sd, treatment_sd = self.group_sds
        pooled = ((control_sd**2 + treatment_sd**2) / 2) ** 0.5
        return self.effect_size / pooled

    def to_dict(self) -> Dict[str, Union[str, float, None]]:
        return {
            "name": self.name,
            "control_mean": self.control_mean,
            "treatment_mean": self.treatment_mean,
            "sd": self.sd,
            "treatment_sd": self.group_sds[1],
            "effect_size": self.effect_size,
            "cohens_d": self.cohens_d,
        }


# Skin cancer growth (mm/month) under placebo vs. a new drug.
# Control: mean 0.12, SD 0.25. The "biologically important" treatment
# reverses growth; the "smallest detectable" one barely changes it.
DEFAULT_SCENARIOS = (
    EffectScenario(
        name="biologically_important",
        control_mean=0.12,
        treatment_mean=-0.01,
        sd=0.25,
        description="Treatment produces negative mean growth",
    ),
    EffectScenario(
        name="smallest_detectable",
        control_mean=0.12,
        treatment_mean=0.11,
        sd=0.25,
        description="Smallest change in growth worth detecting",
    ),
)


def _scenario_from_params(params: Dict[str, Any]) -> EffectScenario:
    """Build a scenario from keyword parameters, rejecting unknown or missing keys."""
    accepted = [f.name for f in fields(EffectScenario)]
    required = [f.name for f in fields(EffectScenario) if f.name not in ("treatment_sd", "description")]
    label = params.get("name", "<unnamed>")

    errors = []
    unknown = sorted(str(k) for k in params if k not in accepted)
    if unknown:
        errors.append(f"Scenario '{label}' has unknown parameters: {', '.join(unknown)}")
    missing = [k for k in required if k not in params]
    if missing:
        errors.append(f"Scenario '{label}' is missing parameters: {', '.join(missing)}")
    if errors:
        raise InvalidParameterError("\n".join(errors))

    return EffectScenario(**params)


def _normalize_scenarios(scenarios: Union[EffectScenario, Dict, Iterable]) -> List[EffectScenario]:
    """Turn user scenario input into a list of ``EffectScenario``.

    Accepts a single scenario, a mapping ``{name: {control_mean: ...}}``,
    or an iterable of scenarios / keyword dicts. Names must be unique.
    """
    if isinstance(scenarios, EffectScenario):
        items: List[EffectScenario] = [scenarios]
    elif isinstance(scenarios, dict):
        items = []
        for name, params in scenarios.items():
            if not isinstance(params, dict):
                raise InvalidParameterError(f"Scenario '{name}' must map to a dict of parameters")
            items.append(_scenario_from_params({**params, "name": name}))
    else:
        try:
            candidates = list(scenarios)
        except TypeError:
            raise InvalidParameterError(f"Cannot interpret {scenarios!r} as effect scenarios") from None
        items = []
        for item in candidates:
            if isinstance(item, EffectScenario):
                items.append(item)
            elif isinstance(item, dict):
                items.append(_scenario_from_params(item))
            else:
                raise InvalidParameterError(f"Cannot interpret {item!r} as an effect scenario")

    if not items:
        raise InvalidParameterError("At least one effect scenario is required")

    names = [s.name for s in items]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise InvalidParameterError(f"Duplicate scenario names: {', '.join(duplicates)}")

    return items
