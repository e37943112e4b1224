"""
Result formatting for SimPower.

Renders power, sample-size and single-trial results as plain-text
tables for printing.
"""

from typing import Any, Dict, List, Optional

__all__ = []


class _TableFormatter:
    """Minimal fixed-width table renderer."""

    @staticmethod
    def _format_value(value: Any, spec: Optional[str] = None) -> str:
        if isinstance(value, float):
            if spec:
                return format(value, spec)
            if value != 0 and abs(value) < 0.001:
                return f"{value:.6f}"
            return f"{value:.4f}"
        return str(value)

    def _create_table(self, headers: List[str], rows: List[List[Any]], col_widths: Optional[List[int]] = None) -> str:
        """Render *rows* under *headers*, columns separated by one space."""
        str_rows = [[self._format_value(cell) for cell in row] for row in rows]
        if col_widths is None:
            col_widths = [max(len(str(h)), *(len(r[i]) for r in str_rows)) if str_rows else len(str(h)) for i, h in enumerate(headers)]

        lines = [" ".join(str(h).ljust(w) for h, w in zip(headers, col_widths))]
        lines.append("-" * (sum(col_widths) + len(col_widths)))
        for row in str_rows:
            lines.append(" ".join(cell.ljust(w) for cell, w in zip(row, col_widths)))
        return "\n".join(lines)


def _get_significance_code(p_value: float) -> str:
    if p_value < 0.001:
        return "***"
    if p_value < 0.01:
        return "**"
    if p_value < 0.05:
        return "*"
    return ""


class _ResultFormatter:
    """Formats result dictionaries produced by ``PowerAnalysis``."""

    def __init__(self):
        self._tables = _TableFormatter()

    def _scenario_rows(self, data: Dict) -> List[Dict[str, Any]]:
        return data["model"].get("scenarios", [])

    # -- power ---------------------------------------------------------------

    def _format_short_power(self, data: Dict) -> str:
        model = data["model"]
        results = data["results"]
        target = model["target_power"]

        rows = []
        achieved = 0
        for name, res in results.items():
            ok = res["power"] >= target
            achieved += ok
            rows.append([name, f"{res['power']:.3f}", f"{res['mc_standard_error']:.3f}", "yes" if ok else "no"])

        lines = [f"Power Analysis Results (N={model['sample_size']} per group, {model['test']}, alpha={model['alpha']})"]
        lines.append(self._tables._create_table(["Scenario", "Power", "MC SE", f"≥ {target:g}"], rows))
        lines.append(f"\n{achieved}/{len(results)} scenarios achieved target power {target:g}")
        return "\n".join(lines)

    def _format_long_power(self, data: Dict) -> str:
        lines = [self._format_short_power(data), "", "Scenario Details"]
        rows = [
            [s["name"], f"{s['control_mean']:g}", f"{s['treatment_mean']:g}", f"{s['sd']:g}", f"{s['cohens_d']:.3f}"]
            for s in self._scenario_rows(data)
        ]
        lines.append(self._tables._create_table(["Scenario", "Control", "Treatment", "SD", "Cohen's d"], rows))
        lines.append(f"\nReplicates per estimate: {data['model']['n_simulations']}, seed: {data['model']['seed']}")
        return "\n".join(lines)

    # -- sample size ---------------------------------------------------------

    def _format_short_sample_size(self, data: Dict) -> str:
        model = data["model"]
        to_size = model["sample_size_range"]["to_size"]

        rows = []
        for name, res in data["results"].items():
            minimum = res["minimum_sample_size"]
            rows.append([name, str(minimum) if minimum is not None else f">{to_size}"])

        lines = [f"Sample Size Requirements (target power {model['target_power']:g}, per group)"]
        lines.append(self._tables._create_table(["Scenario", "Minimum N"], rows))
        missing = [r[0] for r in rows if r[1].startswith(">")]
        if missing:
            lines.append(f"\nTarget not reached for: {', '.join(missing)}. Widen the sample size range.")
        return "\n".join(lines)

    def _format_long_sample_size(self, data: Dict) -> str:
        lines = [self._format_short_sample_size(data), "", "Power by Sample Size"]
        names = list(data["results"].keys())
        if names:
            sizes = data["results"][names[0]]["sample_sizes_tested"]
            rows = []
            for i, n in enumerate(sizes):
                rows.append([n] + [f"{data['results'][name]['powers'][i]:.3f}" for name in names])
            lines.append(self._tables._create_table(["N"] + names, rows))
        return "\n".join(lines)

    # -- single trial --------------------------------------------------------

    def _format_trial(self, data: Dict) -> str:
        model = data["model"]
        level = model.get("confidence_level", 0.95)
        rows = []
        for name, res in data["results"].items():
            low, high = res["confidence_interval"]
            rows.append(
                [
                    name,
                    f"{res['control_sample_mean']:.4f}",
                    f"{res['treatment_sample_mean']:.4f}",
                    f"{res['statistic']:.3f}",
                    f"{res['df']:.1f}",
                    f"{res['p_value']:.4g} {_get_significance_code(res['p_value'])}".rstrip(),
                    f"[{low:.4f}, {high:.4f}]",
                ]
            )
        lines = [f"Single Trial Results (N={model['sample_size']} per group, {model['test']})"]
        lines.append(
            self._tables._create_table(
                ["Scenario", "Control", "Treatment", "t", "df", "p-value", f"{level:.0%} CI (control - treatment)"], rows
            )
        )
        lines.append("\nSignif. codes: '***' 0.001 '**' 0.01 '*' 0.05")
        return "\n".join(lines)


_formatter = _ResultFormatter()


def _format_results(kind: str, data: Dict, summary: str = "short") -> str:
    """Format a result dictionary as text.

    Args:
        kind: ``"power"``, ``"sample_size"`` or ``"trial"``.
        data: Result dict from ``PowerAnalysis``.
        summary: ``"short"`` or ``"long"``.
    """
    if kind == "power":
        return _formatter._format_long_power(data) if summary == "long" else _formatter._format_short_power(data)
    if kind == "sample_size":
        return _formatter._format_long_sample_size(data) if summary == "long" else _formatter._format_short_sample_size(data)
    if kind == "trial":
        return _formatter._format_trial(data)
    raise ValueError(f"Unknown result type: {kind}")
