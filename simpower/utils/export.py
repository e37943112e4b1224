"""
Persistence of SimPower results.

Result dictionaries are flattened to a long-format pandas DataFrame (one
row per scenario and sample size) and written as CSV or JSON records.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd

__all__ = []

_FORMATS = {".csv": "csv", ".json": "json"}


def _results_to_frame(result: Dict[str, Any]) -> pd.DataFrame:
    """Flatten a power or sample-size result dict to a DataFrame.

    Columns: ``scenario``, ``sample_size``, ``power``,
    ``mc_standard_error`` and, for sample-size results,
    ``minimum_sample_size``.
    """
    model = result["model"]
    frames = []

    for name, res in result["results"].items():
        if "power_table" in res:
            frame = res["power_table"].copy()
            frame["minimum_sample_size"] = res["minimum_sample_size"]
        elif "power" in res:
            frame = pd.DataFrame(
                [
                    {
                        "sample_size": model["sample_size"],
                        "power": res["power"],
                        "mc_standard_error": res.get("mc_standard_error"),
                        "n_significant": res.get("n_significant"),
                        "n_simulations": res.get("n_simulations"),
                    }
                ]
            )
        else:
            raise ValueError(f"Result for scenario '{name}' has no power estimates to export")
        frame.insert(0, "scenario", name)
        frames.append(frame)

    if not frames:
        return pd.DataFrame(columns=["scenario", "sample_size", "power", "mc_standard_error"])
    return pd.concat(frames, ignore_index=True)


def _save_results(result: Dict[str, Any], path: Union[str, Path], file_format: Optional[str] = None) -> Path:
    """Write *result* to *path* as CSV or JSON.

    Args:
        result: Result dict from ``find_power`` or ``find_sample_size``.
        path: Output file path; parent directories are created.
        file_format: ``"csv"`` or ``"json"``. Inferred from the file
            suffix when omitted.

    Returns:
        The path written.
    """
    path = Path(path)
    if file_format is None:
        file_format = _FORMATS.get(path.suffix.lower())
        if file_format is None:
            raise ValueError(f"Cannot infer results format from '{path.name}'; use a .csv or .json file")
    elif file_format not in _FORMATS.values():
        raise ValueError(f"file_format must be 'csv' or 'json', got '{file_format}'")

    frame = _results_to_frame(result)
    path.parent.mkdir(parents=True, exist_ok=True)

    if file_format == "csv":
        frame.to_csv(path, index=False)
    else:
        frame.to_json(path, orient="records", indent=2)

    return path
