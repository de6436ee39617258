"""
Recognised configuration options and their defaults
"""

from typing import Dict, Tuple

# Ordered as printed by the command-line help.
OPTIONS: Dict[str, str] = {
    "reference": "BED file of DHS regions used as the signal reference (single sample)",
    "db": "Signal database: per-region signal values across samples",
    "anchor": "BED file of anchor regions (required)",
    "outDirectory": "Directory receiving all results (required)",
    "matrix": "Precomputed signal matrix (single sample, replaces reference/db)",
    "references": "Tab-delimited list of '<reference><TAB><sample>' lines (multi-sample)",
    "matrices": "Space-delimited list of '<matrix> <sample>' lines (multi-sample)",
    "tracks": "Generate genome browser tracks and merge them: y or n [n]",
    "assembly": "Genome assembly used for the tracks [hg19]",
    "window": "Distance in bp around each anchor searched for candidate regions",
    "correlationThreshold": "Minimum correlation reported for an interaction",
    "pValueThreshold": "Maximum p-value reported for an interaction",
    "qValueThreshold": "Maximum q-value reported for an interaction",
    "correlationMethod": "Correlation coefficient used by the analysis",
    "figures": "Render interaction landscape figures: y or n",
    "figureWidth": "Width of the rendered figures",
    "zoom": "Zoom level of the rendered figures",
    "colours": "Colour scheme of the rendered figures",
}

DEFAULTS: Dict[str, str] = {
    "assembly": "hg19",
    "tracks": "n",
}

DEFAULT_ASSEMBLY = DEFAULTS["assembly"]

NUMERIC_OPTIONS: Tuple[str, ...] = (
    "window",
    "correlationThreshold",
    "pValueThreshold",
    "qValueThreshold",
    "figureWidth",
    "zoom",
)

YES_NO_OPTIONS: Tuple[str, ...] = ("tracks", "figures")

PATH_OPTIONS: Tuple[str, ...] = (
    "reference",
    "db",
    "anchor",
    "matrix",
    "references",
    "matrices",
)


def default_for(key: str) -> str:
    """Default value of a recognised option"""
    return DEFAULTS.get(key, "")


def format_options_help() -> str:
    """Render the enumerated option list shown by ``-help``"""
    width = max(len(name) for name in OPTIONS)
    lines = ["Configuration options (key=value, one per line):"]
    for name, description in OPTIONS.items():
        lines.append(f"  {name.ljust(width)}  {description}")
    lines.append("")
    lines.append("Lines containing 'module load' request environment modules for")
    lines.append("the analysis jobs. Values may reference $VARIABLES and ~.")
    return "\n".join(lines)
