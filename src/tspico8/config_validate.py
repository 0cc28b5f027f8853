# src/tspico8/config_validate.py


from dataclasses import dataclass, field
from difflib import get_close_matches
from typing import Any

from .utils_logs import LEVEL_ORDER

# --- constants ------------------------------------------------------

DEFAULT_HINT_CUTOFF: float = 0.6

TOOL_CONFIG_KEYS = {
    "pico8",
    "compression",
    "compressOptions",
    "mangleOptions",
    "logLevel",
    "watchInterval",
}
COMPRESSION_KEYS = {"compressedFile", "indentLevel", "compress", "mangle"}
PICO8_KEYS = {"executable"}


# --- dataclasses ------------------------------------------------------


@dataclass
class ValidationSummary:
    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# --- helpers --------------------------------------------------------


def collect_msg(
    msg: str,
    summary: ValidationSummary,  # modified in function, not returned
    *,
    is_error: bool = False,
) -> None:
    """Route a message to the appropriate bucket. Errors are always fatal."""
    if is_error:
        summary.errors.append(msg)
        summary.valid = False
    else:
        summary.warnings.append(msg)


def _check_unknown_keys(
    section: dict[str, Any],
    known: set[str],
    context: str,
    summary: ValidationSummary,
) -> None:
    for key in section:
        if key in known or key.startswith("$"):
            continue
        msg = f"Unknown key {key!r} {context}."
        close = get_close_matches(key, sorted(known), n=1, cutoff=DEFAULT_HINT_CUTOFF)
        if close:
            msg += f" Hint: did you mean {close[0]!r}?"
        collect_msg(msg, summary)


def _check_type(
    section: dict[str, Any],
    key: str,
    expected: type | tuple[type, ...],
    context: str,
    summary: ValidationSummary,
    *,
    required: bool = False,
) -> bool:
    if key not in section:
        if required:
            collect_msg(
                f"Missing required key {key!r} {context}.", summary, is_error=True
            )
        return False

    value = section[key]
    # bool is an int subclass; never accept it where a number is expected
    wrong_bool = isinstance(value, bool) and bool not in (
        expected if isinstance(expected, tuple) else (expected,)
    )
    if wrong_bool or not isinstance(value, expected):
        names = (
            " or ".join(t.__name__ for t in expected)
            if isinstance(expected, tuple)
            else expected.__name__
        )
        collect_msg(
            f"{key!r} {context} must be of type {names},"
            f" not {type(value).__name__}.",
            summary,
            is_error=True,
        )
        return False
    return True


# ---------------------------------------------------------------------------
# main validators
# ---------------------------------------------------------------------------


def validate_tsconfig(parsed_cfg: dict[str, Any]) -> ValidationSummary:
    """Check the part of tsconfig.json this tool reads (compilerOptions.outFile)."""
    summary = ValidationSummary()
    ctx = "in tsconfig.json"

    if not _check_type(
        parsed_cfg, "compilerOptions", dict, ctx, summary, required=True
    ):
        return summary

    options: dict[str, Any] = parsed_cfg["compilerOptions"]
    _check_type(options, "outFile", str, "in compilerOptions", summary, required=True)
    return summary


def validate_tool_config(parsed_cfg: dict[str, Any]) -> ValidationSummary:
    """Validate tspico8.json.

    Unknown keys are warnings; missing or mistyped keys are errors.
    The compressOptions / mangleOptions bags are passed to the minifier
    untouched, so only their container type is checked.
    """
    summary = ValidationSummary()
    ctx = "in tspico8.json"

    _check_unknown_keys(parsed_cfg, TOOL_CONFIG_KEYS, ctx, summary)

    # --- pico8 ---
    if _check_type(parsed_cfg, "pico8", dict, ctx, summary):
        pico8: dict[str, Any] = parsed_cfg["pico8"]
        _check_unknown_keys(pico8, PICO8_KEYS, "in pico8", summary)
        _check_type(pico8, "executable", str, "in pico8", summary)

    # --- compression ---
    if _check_type(parsed_cfg, "compression", dict, ctx, summary, required=True):
        comp: dict[str, Any] = parsed_cfg["compression"]
        _check_unknown_keys(comp, COMPRESSION_KEYS, "in compression", summary)
        _check_type(
            comp, "compressedFile", str, "in compression", summary, required=True
        )
        _check_type(comp, "indentLevel", int, "in compression", summary)
        _check_type(comp, "compress", bool, "in compression", summary)
        _check_type(comp, "mangle", bool, "in compression", summary)

    # --- option bags ---
    _check_type(parsed_cfg, "compressOptions", dict, ctx, summary)
    _check_type(parsed_cfg, "mangleOptions", dict, ctx, summary)

    # --- runtime behavior ---
    if _check_type(parsed_cfg, "logLevel", str, ctx, summary):
        level = parsed_cfg["logLevel"].lower()
        if level not in LEVEL_ORDER:
            collect_msg(
                f"'logLevel' {ctx} must be one of {LEVEL_ORDER}, not {level!r}.",
                summary,
                is_error=True,
            )

    if _check_type(parsed_cfg, "watchInterval", (int, float), ctx, summary):
        if parsed_cfg["watchInterval"] <= 0:
            collect_msg(
                f"'watchInterval' {ctx} must be greater than zero.",
                summary,
                is_error=True,
            )

    return summary
