# File: extmodelgen/validations.py
"""
ExtModelGen - Validation Factory
==================================
Turns declared validations and bean-validation style constraints into
canonical ``Validation`` records.

Two sources feed a property's validations:

1. Explicit ``ValidationSpec`` declarations (``create_validation``).
2. Constraints such as ``NotNull`` or ``Size(min=2, max=40)``
   (``validations_from_constraints``), consulted only when a property has
   no explicit declarations.

The ``include`` level filters both: ``none`` drops everything, ``builtin``
keeps kinds the client framework ships with, ``all`` keeps every kind.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from extmodelgen.descriptors import ConstraintSpec, ValidationSpec
from extmodelgen.errors import MetadataError
from extmodelgen.models import IncludeValidation, Validation, ValidationType
from extmodelgen.utils import simple_type_name

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("extmodelgen.validations")

# Parameters written verbatim (JS literals, not strings).
RAW_PARAMS = frozenset({"matcher"})

_UNESCAPED_SLASH_RE: re.Pattern[str] = re.compile(r"(?<!\\)/")

_REGEX_FLAGS: Dict[str, str] = {
    "CASE_INSENSITIVE": "i",
    "MULTILINE": "m",
    "i": "i",
    "m": "m",
}


# ---------------------------------------------------------------------------
# Parameter converters
# ---------------------------------------------------------------------------


def _to_int(field_name: str, param: str, value: Any) -> int:
    if isinstance(value, bool):
        raise MetadataError(
            f"Parameter '{param}' must be an integer, got {value!r}.", field=field_name
        )
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise MetadataError(
            f"Parameter '{param}' must be an integer, got {value!r}.", field=field_name
        ) from exc


def _to_number(field_name: str, param: str, value: Any) -> Any:
    """Integers stay integers; anything else numeric becomes a float."""
    if isinstance(value, bool):
        raise MetadataError(
            f"Parameter '{param}' must be a number, got {value!r}.", field=field_name
        )
    if isinstance(value, (int, float)):
        return value
    try:
        return int(str(value))
    except ValueError:
        pass
    try:
        return float(str(value))
    except ValueError as exc:
        raise MetadataError(
            f"Parameter '{param}' must be a number, got {value!r}.", field=field_name
        ) from exc


def _to_list(field_name: str, param: str, value: Any) -> List[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise MetadataError(
        f"Parameter '{param}' must be a list, got {value!r}.", field=field_name
    )


def _to_str(field_name: str, param: str, value: Any) -> str:
    return str(value)


def to_regex_literal(regexp: str, flags: Sequence[str] = ()) -> str:
    """
    Build a JS regular-expression literal.

    Examples:
        >>> to_regex_literal("^[a-z]+$", ["CASE_INSENSITIVE"])
        '/^[a-z]+$/i'
        >>> to_regex_literal("a/b")
        '/a\\\\/b/'
    """
    js_flags: List[str] = []
    for flag in flags:
        js_flag: Optional[str] = _REGEX_FLAGS.get(str(flag))
        if js_flag is None:
            logger.warning("Regex flag '%s' has no JS equivalent; ignored.", flag)
        elif js_flag not in js_flags:
            js_flags.append(js_flag)
    body: str = _UNESCAPED_SLASH_RE.sub(r"\\/", regexp)
    return f"/{body}/{''.join(js_flags)}"


def _to_matcher(field_name: str, param: str, value: Any) -> str:
    text: str = str(value)
    if len(text) >= 2 and text.startswith("/") and text.rfind("/") > 0:
        return text
    return to_regex_literal(text)


_Converter = Callable[[str, str, Any], Any]

# Accepted parameters per kind, in output order.
_PARAMETERS: Dict[str, Tuple[Tuple[str, _Converter], ...]] = {
    ValidationType.PRESENCE: (),
    ValidationType.EMAIL: (),
    ValidationType.FUTURE: (),
    ValidationType.PAST: (),
    ValidationType.NOT_BLANK: (),
    ValidationType.CREDIT_CARD_NUMBER: (),
    ValidationType.LENGTH: (("min", _to_int), ("max", _to_int)),
    ValidationType.RANGE: (("min", _to_number), ("max", _to_number)),
    ValidationType.INCLUSION: (("list", _to_list),),
    ValidationType.EXCLUSION: (("list", _to_list),),
    ValidationType.FORMAT: (("matcher", _to_matcher),),
    ValidationType.DIGITS: (("integer", _to_int), ("fraction", _to_int)),
}


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def is_included(kind: str, include: str) -> bool:
    """Whether a validation kind passes the configured inclusion level."""
    if include == IncludeValidation.NONE:
        return False
    if include == IncludeValidation.ALL:
        return True
    return ValidationType(kind).builtin


def build_validation(field_name: str, kind: str, params: Dict[str, Any]) -> Validation:
    """
    Convert raw parameters for *kind* and return the canonical record.

    Raises:
        MetadataError: on unknown parameters or unconvertible values.
    """
    accepted: Tuple[Tuple[str, _Converter], ...] = _PARAMETERS[ValidationType(kind)]
    known = {name for name, _ in accepted} | {"message"}
    unknown: List[str] = sorted(set(params) - known)
    if unknown:
        raise MetadataError(
            f"Unknown parameter(s) {unknown} for '{kind}' validation.",
            field=field_name,
        )

    converted: Dict[str, Any] = {}
    for name, converter in accepted:
        if params.get(name) is not None:
            converted[name] = converter(field_name, name, params[name])
    if params.get("message") is not None:
        converted["message"] = str(params["message"])

    return Validation(field=field_name, type=kind, params=converted)


def create_validation(
    field_name: str,
    spec: ValidationSpec,
    include: str,
) -> Optional[Validation]:
    """Canonical validation for an explicit declaration, or None if excluded."""
    if not is_included(spec.type, include):
        logger.debug(
            "Validation '%s' on '%s' excluded by include level '%s'.",
            spec.type,
            field_name,
            include,
        )
        return None
    return build_validation(field_name, spec.type, spec.parameters)


# ---------------------------------------------------------------------------
# Constraint mapping
# ---------------------------------------------------------------------------


def _size_params(field_name: str, attrs: Dict[str, Any]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    if attrs.get("min") is not None:
        minimum: int = _to_int(field_name, "min", attrs["min"])
        if minimum > 0:
            params["min"] = minimum
    if attrs.get("max") is not None:
        params["max"] = _to_int(field_name, "max", attrs["max"])
    return params


def _pattern_params(field_name: str, attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {"matcher": to_regex_literal(str(attrs.get("regexp", "")), attrs.get("flags", ()))}


def _digits_params(field_name: str, attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {"integer": attrs.get("integer"), "fraction": attrs.get("fraction")}


def _no_params(field_name: str, attrs: Dict[str, Any]) -> Dict[str, Any]:
    return {}


_CONSTRAINTS: Dict[str, Tuple[ValidationType, Callable[[str, Dict[str, Any]], Dict[str, Any]]]] = {
    "NotNull": (ValidationType.PRESENCE, _no_params),
    "NotBlank": (ValidationType.NOT_BLANK, _no_params),
    "Size": (ValidationType.LENGTH, _size_params),
    "Length": (ValidationType.LENGTH, _size_params),
    "Email": (ValidationType.EMAIL, _no_params),
    "Pattern": (ValidationType.FORMAT, _pattern_params),
    "Digits": (ValidationType.DIGITS, _digits_params),
    "Future": (ValidationType.FUTURE, _no_params),
    "Past": (ValidationType.PAST, _no_params),
    "CreditCardNumber": (ValidationType.CREDIT_CARD_NUMBER, _no_params),
}

_RANGE_BOUNDS: Dict[str, str] = {
    "Min": "min",
    "DecimalMin": "min",
    "Max": "max",
    "DecimalMax": "max",
}


def validations_from_constraints(
    field_name: str,
    constraints: Sequence[ConstraintSpec],
    include: str,
) -> List[Validation]:
    """
    Map constraints to validations in declaration order.

    ``Min``/``Max`` style bounds merge into one ``range`` validation placed
    where the first bound appeared.  Unknown constraints are ignored.
    """
    result: List[Validation] = []
    range_bounds: Dict[str, Any] = {}
    range_slot: Optional[int] = None

    for constraint in constraints:
        name: str = simple_type_name(constraint.name)

        if name in _RANGE_BOUNDS:
            if range_slot is None:
                range_slot = len(result)
            range_bounds[_RANGE_BOUNDS[name]] = constraint.attributes.get("value")
            continue

        mapped = _CONSTRAINTS.get(name)
        if mapped is None:
            logger.debug("Constraint '%s' on '%s' has no validation.", name, field_name)
            continue

        kind, params_of = mapped
        if is_included(kind, include):
            params: Dict[str, Any] = params_of(field_name, constraint.attributes)
            result.append(build_validation(field_name, kind, params))

    if range_slot is not None and is_included(ValidationType.RANGE, include):
        bounds: Dict[str, Any] = {
            key: range_bounds[key] for key in ("min", "max") if key in range_bounds
        }
        result.insert(range_slot, build_validation(field_name, ValidationType.RANGE, bounds))

    return result


__all__: List[str] = [
    "RAW_PARAMS",
    "to_regex_literal",
    "is_included",
    "build_validation",
    "create_validation",
    "validations_from_constraints",
]
