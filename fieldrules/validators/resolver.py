"""Rule Resolver — turns declared metadata into (policy, flat rule map).

Two entry points share one flattening step:
    resolve_for_shape(cls)                  fields of a class
    resolve_for_parameters(func, names)     parameters of a callable

A field marked is_model with no rules of its own is replaced by the rules
of its nested shape, merged under the nested field names (no prefix).
Sibling models that declare the same field name collide and the one
resolved last wins. That is a flat merge, kept as is; use Validate(name=...)
to keep such fields apart.
"""

import inspect
import sys
import threading
import types
import weakref
from typing import Annotated, Any, Callable, ClassVar, Iterator, NamedTuple, Optional, Sequence, Union, get_args, get_origin

import structlog

from fieldrules.validators.declarations import Validate, get_policy
from fieldrules.validators.exceptions import ResolutionError
from fieldrules.validators.models import RuleMap, ValidateRule, Validation, freeze_rule_map

logger = structlog.get_logger()

# Framework bases whose own annotations are not user fields
_SKIP_MODULES = ("builtins", "typing", "pydantic")

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class ResolvedRules(NamedTuple):
    """Resolver output. Both are None when the target carries no policy."""

    policy: Optional[Validation]
    rule_map: Optional[RuleMap]


class DeclaredField(NamedTuple):
    """One annotated field or parameter as the resolver sees it."""

    attr: str          # attribute / parameter name on the target
    key: str           # name the value and rules are keyed by
    validate: Optional[Validate]
    model_type: Optional[type]

    @property
    def recurses(self) -> bool:
        # Explicit rules on a model field take precedence over its nested rules
        return self.validate is not None and self.validate.is_model and not self.validate.rules


# ── Metadata reading ──

def _shape_hints(shape: type) -> dict[str, Any]:
    """Evaluated annotations of shape and its bases, base classes first.

    A base whose string annotations cannot be evaluated (names imported only
    under TYPE_CHECKING, say) keeps the annotations that do evaluate; the
    others are skipped unless they mention Validate. The shape's own
    annotations must always evaluate.
    """
    hints: dict[str, Any] = {}
    for cls in reversed(shape.__mro__):
        if cls.__module__.partition(".")[0] in _SKIP_MODULES:
            continue
        try:
            hints.update(inspect.get_annotations(cls, eval_str=True))
        except Exception as e:
            if cls is shape:
                raise ResolutionError(f"Cannot read annotations of {_label(cls)}: {e}") from e
            hints.update(_base_hints(cls))
    return hints


def _base_hints(cls: type) -> dict[str, Any]:
    try:
        raw = inspect.get_annotations(cls)
    except Exception as e:
        raise ResolutionError(f"Cannot read annotations of {_label(cls)}: {e}") from e

    module = sys.modules.get(cls.__module__)
    globalns = vars(module) if module is not None else {}
    hints: dict[str, Any] = {}
    for attr, hint in raw.items():
        if not isinstance(hint, str):
            hints[attr] = hint
            continue
        try:
            hints[attr] = eval(hint, globalns, dict(vars(cls)))
        except Exception as e:
            if "Validate" in hint:
                raise ResolutionError(
                    f"Cannot evaluate rule annotation '{attr}' of {_label(cls)}: {e}"
                ) from e
            logger.debug("annotation_skipped", target=_label(cls), field=attr, error=str(e))
    return hints


def _label(target: Any) -> str:
    return getattr(target, "__qualname__", None) or repr(target)


def _split(hint: Any) -> tuple[Any, Optional[Validate]]:
    """Annotated[T, Validate(...)] -> (T, Validate). Anything else -> (hint, None)."""
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        for item in metadata:
            if isinstance(item, Validate):
                return base, item
        return base, None
    return hint, None


def _model_type(owner: Any, attr: str, base: Any) -> type:
    """Class of a model field, unwrapping Optional[X]."""
    if get_origin(base) in (Union, types.UnionType):
        members = [a for a in get_args(base) if a is not type(None)]
        if len(members) == 1:
            base = members[0]
    if get_origin(base) is Annotated:
        base = get_args(base)[0]
    if get_origin(base) is not None or not isinstance(base, type):
        raise ResolutionError(
            f"Model field '{attr}' of {_label(owner)} must be annotated with a class, got {base!r}"
        )
    return base


def _declared(owner: Any, attr: str, hint: Any, key: str) -> DeclaredField:
    base, validate = _split(hint)
    model_type = None
    if validate is not None:
        key = validate.name or key
        if validate.is_model and not validate.rules:
            model_type = _model_type(owner, attr, base)
    return DeclaredField(attr=attr, key=key, validate=validate, model_type=model_type)


def shape_fields(shape: type) -> Iterator[DeclaredField]:
    """Every annotated field of a class, base classes first."""
    for attr, hint in _shape_hints(shape).items():
        if get_origin(hint) is ClassVar:
            continue
        yield _declared(shape, attr, hint, attr)


def parameter_fields(
    func: Callable,
    names: Optional[Sequence[str]] = None,
    bound: bool = False,
) -> Iterator[DeclaredField]:
    """Every parameter of a callable; positional ones take their key from names when given.

    bound=True drops the first parameter (self or cls of a method's function).
    """
    try:
        params = list(inspect.signature(func, eval_str=True).parameters.values())
    except Exception as e:
        raise ResolutionError(f"Cannot inspect signature of {_label(func)}: {e}") from e
    if bound:
        params = params[1:]

    positional = [p for p in params if p.kind in _POSITIONAL]
    if names is not None and len(names) != len(positional):
        raise ResolutionError(
            f"{_label(func)} has {len(positional)} positional parameter(s) "
            f"but {len(names)} name(s) were given"
        )

    index = 0
    for param in params:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        key = param.name
        if param.kind in _POSITIONAL:
            if names is not None:
                key = names[index]
            index += 1
        yield _declared(func, param.name, param.annotation, key)


# ── Resolution ──

class RuleResolver:
    """Resolves and memoizes rule maps per class / callable.

    Results are immutable, so one resolver can be shared by any number
    of concurrent validations.
    """

    def __init__(self):
        self._lock = threading.Lock()
        # target (class or function) -> {variant: result}; held weakly so
        # classes and closures created at runtime can still be collected
        self._cache: "weakref.WeakKeyDictionary[Any, dict[Any, ResolvedRules]]" = weakref.WeakKeyDictionary()

    def resolve_for_shape(self, shape: type) -> ResolvedRules:
        """Policy and flat rule map of a class.

        Returns:
            (None, None) if the class has no policy; otherwise the policy and a
            possibly empty rule map
        """
        return self._cached(shape, None, lambda: self._resolve_shape(shape, ()))

    def resolve_for_parameters(self, func: Callable, names: Optional[Sequence[str]] = None) -> ResolvedRules:
        """Policy and flat rule map of a callable's parameters.

        Bound methods are cached under their function, so results are shared
        by every instance and never keep an instance alive.

        Args:
            func: Function or method carrying the policy
            names: One name per positional parameter, overriding the signature's names
        """
        names_key = tuple(names) if names is not None else None
        target = getattr(func, "__func__", None) if inspect.ismethod(func) else None
        if target is None:
            return self._cached(func, (names_key, False), lambda: self._resolve_parameters(func, names))

        # Resolve the plain function with the bound first parameter dropped
        return self._cached(target, (names_key, True), lambda: self._resolve_parameters(target, names, bound=True))

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def _cached(self, target: Any, variant: Any, build: Callable[[], ResolvedRules]) -> ResolvedRules:
        try:
            with self._lock:
                entries = self._cache.get(target)
        except TypeError:
            # Not weak-referenceable or unhashable, resolve every time
            return build()
        if entries is not None and variant in entries:
            return entries[variant]

        resolved = build()
        with self._lock:
            return self._cache.setdefault(target, {}).setdefault(variant, resolved)

    def _resolve_shape(self, shape: type, stack: tuple[type, ...]) -> ResolvedRules:
        policy = get_policy(shape)
        if policy is None:
            return ResolvedRules(None, None)
        if shape in stack:
            cycle = " -> ".join(_label(s) for s in (*stack, shape))
            raise ResolutionError(f"Model fields form a cycle: {cycle}")

        rules = self._flatten(shape_fields(shape), (*stack, shape))
        logger.debug("rules_resolved", target=_label(shape), fields=len(rules))
        return ResolvedRules(policy, freeze_rule_map(rules))

    def _resolve_parameters(self, func: Callable, names: Optional[Sequence[str]], bound: bool = False) -> ResolvedRules:
        policy = get_policy(func)
        if policy is None:
            return ResolvedRules(None, None)

        rules = self._flatten(parameter_fields(func, names, bound=bound), ())
        logger.debug("rules_resolved", target=_label(func), fields=len(rules))
        return ResolvedRules(policy, freeze_rule_map(rules))

    def _flatten(self, fields: Iterator[DeclaredField], stack: tuple[type, ...]) -> dict[str, tuple[ValidateRule, ...]]:
        rules: dict[str, tuple[ValidateRule, ...]] = {}
        for declared in fields:
            if declared.validate is None:
                continue
            if declared.recurses:
                nested = self._resolve_shape(declared.model_type, stack)
                if nested.rule_map is not None:
                    rules.update(nested.rule_map)
            elif declared.validate.rules:
                rules[declared.key] = declared.validate.rules
        return rules


# Module-level default
default_resolver = RuleResolver()


def resolve_for_shape(shape: type) -> ResolvedRules:
    return default_resolver.resolve_for_shape(shape)


def resolve_for_parameters(func: Callable, names: Optional[Sequence[str]] = None) -> ResolvedRules:
    return default_resolver.resolve_for_parameters(func, names)
