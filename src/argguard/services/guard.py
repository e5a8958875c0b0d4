"""Guard decorator — gate an operation handler on its argument verdict.

Usage::

    @guarded([rule(0, "dto.buyer_id", require_present=True, error_message="buyer id required")])
    def margin_pay(request: MarginPayRequest) -> ServiceResult:
        ...

On a failing verdict the handler is never invoked; the caller receives the
operation's failure response instead. On a passing verdict the handler's
result is returned unchanged.

Argument indices count the handler's parameters in declaration order,
leaving out ``self``/``cls`` on methods. Keyword-passed arguments are
placed at their parameter's position and defaults are filled in, so a
rule sees the same argument however the caller passed it.
"""

from __future__ import annotations

import functools
import inspect
import typing
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from argguard.domain.errors import UnresolvedResponseError
from argguard.domain.rules import RuleDescriptor, RuleSet, build_rule_set
from argguard.domain.verdict import Verdict
from argguard.services.evaluator import RuleSetEvaluator
from argguard.services.observer import CallObserver, StructlogObserver
from argguard.services.result import ServiceResult

if TYPE_CHECKING:
    from argguard.config.settings import ArgGuardSettings

ResponseFactory = Callable[[str, Verdict], Any]

_BOUND_FIRST_PARAMS = ("self", "cls")
_FAILURE_FIELDS = ("ok", "success")


# ── Failure responses ────────────────────────────────────────────────


def model_failure_response(model_cls: type[BaseModel]) -> ResponseFactory:
    """Build failure responses of *model_cls* from the fields it declares.

    Any of ``ok``/``success`` is set to False, ``message`` to the verdict
    message and ``op`` to the operation name. Every other field of
    *model_cls* must have a default.
    """

    def build(op: str, verdict: Verdict) -> BaseModel:
        fields = model_cls.model_fields
        payload: dict[str, Any] = {name: False for name in _FAILURE_FIELDS if name in fields}
        if "message" in fields:
            payload["message"] = verdict.message
        if "op" in fields:
            payload["op"] = op
        return model_cls.model_validate(payload)

    return build


def _return_annotation(func: Callable[..., Any]) -> Any:
    """Resolve *func*'s return annotation, ignoring unresolvable parameter hints.

    Raises:
        UnresolvedResponseError: The return annotation is a name that does
            not exist in the handler's module (e.g. imported only under
            ``TYPE_CHECKING``).
    """
    try:
        return typing.get_type_hints(func).get("return")
    except TypeError:
        return None
    except NameError:
        pass

    raw = inspect.get_annotations(func).get("return")
    if not isinstance(raw, str):
        return raw
    namespace = getattr(inspect.unwrap(func), "__globals__", {})
    try:
        # Same evaluation typing.get_type_hints applies to string annotations.
        return eval(raw, namespace)  # noqa: S307
    except NameError:
        raise UnresolvedResponseError(func.__qualname__, raw) from None


def derive_failure_response(func: Callable[..., Any]) -> ResponseFactory:
    """Pick a failure response builder from *func*'s return annotation.

    ``ServiceResult`` (and subclasses) get a structured error; any other
    pydantic model is filled through :func:`model_failure_response`; a
    missing or non-model annotation falls back to ``ServiceResult``.

    Raises:
        UnresolvedResponseError: The return annotation cannot be resolved.
    """
    return_type = _return_annotation(func)
    if isinstance(return_type, type) and issubclass(return_type, BaseModel):
        if issubclass(return_type, ServiceResult):
            return return_type.rejected
        return model_failure_response(return_type)
    return ServiceResult.rejected


class _DeferredResponse:
    """Failure response derived from the handler on the first rejection.

    Deferring lets a return annotation name a class defined later in the
    handler's module.
    """

    def __init__(self, func: Callable[..., Any]) -> None:
        self._func = func
        self._factory: ResponseFactory | None = None

    def __call__(self, op: str, verdict: Verdict) -> Any:
        if self._factory is None:
            self._factory = derive_failure_response(self._func)
        return self._factory(op, verdict)


# ── Guard ────────────────────────────────────────────────────────────


class _Gate:
    """Per-handler state shared by every call of one guarded function."""

    def __init__(
        self,
        func: Callable[..., Any],
        rules: RuleSet,
        *,
        op: str,
        evaluator: RuleSetEvaluator,
        observer: CallObserver,
        response_factory: ResponseFactory,
    ) -> None:
        self.rules = rules
        self.op = op
        self._evaluator = evaluator
        self._observer = observer
        self._response_factory = response_factory
        self._signature = inspect.signature(func)
        params = list(self._signature.parameters)
        self._skip_first = bool(params) and params[0] in _BOUND_FIRST_PARAMS

    def arguments(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[Any, ...]:
        """Positional view of one call's arguments, in parameter order."""
        bound = self._signature.bind(*args, **kwargs)
        bound.apply_defaults()
        values: list[Any] = []
        for name, param in self._signature.parameters.items():
            value = bound.arguments.get(name)
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                values.extend(value or ())
            elif param.kind is not inspect.Parameter.VAR_KEYWORD:
                values.append(value)
        if self._skip_first:
            return tuple(values[1:])
        return tuple(values)

    def admit(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Verdict:
        call_args = self.arguments(args, kwargs)
        self._observer.call_started(self.op, call_args)
        verdict = self._evaluator.evaluate(self.rules, call_args)
        if not verdict.ok:
            if verdict.is_rule_defect:
                self._observer.rule_defect(self.op, verdict)
            else:
                self._observer.validation_failed(self.op, verdict)
        return verdict

    def reject(self, verdict: Verdict) -> Any:
        return self._response_factory(self.op, verdict)

    def finish(self, result: Any) -> Any:
        self._observer.call_finished(self.op, result)
        return result


def guarded(
    rules: Iterable[RuleDescriptor | dict[str, Any]],
    *,
    op: str | None = None,
    evaluator: RuleSetEvaluator | None = None,
    observer: CallObserver | None = None,
    response_factory: ResponseFactory | None = None,
    settings: ArgGuardSettings | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator: validate a handler's arguments against *rules* before each call.

    Args:
        rules: Ordered rule descriptors (or their mapping form).
        op: Operation name used in responses and logs. Defaults to the
            handler's qualified name.
        evaluator: Shared evaluator. Defaults to one with default settings.
        observer: Receives call and verdict notifications. Defaults to
            :class:`StructlogObserver`.
        response_factory: ``(op, verdict) -> response`` for failing calls.
            Defaults to :func:`derive_failure_response`, resolved on the
            first rejection.
        settings: Source of the default evaluator (``[constraints]``) and
            observer (``[guard]``) when those are not passed explicitly.
    """
    rule_set = build_rule_set(rules)
    if settings is not None:
        evaluator = evaluator or settings.build_evaluator()
        observer = observer or settings.build_observer()

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        gate = _Gate(
            func,
            rule_set,
            op=op or func.__qualname__,
            evaluator=evaluator or RuleSetEvaluator(),
            observer=observer or StructlogObserver(),
            response_factory=response_factory or _DeferredResponse(func),
        )

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                verdict = gate.admit(args, kwargs)
                if not verdict.ok:
                    return gate.reject(verdict)
                return gate.finish(await func(*args, **kwargs))

            async_wrapper.__guard_rules__ = rule_set  # type: ignore[attr-defined]
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            verdict = gate.admit(args, kwargs)
            if not verdict.ok:
                return gate.reject(verdict)
            return gate.finish(func(*args, **kwargs))

        wrapper.__guard_rules__ = rule_set  # type: ignore[attr-defined]
        return wrapper

    return decorator
