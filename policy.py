"""Admission policy for pods.

A rule is a plain function that takes a Pod and returns a RuleResult. Rules are
evaluated in the order they appear in RULES; warnings from every rule that runs
are collected, and the first rule that denies the pod ends evaluation.
"""

import logging

from typing import Callable, NamedTuple

from models import Pod, Verdict

LOG = logging.getLogger(__name__)

HELLO_LABEL = "hello"
DEPRECATED_HELLO_VALUE = "world"

MSG_MISSING_HELLO = "missing required hello label"
WARN_DEPRECATED_HELLO = "world will be deprecated for hello in the future"


class RuleResult(NamedTuple):
    denial: str | None = None
    warnings: tuple[str, ...] = ()


Rule = Callable[[Pod], RuleResult]


def require_hello_label(pod: Pod) -> RuleResult:
    value = pod.metadata.labels.get(HELLO_LABEL)

    if value is None:
        return RuleResult(denial=MSG_MISSING_HELLO)

    if value == DEPRECATED_HELLO_VALUE:
        return RuleResult(warnings=(WARN_DEPRECATED_HELLO,))

    return RuleResult()


RULES: tuple[Rule, ...] = (require_hello_label,)


def evaluate(pod: Pod, rules: tuple[Rule, ...] = RULES) -> Verdict:
    warnings = []

    for rule in rules:
        result = rule(pod)
        warnings.extend(result.warnings)

        if result.denial is not None:
            LOG.debug("rule %s denied pod: %s", rule.__name__, result.denial)
            return Verdict(
                allowed=False, message=result.denial, warnings=tuple(warnings)
            )

    return Verdict(allowed=True, warnings=tuple(warnings))
