"""
Strategies for comparing a value supplied in an evaluation context against a value
required by a toggle segment.
"""

from abc import ABCMeta, abstractmethod
from typing import List, Optional

import mmh3

from featuretoggles.impl.model.value_parsing import (parse_percentage,
                                                     parse_semver)


class SegmentEvaluator(metaclass=ABCMeta):
    """
    A comparison strategy for one required segment value and one supplied context value.

    Strategies are tried in priority order and the first one whose :func:`can_evaluate`
    returns True makes the decision.
    """

    @abstractmethod
    def can_evaluate(self, segment_value: str, context_value: str) -> bool:
        """
        Returns True if this strategy understands both values.
        """

    @abstractmethod
    def evaluate(self, segment_value: str, context_value: str) -> bool:
        """
        Returns True if the context value satisfies the segment value. Only called after
        :func:`can_evaluate` has returned True for the same arguments.
        """


class DefaultSegmentEvaluator(SegmentEvaluator):
    def can_evaluate(self, segment_value: str, context_value: str) -> bool:
        return True

    def evaluate(self, segment_value: str, context_value: str) -> bool:
        return context_value.lower() == segment_value.lower()


class SemanticVersionSegmentEvaluator(SegmentEvaluator):
    """
    Treats the segment value as an inclusive lower bound: a context version matches if it
    sorts at or above it. Pre-release tags take part in the ordering.
    """

    def can_evaluate(self, segment_value: str, context_value: str) -> bool:
        return parse_semver(segment_value) is not None and parse_semver(context_value) is not None

    def evaluate(self, segment_value: str, context_value: str) -> bool:
        segment_version = parse_semver(segment_value)
        context_version = parse_semver(context_value)
        if segment_version is None or context_version is None:
            return False
        return segment_version.compare(context_version) <= 0


def rollout_bucket(scope_name: str, identifier: str) -> int:
    """
    Maps an identifier to a stable bucket in the range 1-100 for the given scope.

    The same scope and identifier always land in the same bucket, and identifiers spread
    evenly across buckets, so "bucket < percentage" selects roughly that percentage of them.
    """
    hash_value = mmh3.hash('%s:%s' % (scope_name, identifier), signed=False)
    return (hash_value % 100) + 1


class PercentageSegmentEvaluator(SegmentEvaluator):
    """
    Rollout-by-identifier targeting. The segment value is the rollout percentage and the
    context value is a stable identifier such as a tenant ID.
    """

    def __init__(self, scope_name: str):
        self.__scope_name = scope_name

    @property
    def scope_name(self) -> str:
        return self.__scope_name

    def can_evaluate(self, segment_value: str, context_value: str) -> bool:
        return parse_percentage(segment_value) is not None and isinstance(context_value, str) and context_value != ''

    def evaluate(self, segment_value: str, context_value: str) -> bool:
        percentage = parse_percentage(segment_value)
        if percentage is None:
            return False
        return rollout_bucket(self.__scope_name, context_value) < percentage


# Order matters: the default evaluator accepts everything and must come last.
SEGMENT_EVALUATORS = [SemanticVersionSegmentEvaluator(), DefaultSegmentEvaluator()]  # type: List[SegmentEvaluator]


def select_evaluator(segment_value: str, context_value: str, evaluators: Optional[List[SegmentEvaluator]] = None) -> SegmentEvaluator:
    for evaluator in evaluators or SEGMENT_EVALUATORS:
        if evaluator.can_evaluate(segment_value, context_value):
            return evaluator
    return SEGMENT_EVALUATORS[-1]


def segment_value_matches(segment_value: str, context_value: Optional[str]) -> bool:
    if context_value is None:
        return False
    if not isinstance(context_value, str):
        context_value = str(context_value)
    return select_evaluator(segment_value, context_value).evaluate(segment_value, context_value)
