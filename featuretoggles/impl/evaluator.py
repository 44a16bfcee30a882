import re
from collections import OrderedDict
from typing import Dict, List, Mapping, Optional

from featuretoggles.evaluation import (ErrorKind, EvaluationResult,
                                       error_result)
from featuretoggles.impl.model import ToggleDefinition, ToggleSnapshot
from featuretoggles.impl.segment_evaluators import (PercentageSegmentEvaluator,
                                                    segment_value_matches)

# One or more alphanumeric groups separated by single hyphens.
_SLUG_REGEX = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", re.IGNORECASE)

ROLLOUT_CONTEXT_KEY = 'tenant'

EvaluationContext = Mapping[str, Optional[str]]


def is_valid_slug(key) -> bool:
    return isinstance(key, str) and _SLUG_REGEX.match(key) is not None


class Evaluator:
    """
    Encapsulates the rules for evaluating a boolean toggle against a snapshot.

    Evaluation is pure and never performs I/O. Malformed input produces an error result,
    not an exception.
    """

    def evaluate(self, snapshot: ToggleSnapshot, flag_key: str, default_value: bool, context: Optional[EvaluationContext] = None) -> EvaluationResult:
        if not is_valid_slug(flag_key):
            return error_result(default_value, ErrorKind.FLAG_NOT_FOUND, 'Flag key "%s" is not a valid slug.' % flag_key)

        toggle = snapshot.get(flag_key)
        if toggle is None:
            return error_result(default_value, ErrorKind.FLAG_NOT_FOUND, 'No toggle with slug "%s" was found.' % flag_key)

        if not toggle.enabled:
            return EvaluationResult(False)

        return EvaluationResult(_segments_match(toggle, context) and _rollout_matches(toggle, context))


def _group_segments(toggle: ToggleDefinition) -> Dict[str, List[str]]:
    groups = OrderedDict()  # type: Dict[str, List[str]]
    for key, value in toggle.segments:
        groups.setdefault(key.lower(), []).append(value)
    return groups


def _context_values(context: Optional[EvaluationContext], key: str) -> List[str]:
    if not context:
        return []
    return [value for context_key, value in context.items() if isinstance(context_key, str) and context_key.lower() == key and value is not None]


def _segments_match(toggle: ToggleDefinition, context: Optional[EvaluationContext]) -> bool:
    # Distinct keys are all required; multiple values under one key are alternatives.
    for key, required_values in _group_segments(toggle).items():
        supplied_values = _context_values(context, key)
        if not any(segment_value_matches(required, supplied) for required in required_values for supplied in supplied_values):
            return False
    return True


def _rollout_matches(toggle: ToggleDefinition, context: Optional[EvaluationContext]) -> bool:
    if toggle.rollout_percentage is None:
        return True
    evaluator = PercentageSegmentEvaluator(toggle.slug.lower())
    percentage = str(toggle.rollout_percentage)
    for identifier in _context_values(context, ROLLOUT_CONTEXT_KEY):
        if evaluator.can_evaluate(percentage, identifier) and evaluator.evaluate(percentage, identifier):
            return True
    return False
