import pytest

from featuretoggles.evaluation import ErrorKind, EvaluationResult
from featuretoggles.impl.evaluator import Evaluator, is_valid_slug
from featuretoggles.impl.model import ToggleSnapshot
from featuretoggles.testing.builders import ToggleBuilder, make_snapshot

evaluator = Evaluator()


def evaluate(snapshot, key, default=False, context=None) -> EvaluationResult:
    return evaluator.evaluate(snapshot, key, default, context)


@pytest.mark.parametrize("key", ["test-feature", "testfeature", "Test-Feature", "a", "a1-b2-c3", "FEATURE-2"])
def test_valid_slugs(key):
    assert is_valid_slug(key) is True


@pytest.mark.parametrize("key", ["This is clearly not a slug!", "", "-leading", "trailing-", "double--hyphen", "under_score", "dot.ted", None])
def test_invalid_slugs(key):
    assert is_valid_slug(key) is False


@pytest.mark.parametrize("default", [True, False])
def test_unknown_flag_returns_default_with_flag_not_found(default):
    snapshot = make_snapshot(ToggleBuilder('test-feature').enabled(True).build())
    result = evaluate(snapshot, 'another-feature', default)
    assert result.value is default
    assert result.error_kind == ErrorKind.FLAG_NOT_FOUND


@pytest.mark.parametrize("default", [True, False])
def test_invalid_slug_returns_default_even_if_name_matches(default):
    toggle = ToggleBuilder('test-feature').name('This is clearly not a slug!').enabled(True).build()
    result = evaluate(make_snapshot(toggle), 'This is clearly not a slug!', default)
    assert result.value is default
    assert result.error_kind == ErrorKind.FLAG_NOT_FOUND
    assert 'not a valid slug' in result.message


def test_empty_snapshot_evaluates_every_flag_to_flag_not_found():
    result = evaluate(ToggleSnapshot.empty(), 'test-feature', True)
    assert result == EvaluationResult(True, ErrorKind.FLAG_NOT_FOUND, result.message)


def test_slug_lookup_is_case_insensitive():
    snapshot = make_snapshot(ToggleBuilder('test-feature').enabled(True).build())
    assert evaluate(snapshot, 'Test-Feature') == EvaluationResult(True)
    assert evaluate(snapshot, 'TEST-FEATURE') == EvaluationResult(True)


def test_slug_lookup_requires_full_match():
    snapshot = make_snapshot(ToggleBuilder('test-feature').enabled(True).build())
    assert evaluate(snapshot, 'test').error_kind == ErrorKind.FLAG_NOT_FOUND
    assert evaluate(snapshot, 'test-feature-2').error_kind == ErrorKind.FLAG_NOT_FOUND


@pytest.mark.parametrize("context", [None, {}, {'license': 'trial'}, {'other': 'value'}])
def test_disabled_toggle_is_false_regardless_of_context(context):
    toggle = ToggleBuilder('test-feature').enabled(False).segment('license', 'trial').build()
    result = evaluate(make_snapshot(toggle), 'test-feature', True, context)
    assert result == EvaluationResult(False)
    assert result.is_error() is False


@pytest.mark.parametrize("context", [None, {}, {'license': 'trial'}, {'unrelated': None}])
def test_toggle_without_segments_follows_enabled_state(context):
    snapshot = make_snapshot(
        ToggleBuilder('on-feature').enabled(True).build(),
        ToggleBuilder('off-feature').enabled(False).build(),
    )
    assert evaluate(snapshot, 'on-feature', False, context) == EvaluationResult(True)
    assert evaluate(snapshot, 'off-feature', True, context) == EvaluationResult(False)


class TestSingleSegment:
    snapshot = make_snapshot(ToggleBuilder('testfeature').enabled(True).segment('license', 'trial').build())

    @pytest.mark.parametrize("context", [{'license': 'trial'}, {'License': 'TRIAL'}, {'LICENSE': 'Trial', 'other': 'x'}])
    def test_matches_when_context_contains_segment(self, context):
        assert evaluate(self.snapshot, 'testfeature', False, context) == EvaluationResult(True)

    @pytest.mark.parametrize("context", [None, {}, {'license': None}, {'license': 'enterprise'}, {'other': 'trial'}])
    def test_does_not_match_otherwise(self, context):
        assert evaluate(self.snapshot, 'testfeature', True, context) == EvaluationResult(False)


class TestMultipleSegmentKeys:
    snapshot = make_snapshot(
        ToggleBuilder('testfeature').enabled(True).segment('license', 'trial').segment('region', 'au').segment('region', 'us').build()
    )

    @pytest.mark.parametrize(
        "context",
        [
            {'license': 'trial', 'region': 'us'},
            {'license': 'trial', 'region': 'au'},
            {'license': 'trial', 'region': 'AU', 'plan': 'free', 'other': None},
        ],
    )
    def test_every_key_satisfied_by_one_of_its_values(self, context):
        assert evaluate(self.snapshot, 'testfeature', False, context) == EvaluationResult(True)

    @pytest.mark.parametrize(
        "context",
        [
            {'license': 'trial', 'region': 'eu'},
            {'license': 'trial'},
            {'region': 'au'},
            {'license': 'trial', 'region': None},
            None,
        ],
    )
    def test_any_unsatisfied_key_fails(self, context):
        assert evaluate(self.snapshot, 'testfeature', False, context) == EvaluationResult(False)


def test_version_segment_is_a_lower_bound():
    toggle = ToggleBuilder('new-ui').enabled(True).segment('version', '2.1.0').build()
    snapshot = make_snapshot(toggle)
    assert evaluate(snapshot, 'new-ui', False, {'version': '2.1.0'}).value is True
    assert evaluate(snapshot, 'new-ui', False, {'version': '2.3.4-beta'}).value is True
    assert evaluate(snapshot, 'new-ui', False, {'version': '2.0.9'}).value is False
    assert evaluate(snapshot, 'new-ui', False, {'version': 'latest'}).value is False


def test_non_string_context_values_are_compared_as_strings():
    toggle = ToggleBuilder('testfeature').enabled(True).segment('seats', '5').build()
    assert evaluate(make_snapshot(toggle), 'testfeature', False, {'seats': 5}).value is True


class TestRolloutPercentage:
    def test_tenant_below_threshold_is_included(self):
        toggle = ToggleBuilder('billing-v2').enabled(True).rollout_percentage(9).build()
        snapshot = make_snapshot(toggle)
        assert evaluate(snapshot, 'billing-v2', False, {'tenant': 'tenant-1'}).value is True  # bucket 8
        assert evaluate(snapshot, 'billing-v2', False, {'Tenant': 'tenant-3'}).value is False  # bucket 74

    def test_scope_is_case_insensitive_slug(self):
        toggle = ToggleBuilder('Billing-V2').enabled(True).rollout_percentage(9).build()
        assert evaluate(make_snapshot(toggle), 'billing-v2', False, {'tenant': 'tenant-1'}).value is True

    @pytest.mark.parametrize("context", [None, {}, {'tenant': None}, {'tenant': ''}])
    def test_missing_tenant_is_excluded(self, context):
        toggle = ToggleBuilder('billing-v2').enabled(True).rollout_percentage(100).build()
        assert evaluate(make_snapshot(toggle), 'billing-v2', False, context) == EvaluationResult(False)

    def test_rollout_and_segments_must_both_match(self):
        toggle = ToggleBuilder('billing-v2').enabled(True).rollout_percentage(9).segment('license', 'trial').build()
        snapshot = make_snapshot(toggle)
        assert evaluate(snapshot, 'billing-v2', False, {'tenant': 'tenant-1', 'license': 'trial'}).value is True
        assert evaluate(snapshot, 'billing-v2', False, {'tenant': 'tenant-1', 'license': 'paid'}).value is False
        assert evaluate(snapshot, 'billing-v2', False, {'tenant': 'tenant-3', 'license': 'trial'}).value is False
