"""
Unit tests for admission outcome values.
"""
from shared.outcomes import (
    AdmissionError,
    AdmissionErrorCode,
    AdmissionResult,
    not_approved,
    team_size_out_of_range,
    storage_unavailable
)


class TestAdmissionError:

    def test_default_message(self):
        error = AdmissionError(AdmissionErrorCode.ALREADY_REGISTERED)
        assert error.message == "You have already registered for this event."

    def test_team_size_message_names_bounds(self):
        error = AdmissionError(AdmissionErrorCode.TEAM_SIZE_OUT_OF_RANGE, min_team_size=2, max_team_size=5)
        assert error.message == "Team size must be between 2 and 5."

    def test_custom_message_kept(self):
        error = AdmissionError(AdmissionErrorCode.NOT_APPROVED, message="Wait for the committee")
        assert error.message == "Wait for the committee"

    def test_only_storage_failures_are_retryable(self):
        for code in AdmissionErrorCode:
            expected = code == AdmissionErrorCode.STORAGE_UNAVAILABLE
            assert AdmissionError(code).retryable is expected

    def test_to_dict_includes_bounds_for_team_size(self):
        data = AdmissionError(AdmissionErrorCode.TEAM_SIZE_OUT_OF_RANGE, min_team_size=1, max_team_size=3).to_dict()
        assert data == {
            'code': 'team_size_out_of_range',
            'message': "Team size must be between 1 and 3.",
            'retryable': False,
            'min_team_size': 1,
            'max_team_size': 3,
        }

    def test_to_dict_omits_bounds_otherwise(self):
        data = AdmissionError(AdmissionErrorCode.COLLEGE_LIMIT_REACHED).to_dict()
        assert 'min_team_size' not in data
        assert data['code'] == 'college_limit_reached'


class TestAdmissionResult:

    def test_admit(self):
        result = AdmissionResult.admit(object())
        assert result.admitted
        assert result.error is None

    def test_reject(self):
        result = AdmissionResult.reject(AdmissionErrorCode.MISSING_COLLEGE)
        assert not result.admitted
        assert result.registration is None
        assert result.error.code == AdmissionErrorCode.MISSING_COLLEGE

    def test_rejection_to_dict(self):
        data = storage_unavailable().to_dict()
        assert data['admitted'] is False
        assert data['error']['retryable'] is True

    def test_helpers(self):
        assert not_approved().error.code == AdmissionErrorCode.NOT_APPROVED
        error = team_size_out_of_range(2, 5).error
        assert (error.min_team_size, error.max_team_size) == (2, 5)
