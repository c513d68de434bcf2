"""
Registration Portal - Festival Contingent Registration

Responsibilities:
- Account & approval directory (signup, approve/reject, contingent codes)
- Event catalog (team-size bounds, per-college limits)
- Admission control for event registration
- Per-college capacity reporting
"""
