"""
Pytest Configuration and Fixtures

Shared fixtures for the predictive lab tests.
"""
import copy
import os
import sys
from pathlib import Path

import pytest

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep the app on bundled sample cases; never reach for S3 during tests
os.environ["MOCK_MODE"] = "true"

from predictive import (  # noqa: E402
    DevelopmentalDelay,
    EegStatus,
    LanguageLevel,
    MriStatus,
    PredictiveInput,
    PrenatalFactor,
)
from sample_cases import SAMPLE_CASE_RECORDS  # noqa: E402


@pytest.fixture
def default_input() -> PredictiveInput:
    """Lab defaults with no behavioural concerns."""
    return PredictiveInput(
        age_months=48,
        language_level=LanguageLevel.DELAYED,
        eeg_status=EegStatus.NORMAL,
        mri_status=MriStatus.UNKNOWN,
        prenatal_factors=frozenset({PrenatalFactor.NATURAL}),
        developmental_delays=frozenset({DevelopmentalDelay.COGNITIVE}),
        dysmorphic_features=False,
        behavioral_concerns=0,
        comorbidities=0,
    )


@pytest.fixture
def profound_input() -> PredictiveInput:
    return PredictiveInput(
        age_months=48,
        language_level=LanguageLevel.ABSENT,
        eeg_status=EegStatus.BILATERAL,
        mri_status=MriStatus.UNKNOWN,
        prenatal_factors=frozenset({PrenatalFactor.NATURAL}),
        developmental_delays=frozenset({DevelopmentalDelay.GLOBAL}),
        dysmorphic_features=False,
        behavioral_concerns=3,
        comorbidities=0,
    )


@pytest.fixture
def case_record() -> dict:
    """A stored case record (Marin, 4y)."""
    return copy.deepcopy(SAMPLE_CASE_RECORDS[0])
