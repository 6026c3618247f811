# predictive.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List

import numpy as np


class LanguageLevel(str, Enum):
    FUNCTIONAL = "Functional"
    DELAYED = "Delayed"
    ABSENT = "Absent"


class EegStatus(str, Enum):
    NORMAL = "Normal"
    FOCAL = "Focal"
    BILATERAL = "Bilateral"


class MriStatus(str, Enum):
    NORMAL = "Normal"
    ANOMALY = "Anomaly"
    UNKNOWN = "Unknown"


class PrenatalFactor(str, Enum):
    NATURAL = "Natural"
    IVF = "IVF"
    TWIN = "Twin"
    COMPLICATION = "Complication"


class DevelopmentalDelay(str, Enum):
    NONE = "None"
    MOTOR = "Motor"
    LANGUAGE = "Language"
    COGNITIVE = "Cognitive"
    GLOBAL = "Global"


# -----------------------------
# Calibration constants
# -----------------------------
PRENATAL_COMPLICATION_WEIGHT = 1.2
PRENATAL_TWIN_WEIGHT = 0.8
PRENATAL_IVF_WEIGHT = 0.4

LANGUAGE_SEVERITY = {
    LanguageLevel.FUNCTIONAL: 0.0,
    LanguageLevel.DELAYED: 0.5,
    LanguageLevel.ABSENT: 1.0,
}
EEG_SEVERITY = {
    EegStatus.NORMAL: 0.0,
    EegStatus.FOCAL: 0.8,
    EegStatus.BILATERAL: 1.2,
}
MRI_SEVERITY = {
    MriStatus.NORMAL: 0.0,
    MriStatus.ANOMALY: 1.1,
    MriStatus.UNKNOWN: 0.0,
}

LOAD_DIVISOR = 3
LOAD_MAX = 1.5

# Profound ASD with sensory dysregulation
PROFOUND_BASE = 2.5
PROFOUND_LANGUAGE_COEF = 3.2
PROFOUND_EEG_COEF = 2.1
PROFOUND_BEHAVIORAL_COEF = 1.8
PROFOUND_GLOBAL_DELAY_BONUS = 1.4
PROFOUND_DYSMORPHIC_BONUS = 0.6

# High-functioning ASD with emerging verbal skills
HIGH_FUNC_BASE = 2.0
HIGH_FUNC_LANGUAGE_COEF = 2.5
HIGH_FUNC_NORMAL_EEG_BONUS = 1.0
HIGH_FUNC_NORMAL_MRI_BONUS = 0.6
HIGH_FUNC_NO_DELAY_BONUS = 0.9
HIGH_FUNC_BEHAVIORAL_PENALTY = 1.4
HIGH_FUNC_COMORBIDITY_PENALTY = 1.0

# Syndromic ASD with multi-system comorbidities
SYNDROMIC_BASE = 1.8
SYNDROMIC_DYSMORPHIC_BONUS = 2.5
SYNDROMIC_MRI_COEF = 2.2
SYNDROMIC_COMORBIDITY_COEF = 2.0
SYNDROMIC_MOTOR_DELAY_BONUS = 0.8

# Recommendation thresholds
GENETICS_COMORBIDITY_THRESHOLD = 0.7
CO_REGULATION_BEHAVIORAL_THRESHOLD = 0.6

# -----------------------------
# Scenario text
# -----------------------------
PROFOUND_LABEL = "Profound ASD with sensory dysregulation"
HIGH_FUNC_LABEL = "High-functioning ASD with emerging verbal skills"
SYNDROMIC_LABEL = "Syndromic ASD with multi-system comorbidities"

SCENARIO_LABELS = [PROFOUND_LABEL, HIGH_FUNC_LABEL, SYNDROMIC_LABEL]

SCENARIO_NARRATIVES = {
    PROFOUND_LABEL: (
        "Language severity combined with EEG findings mirrors the high-intensity "
        "sensory subgroup described in the Romanian cohort."
    ),
    HIGH_FUNC_LABEL: (
        "Preserved language trajectory and lower neurophysiological burden align "
        "with the later-diagnosed functional cluster."
    ),
    SYNDROMIC_LABEL: (
        "Structural findings and comorbid load map to the syndromic cases (≈19%) "
        "highlighted in the clinical study."
    ),
}

RISK_SUMMARIES = {
    PROFOUND_LABEL: (
        "Indicators point toward a high-support sensory profile. Prioritise "
        "stabilising sensory input and monitoring EEG fluctuations."
    ),
    HIGH_FUNC_LABEL: (
        "Presentation aligns with a milder phenotype; focus on language "
        "scaffolding and executive function supports."
    ),
    SYNDROMIC_LABEL: (
        "Multi-system markers suggest investigating underlying syndromic "
        "etiologies alongside targeted behavioural care."
    ),
}

REC_AAC = "Introduce AAC strategies and intensive speech-language therapy blocks."
REC_PRAGMATIC = "Expand pragmatic language interventions and parent-led modelling."
REC_ENRICHMENT = "Maintain language enrichment and social communication coaching."
REC_NEUROLOGY = "Schedule neurology follow-up to assess epileptiform activity trajectory."
REC_GENETICS = "Coordinate genetics and multi-specialty review to rule out syndromic etiologies."
REC_CO_REGULATION = "Implement co-regulation programmes and track behavioural triggers across settings."
REC_STANDARD_PLAN = "Continue standard developmental therapy plan and monitor quarterly."


# -----------------------------
# Value types
# -----------------------------
@dataclass(frozen=True)
class PredictiveInput:
    age_months: float
    language_level: LanguageLevel
    eeg_status: EegStatus
    mri_status: MriStatus
    prenatal_factors: FrozenSet[PrenatalFactor] = field(default_factory=frozenset)
    developmental_delays: FrozenSet[DevelopmentalDelay] = field(default_factory=frozenset)
    dysmorphic_features: bool = False
    behavioral_concerns: int = 0
    comorbidities: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PredictiveInput":
        """
        Build an input from plain values (form fields or JSON).

        Accepts either snake_case or the stored camelCase keys. Enum values
        are coerced by value, so an unknown string raises ValueError.
        """
        def pick(snake: str, camel: str, default=None):
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        return cls(
            age_months=pick("age_months", "ageMonths", 0),
            language_level=LanguageLevel(pick("language_level", "languageLevel")),
            eeg_status=EegStatus(pick("eeg_status", "eegStatus")),
            mri_status=MriStatus(pick("mri_status", "mriStatus")),
            prenatal_factors=frozenset(
                PrenatalFactor(v) for v in pick("prenatal_factors", "prenatalFactors", None) or []
            ),
            developmental_delays=frozenset(
                DevelopmentalDelay(v) for v in pick("developmental_delays", "developmentalDelays", None) or []
            ),
            dysmorphic_features=bool(pick("dysmorphic_features", "dysmorphicFeatures", False)),
            behavioral_concerns=int(pick("behavioral_concerns", "behavioralConcerns", 0)),
            comorbidities=int(pick("comorbidities", "comorbidities", 0)),
        )


@dataclass(frozen=True)
class SeveritySignals:
    prenatal_weight: float
    twin_weight: float
    ivf_weight: float  # computed but not part of any scenario score
    global_delay: bool
    cognitive_delay: bool
    motor_delay: bool
    language_severity: float
    eeg_severity: float
    mri_severity: float
    behavioral_load: float
    comorbidity_load: float


@dataclass(frozen=True)
class PredictiveScenario:
    label: str
    probability: float
    narrative: str

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "probability": self.probability, "narrative": self.narrative}


@dataclass(frozen=True)
class PredictiveResult:
    top_finding: str
    scenarios: List[PredictiveScenario]
    risk_summary: str
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topFinding": self.top_finding,
            "scenarios": [s.to_dict() for s in self.scenarios],
            "riskSummary": self.risk_summary,
            "recommendations": list(self.recommendations),
        }


# -----------------------------
# Helpers
# -----------------------------
def clamp(value: float, minimum: float = 0.0, maximum: float = 1.0) -> float:
    return min(max(value, minimum), maximum)


def softmax(scores) -> List[float]:
    """
    Numerically stable softmax.

    The max score is subtracted before exponentiating so large magnitudes
    cannot overflow to inf (and then nan after division).
    """
    values = np.asarray(scores, dtype=float)
    exps = np.exp(values - np.max(values))
    return [float(p) for p in exps / exps.sum()]


def format_probability(probability: float) -> str:
    """Whole-percentage label used next to the probability bars."""
    # round-half-up, matching how the bars are sized
    return f"{int(np.floor(probability * 100 + 0.5))}%"


# -----------------------------
# Scenario Scorer
# -----------------------------
def derive_signals(data: PredictiveInput) -> SeveritySignals:
    prenatal = data.prenatal_factors
    delays = data.developmental_delays

    return SeveritySignals(
        prenatal_weight=PRENATAL_COMPLICATION_WEIGHT if PrenatalFactor.COMPLICATION in prenatal else 0.0,
        twin_weight=PRENATAL_TWIN_WEIGHT if PrenatalFactor.TWIN in prenatal else 0.0,
        ivf_weight=PRENATAL_IVF_WEIGHT if PrenatalFactor.IVF in prenatal else 0.0,
        global_delay=DevelopmentalDelay.GLOBAL in delays,
        cognitive_delay=DevelopmentalDelay.COGNITIVE in delays,
        motor_delay=DevelopmentalDelay.MOTOR in delays,
        language_severity=LANGUAGE_SEVERITY[data.language_level],
        eeg_severity=EEG_SEVERITY[data.eeg_status],
        mri_severity=MRI_SEVERITY[data.mri_status],
        behavioral_load=clamp(data.behavioral_concerns / LOAD_DIVISOR, 0, LOAD_MAX),
        comorbidity_load=clamp(data.comorbidities / LOAD_DIVISOR, 0, LOAD_MAX),
    )


def score_scenarios(data: PredictiveInput) -> List[float]:
    """
    Raw (unnormalized) scores, in SCENARIO_LABELS order.

    Args:
        data: PredictiveInput for one case.

    Returns:
        [profound, high_functioning, syndromic]
    """
    sig = derive_signals(data)

    # Scenario 1: Profound ASD with sensory dysregulation
    profound = PROFOUND_BASE
    profound += sig.language_severity * PROFOUND_LANGUAGE_COEF
    profound += sig.eeg_severity * PROFOUND_EEG_COEF
    profound += sig.behavioral_load * PROFOUND_BEHAVIORAL_COEF
    if sig.global_delay:
        profound += PROFOUND_GLOBAL_DELAY_BONUS
    if data.dysmorphic_features:
        profound += PROFOUND_DYSMORPHIC_BONUS

    # Scenario 2: High-functioning / emerging verbal trajectory
    high_func = HIGH_FUNC_BASE
    high_func += (1 - sig.language_severity) * HIGH_FUNC_LANGUAGE_COEF
    if data.eeg_status == EegStatus.NORMAL:
        high_func += HIGH_FUNC_NORMAL_EEG_BONUS
    if data.mri_status == MriStatus.NORMAL:
        high_func += HIGH_FUNC_NORMAL_MRI_BONUS
    if not sig.global_delay and not sig.cognitive_delay:
        high_func += HIGH_FUNC_NO_DELAY_BONUS
    high_func -= sig.behavioral_load * HIGH_FUNC_BEHAVIORAL_PENALTY
    high_func -= sig.comorbidity_load * HIGH_FUNC_COMORBIDITY_PENALTY

    # Scenario 3: Syndromic ASD with multi-system comorbidities
    syndromic = SYNDROMIC_BASE
    if data.dysmorphic_features:
        syndromic += SYNDROMIC_DYSMORPHIC_BONUS
    syndromic += sig.mri_severity * SYNDROMIC_MRI_COEF
    syndromic += sig.comorbidity_load * SYNDROMIC_COMORBIDITY_COEF
    syndromic += sig.prenatal_weight + sig.twin_weight
    if sig.motor_delay:
        syndromic += SYNDROMIC_MOTOR_DELAY_BONUS

    return [profound, high_func, syndromic]


# -----------------------------
# Narrative Composer
# -----------------------------
def build_recommendations(sig: SeveritySignals, data: PredictiveInput) -> List[str]:
    recommendations = []

    # Language (exactly one branch fires)
    if sig.language_severity >= 1:
        recommendations.append(REC_AAC)
    elif sig.language_severity > 0:
        recommendations.append(REC_PRAGMATIC)
    else:
        recommendations.append(REC_ENRICHMENT)

    if sig.eeg_severity > 0:
        recommendations.append(REC_NEUROLOGY)

    if data.dysmorphic_features or sig.comorbidity_load > GENETICS_COMORBIDITY_THRESHOLD:
        recommendations.append(REC_GENETICS)

    if sig.behavioral_load > CO_REGULATION_BEHAVIORAL_THRESHOLD:
        recommendations.append(REC_CO_REGULATION)

    # Unreachable while the language branch always appends; kept as a floor.
    if not recommendations:
        recommendations.append(REC_STANDARD_PLAN)

    return recommendations


def compute_predictive_result(data: PredictiveInput) -> PredictiveResult:
    """
    Score, normalize and narrate the three ASD scenarios for one input.

    Args:
        data: PredictiveInput, validated by the caller.

    Returns:
        PredictiveResult with scenarios sorted by descending probability
        (ties keep definition order), the top finding, a risk summary and
        an ordered, non-empty recommendation list.
    """
    probabilities = softmax(score_scenarios(data))

    scenarios = [
        PredictiveScenario(label=label, probability=p, narrative=SCENARIO_NARRATIVES[label])
        for label, p in zip(SCENARIO_LABELS, probabilities)
    ]
    # sorted() is stable, so equal probabilities keep definition order
    scenarios = sorted(scenarios, key=lambda s: s.probability, reverse=True)

    top = scenarios[0]

    return PredictiveResult(
        top_finding=top.label,
        scenarios=scenarios,
        risk_summary=RISK_SUMMARIES[top.label],
        recommendations=build_recommendations(derive_signals(data), data),
    )
