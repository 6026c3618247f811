import gradio as gr
from predictive import (
    DevelopmentalDelay,
    EegStatus,
    LanguageLevel,
    MriStatus,
    PredictiveInput,
    PredictiveResult,
    PrenatalFactor,
    compute_predictive_result,
    format_probability,
)
from case_records import (
    case_choices,
    find_case,
    load_case_records,
    map_case_to_predictive_input,
)
import pandas as pd
import logging
import uuid
from typing import Any, Dict, List, Tuple
import os

# -------------------------
# Configuration
# -------------------------
MOCK_MODE = os.getenv("MOCK_MODE", "true").strip().lower() == "true"
CASE_STORE_BUCKET = os.getenv("CASE_STORE_BUCKET", "ratio1-asd-cases")
CASE_STORE_KEY = os.getenv("CASE_STORE_KEY", "cases/case_records.json")
USAGE_LOG_FILE = os.getenv("USAGE_LOG_FILE", "usage.log")

MANUAL_CASE = "custom"

# Upper bound of the behavioural concern and comorbidity counters
MAX_COUNT = 6

# Defaults for manual configuration
DEFAULT_INPUT = {
    "age_months": 48,
    "language_level": LanguageLevel.DELAYED.value,
    "eeg_status": EegStatus.NORMAL.value,
    "mri_status": MriStatus.UNKNOWN.value,
    "prenatal_factors": [PrenatalFactor.NATURAL.value],
    "developmental_delays": [DevelopmentalDelay.COGNITIVE.value],
    "dysmorphic_features": False,
    "behavioral_concerns": 1,
    "comorbidities": 0,
}

# Order of the lab's input components (and of the handler arguments)
INPUT_FIELDS = list(DEFAULT_INPUT.keys())

LANGUAGE_OPTIONS = [level.value for level in LanguageLevel]
EEG_OPTIONS = [status.value for status in EegStatus]
MRI_OPTIONS = [status.value for status in MriStatus]
PRENATAL_OPTIONS = [factor.value for factor in PrenatalFactor]
DELAY_OPTIONS = [
    DevelopmentalDelay.GLOBAL.value,
    DevelopmentalDelay.COGNITIVE.value,
    DevelopmentalDelay.MOTOR.value,
]

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(filename=USAGE_LOG_FILE, level=logging.INFO, format="%(asctime)s | %(message)s")

def log_usage(tool_name: str, inputs: Any, outputs: Any = None):
    session_id = str(uuid.uuid4())[:8]
    logging.info(f"session={session_id} tool={tool_name} inputs={inputs} outputs={outputs}")

# -----------------------------
# Case Records
# -----------------------------
print("🔄 Loading case records...")
CASE_RECORDS: List[Dict[str, Any]] = load_case_records(MOCK_MODE, CASE_STORE_BUCKET, CASE_STORE_KEY)
print(f"✅ {len(CASE_RECORDS)} case records available (mock mode: {MOCK_MODE})")

# -----------------------------
# Helpers
# -----------------------------
def input_to_form_values(data: PredictiveInput) -> Tuple:
    """Flatten a PredictiveInput into the lab's component values, in INPUT_FIELDS order."""
    return (
        data.age_months,
        data.language_level.value,
        data.eeg_status.value,
        data.mri_status.value,
        [f for f in PRENATAL_OPTIONS if PrenatalFactor(f) in data.prenatal_factors],
        [d for d in DELAY_OPTIONS if DevelopmentalDelay(d) in data.developmental_delays],
        data.dysmorphic_features,
        data.behavioral_concerns,
        data.comorbidities,
    )

def build_probability_frame(result: PredictiveResult) -> pd.DataFrame:
    """Scenario probabilities as percentages, in result order, for the bar plot."""
    return pd.DataFrame(
        {
            "Scenario": [s.label for s in result.scenarios],
            "Probability": [round(s.probability * 100, 1) for s in result.scenarios],
        }
    )

def format_scenarios(result: PredictiveResult) -> str:
    lines = []
    for scenario in result.scenarios:
        lines.append(f"**{scenario.label}**: {format_probability(scenario.probability)}")
        lines.append(f"_{scenario.narrative}_")
        lines.append("")
    return "\n".join(lines).strip()

def format_summary(result: PredictiveResult) -> str:
    return f"### 🧠 {result.top_finding}\n\n{result.risk_summary}"

def format_recommendations(result: PredictiveResult) -> str:
    return "\n".join(f"- {rec}" for rec in result.recommendations)

def build_cases_frame(records: List[Dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for record in records:
        mapped = map_case_to_predictive_input(record)
        rows.append({
            "Case ID": record["id"],
            "Label": record["demographics"]["caseLabel"],
            "Age (months)": mapped.age_months,
            "Language": mapped.language_level.value,
            "EEG": mapped.eeg_status.value,
            "MRI": mapped.mri_status.value,
            "Submitted": record.get("submittedAt", ""),
        })
    return pd.DataFrame(rows, columns=["Case ID", "Label", "Age (months)", "Language", "EEG", "MRI", "Submitted"])

# -----------------------------
# Core Functions
# -----------------------------
def run_predictive_lab(age_months, language_level, eeg_status, mri_status, prenatal_factors,
                       developmental_delays, dysmorphic_features, behavioral_concerns, comorbidities):
    try:
        inputs = {
            "age_months": age_months,
            "language_level": language_level,
            "eeg_status": eeg_status,
            "mri_status": mri_status,
            "prenatal_factors": prenatal_factors,
            "developmental_delays": developmental_delays,
            "dysmorphic_features": dysmorphic_features,
            "behavioral_concerns": behavioral_concerns,
            "comorbidities": comorbidities,
        }

        result = compute_predictive_result(PredictiveInput.from_dict(inputs))
        log_usage("predictive_lab", inputs, {"top_finding": result.top_finding})

        return (
            build_probability_frame(result),
            format_scenarios(result),
            format_summary(result),
            format_recommendations(result),
        )

    except Exception as e:
        log_usage("predictive_lab_error", {}, {"error": str(e)})
        empty = pd.DataFrame({"Scenario": [], "Probability": []})
        return empty, f"⚠️ Error: {e}", "", ""

def load_case_inputs(case_id):
    """Pre-fill the lab from a stored case; the manual entry restores defaults."""
    if not case_id or case_id == MANUAL_CASE:
        return tuple(DEFAULT_INPUT[name] for name in INPUT_FIELDS)

    record = find_case(CASE_RECORDS, case_id)
    if record is None:
        log_usage("case_prefill_error", {"case_id": case_id}, {"error": "case not found"})
        return tuple(DEFAULT_INPUT[name] for name in INPUT_FIELDS)

    try:
        values = input_to_form_values(map_case_to_predictive_input(record))
    except Exception as e:
        log_usage("case_prefill_error", {"case_id": case_id}, {"error": repr(e)})
        return tuple(DEFAULT_INPUT[name] for name in INPUT_FIELDS)

    log_usage("case_prefill", {"case_id": case_id}, dict(zip(INPUT_FIELDS, values)))
    return values

# -----------------------------
# Gradio App
# -----------------------------
with gr.Blocks(title="🧩 ASD Predictive Lab (RUO)") as demo:
    gr.Markdown(
        """
        ## 🧩 ASD Predictive Inference Lab — *Research Use Only*

        Configure the risk factors highlighted in the Romanian ASD cohort to estimate trajectory and
        support levels. Selecting a case pulls its recorded data; manual mode lets you explore what-if
        scenarios.
        """
    )
    with gr.Tabs():
        with gr.TabItem("Predictive Lab"):
            case_selector = gr.Dropdown(
                [("Manual configuration", MANUAL_CASE)] + case_choices(CASE_RECORDS),
                value=MANUAL_CASE,
                label="Case",
            )

            gr.Markdown("#### 🧠 Clinical inputs")
            age_months = gr.Slider(6, 240, DEFAULT_INPUT["age_months"], step=1, label="Chronological age (months)")
            language_level = gr.Dropdown(LANGUAGE_OPTIONS, value=DEFAULT_INPUT["language_level"], label="Language level")
            eeg_status = gr.Radio(EEG_OPTIONS, value=DEFAULT_INPUT["eeg_status"], label="EEG status")
            mri_status = gr.Radio(MRI_OPTIONS, value=DEFAULT_INPUT["mri_status"], label="MRI findings")
            prenatal_factors = gr.CheckboxGroup(PRENATAL_OPTIONS, value=DEFAULT_INPUT["prenatal_factors"], label="Prenatal factors")
            developmental_delays = gr.CheckboxGroup(DELAY_OPTIONS, value=DEFAULT_INPUT["developmental_delays"], label="Developmental delays")
            dysmorphic_features = gr.Checkbox(value=DEFAULT_INPUT["dysmorphic_features"], label="Dysmorphic features")
            behavioral_concerns = gr.Slider(0, MAX_COUNT, DEFAULT_INPUT["behavioral_concerns"], step=1, label="Behavioural concerns (count)")
            comorbidities = gr.Slider(0, MAX_COUNT, DEFAULT_INPUT["comorbidities"], step=1, label="Comorbidities (count)")

            lab_inputs = [
                age_months, language_level, eeg_status, mri_status, prenatal_factors,
                developmental_delays, dysmorphic_features, behavioral_concerns, comorbidities,
            ]

            gr.Markdown("#### 📊 Probability scenarios")
            initial = run_predictive_lab(*(DEFAULT_INPUT[name] for name in INPUT_FIELDS))
            bars = gr.BarPlot(
                value=initial[0], x="Scenario", y="Probability",
                y_lim=[0, 100], label="Scenario probability (%)",
            )
            scenarios_md = gr.Markdown(initial[1])
            summary_md = gr.Markdown(initial[2])
            gr.Markdown("#### 💡 Recommendations")
            recommendations_md = gr.Markdown(initial[3])

            lab_outputs = [bars, scenarios_md, summary_md, recommendations_md]

            # Re-score on every edit
            for component in lab_inputs:
                component.change(run_predictive_lab, lab_inputs, lab_outputs)

            case_selector.change(load_case_inputs, case_selector, lab_inputs)

        with gr.TabItem("Case Records"):
            gr.Markdown(f"### 🗂️ Stored cases ({'sample data' if MOCK_MODE else 's3://' + CASE_STORE_BUCKET})")
            gr.Dataframe(build_cases_frame(CASE_RECORDS), interactive=False)

# -----------------------------
# Main Launch
# -----------------------------
if __name__ == "__main__":
    demo.launch(server_name="0.0.0.0", server_port=7860, share=False)
