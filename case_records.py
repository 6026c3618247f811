# case_records.py

import copy
import json
from typing import Any, Dict, List, Optional, Tuple

import boto3

from predictive import (
    DevelopmentalDelay,
    EegStatus,
    LanguageLevel,
    MriStatus,
    PredictiveInput,
    PrenatalFactor,
)
from sample_cases import SAMPLE_CASE_RECORDS

MAX_CASE_CHOICES = 100

_s3_client = None


def get_s3_client():
    """Create the S3 client on first use so mock mode never touches AWS."""
    global _s3_client
    if _s3_client is None:
        _s3_client = boto3.client("s3")
    return _s3_client


def load_case_records_from_s3(bucket: str, key: str, client=None) -> List[Dict[str, Any]]:
    """Load a JSON array of stored case records from S3."""
    client = client or get_s3_client()
    try:
        print(f"Loading case records from s3://{bucket}/{key}...")
        obj = client.get_object(Bucket=bucket, Key=key)
        records = json.loads(obj["Body"].read())
        if not isinstance(records, list):
            raise ValueError(f"Expected a JSON array of case records, got {type(records).__name__}")
        print(f"✅ Loaded {len(records)} case records")
        return records
    except Exception as e:
        print(f"❌ Error loading case records from {key}: {e}")
        raise


def load_case_records(mock_mode: bool, bucket: str, key: str, client=None) -> List[Dict[str, Any]]:
    """
    Return the case records the lab can pre-fill from.

    Mock mode serves the bundled sample cases. Otherwise the store is read
    from S3, falling back to the samples if that fails.
    """
    if mock_mode:
        return copy.deepcopy(SAMPLE_CASE_RECORDS)

    try:
        records = valid_case_records(load_case_records_from_s3(bucket, key, client=client))
    except Exception as e:
        print(f"⚠️ Could not load case records, using sample cases: {e}")
        return copy.deepcopy(SAMPLE_CASE_RECORDS)

    if not records:
        print("⚠️ No usable case records in the store, using sample cases")
        return copy.deepcopy(SAMPLE_CASE_RECORDS)
    return records


def valid_case_records(records: List[Any]) -> List[Dict[str, Any]]:
    """Drop records the lab cannot list or map onto an input."""
    valid = []
    for index, record in enumerate(records):
        try:
            record["id"]
            record["demographics"]["caseLabel"]
            map_case_to_predictive_input(record)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            case_id = record.get("id", f"#{index}") if isinstance(record, dict) else f"#{index}"
            print(f"⚠️ Skipping malformed case record {case_id}: {e!r}")
            continue
        valid.append(record)
    return valid


def find_case(records: List[Dict[str, Any]], case_id: str) -> Optional[Dict[str, Any]]:
    for record in records:
        if record.get("id") == case_id:
            return record
    return None


def case_choices(records: List[Dict[str, Any]], limit: int = MAX_CASE_CHOICES) -> List[Tuple[str, str]]:
    """Dropdown (label, value) pairs: "<caseLabel> (<id>)"."""
    return [
        (f"{record['demographics']['caseLabel']} ({record['id']})", record["id"])
        for record in records[:limit]
    ]


def map_case_to_predictive_input(record: Dict[str, Any]) -> PredictiveInput:
    """
    Map a stored case record onto the predictive lab's input.

    Args:
        record: stored case record (camelCase keys, as persisted).

    Returns:
        PredictiveInput. EEG anomalies become Focal; MRI findings become
        Normal/Anomaly by text, or Unknown when absent. Behavioural concerns
        and comorbidities are counted.
    """
    demographics = record["demographics"]
    development = record["development"]
    assessments = record["assessments"]
    behaviors = record["behaviors"]

    eeg_status = EegStatus.FOCAL if assessments["eegAnomalies"] else EegStatus.NORMAL

    mri_findings = assessments.get("mriFindings")
    if not mri_findings:
        mri_status = MriStatus.UNKNOWN
    elif "normal" in mri_findings.lower():
        mri_status = MriStatus.NORMAL
    else:
        mri_status = MriStatus.ANOMALY

    return PredictiveInput(
        age_months=demographics["ageMonths"],
        language_level=LanguageLevel(behaviors["languageLevel"]),
        eeg_status=eeg_status,
        mri_status=mri_status,
        prenatal_factors=frozenset(PrenatalFactor(f) for f in demographics["prenatalFactors"]),
        developmental_delays=frozenset(DevelopmentalDelay(d) for d in development["delays"]),
        dysmorphic_features=bool(development["dysmorphicFeatures"]),
        behavioral_concerns=len(behaviors["concerns"]),
        comorbidities=len(development["comorbidities"]),
    )
