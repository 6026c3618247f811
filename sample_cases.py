# sample_cases.py
# Demo case records in the stored (camelCase JSON) shape, used in mock mode.

SAMPLE_CASE_RECORDS = [
    {
        "id": "R1-2024-0198",
        "submittedAt": "2024-03-22T08:15:00Z",
        "demographics": {
            "caseLabel": "Marin, 4y",
            "ageMonths": 48,
            "sex": "Male",
            "parentalAge": {"mother": 38, "father": 42},
            "subtype": "F84.0 Childhood autism",
            "diagnosticAgeMonths": 20,
            "prenatalFactors": ["Natural", "Complication"],
        },
        "development": {
            "delays": ["Language", "Cognitive"],
            "dysmorphicFeatures": False,
            "comorbidities": ["Feeding difficulties"],
            "regressionObserved": True,
        },
        "assessments": {
            "adirScore": 27,
            "adosScore": 14,
            "eegAnomalies": True,
            "mriFindings": "Mild periventricular white matter signal variation",
            "headCircumference": 51.2,
        },
        "behaviors": {
            "concerns": ["Stereotypy", "Sensory"],
            "languageLevel": "Delayed",
            "sensoryNotes": "Strong adverse response to high-frequency sounds.",
        },
        "notes": "Responds positively to joint attention prompts. Parent-reported regression after febrile episode.",
    },
    {
        "id": "R1-2024-0211",
        "submittedAt": "2024-04-04T10:42:00Z",
        "demographics": {
            "caseLabel": "Irina, 6y",
            "ageMonths": 72,
            "sex": "Female",
            "parentalAge": {"mother": 34, "father": 36},
            "subtype": "F84.5 Asperger syndrome",
            "diagnosticAgeMonths": 42,
            "prenatalFactors": ["IVF"],
        },
        "development": {
            "delays": ["Motor"],
            "dysmorphicFeatures": False,
            "comorbidities": ["Dyspraxia"],
            "regressionObserved": False,
        },
        "assessments": {
            "adirScore": 18,
            "adosScore": 9,
            "eegAnomalies": False,
            "mriFindings": None,
            "headCircumference": 50.1,
        },
        "behaviors": {
            "concerns": ["Hyperactivity"],
            "languageLevel": "Functional",
            "sensoryNotes": "Seeks deep pressure inputs for self-regulation.",
        },
        "notes": "Strength in visual problem-solving. Social reciprocity improving with peer modeling.",
    },
    {
        "id": "R1-2024-0307",
        "submittedAt": "2024-04-29T13:05:00Z",
        "demographics": {
            "caseLabel": "Bogdan, 3y",
            "ageMonths": 36,
            "sex": "Male",
            "parentalAge": {"mother": 29, "father": 33},
            "subtype": "F84.0 Childhood autism",
            "diagnosticAgeMonths": 18,
            "prenatalFactors": ["Twin", "Complication"],
        },
        "development": {
            "delays": ["Language", "Global"],
            "dysmorphicFeatures": True,
            "comorbidities": ["Congenital heart defect"],
            "regressionObserved": False,
        },
        "assessments": {
            "adirScore": 30,
            "adosScore": 16,
            "eegAnomalies": True,
            "mriFindings": "Corpus callosum thinning",
            "headCircumference": 52.4,
        },
        "behaviors": {
            "concerns": ["Aggressivity", "Self-injury"],
            "languageLevel": "Absent",
            "sensoryNotes": "Prefers proprioceptive feedback; requires weighted vest for focus.",
        },
        "notes": (
            "Genetic consult pending. Family history of ASD in maternal lineage. "
            "No evidence of regression but persistent adaptive deficits."
        ),
    },
]
