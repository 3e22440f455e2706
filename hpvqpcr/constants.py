"""Constants and configuration for HPV genotyping analysis.

Contains the channel/position genotype lookup table, risk tiers, control
naming conventions, column aliases and QC thresholds.
"""

# ==================== GENOTYPE LOOKUP ====================
HPV_LOOKUP_TABLE = {
    "Green": {"POS-1": "51", "POS-2": "52", "POS-3": "39", "POS-4": "33",
              "POS-5": "62", "POS-6": "67", "POS-7": "43", "POS-8": "54"},
    "Yellow": {"POS-1": "16", "POS-2": "31", "POS-3": "59", "POS-4": "68",
               "POS-5": "11", "POS-6": "6", "POS-7": "42", "POS-8": "84"},
    "Orange": {"POS-1": "18", "POS-2": "53", "POS-3": "45", "POS-4": "66",
               "POS-5": "44", "POS-6": "91", "POS-7": "40", "POS-8": "61"},
    "Red": {"POS-1": "58", "POS-2": "56", "POS-3": "35", "POS-4": "73",
            "POS-5": "81", "POS-6": "90", "POS-7": "IC", "POS-8": "83"},
}

HIGH_RISK_GENOTYPES = frozenset([
    "16", "18", "31", "33", "35", "39", "45", "51",
    "52", "53", "56", "58", "59", "66", "68", "73",
])

LOW_RISK_GENOTYPES = frozenset([
    "6", "11", "40", "42", "43", "44", "54", "61",
    "62", "67", "81", "83", "84", "90", "91",
])

INTERNAL_CONTROL_NAME = "IC"

CHANNEL_NAME_MAP = {
    "green": "Green",
    "yellow": "Yellow",
    "orange": "Orange",
    "red": "Red",
}

# ==================== INSTRUMENT EXPORT LAYOUT ====================
SECTION_MARKER = "Quantitative analysis of"
HEADER_MARKER = "No."
CHANNEL_ANCHOR = "cycling a."
CHANNEL_COLUMN = "Channel"

# canonical field -> accepted header aliases (lower-case)
COLUMN_ALIASES = {
    "name": ["name", "sample name"],
    "ct": ["ct", "ct value"],
}

# ==================== SAMPLE NAMING ====================
NTC_NAME = "NTC"
POSITIVE_CONTROL_PREFIX = "POS-"
NEGATIVE_CONTROL_TOKEN = "NEG Cont"

# ==================== DISPLAY STRINGS ====================
DETECTED = "Detected"
NOT_DETECTED = "Not Detected"
NOT_APPLICABLE = "N/A"
NTC_DETECTED = "N/A (NTC Detected)"
POSITIVE_UNKNOWN = "POS-Unknown"

QC_MESSAGES = {
    "positive_control": (
        "Positive control {name} failed in channel {channel}: Ct {ct} is missing, "
        "not detected or above the threshold of {threshold:g}."
    ),
    "negative_control": (
        "Negative control {name} amplified in channel {channel} with Ct {ct}."
    ),
    "ntc": "No-template control (NTC) amplified in channel {channel} with Ct {ct}.",
    "internal_control": (
        "Internal control failed for sample {name} in channel {channel}: Ct {ct} is "
        "missing, not detected or above the threshold of {threshold:g}."
    ),
    "unresolved": (
        "Sample {name} was detected in channel {channel} with Ct {ct} but no positive "
        "control preceded it, so no genotype could be assigned."
    ),
}


# ==================== ANALYSIS CONSTANTS ====================
class AnalysisConstants:
    POS_CT_THRESHOLD = 35.0
    IC_CT_THRESHOLD = 35.0
    MAX_FILE_SIZE_MB = 50
    NUMBER_OF_MIXES = 8
    MAX_RUN_POSITIONS = 72
