"""
Visualization Advisor Constants.

This module defines the thresholds, configuration defaults, and constants used
throughout the advisor. Every value here is a default only: the runtime copy
lives on AdvisorConfig and can be overridden per call.
"""

# ============================================================================
# Ingestion Constants
# ============================================================================

# Rows parsed per chunk during incremental ingestion
DEFAULT_CHUNK_SIZE: int = 10_000

# Maximum number of rows retained in the in-memory sample
MAX_ROWS_TO_KEEP: int = 100_000

# Row count after which the retained prefix is swapped for a reservoir sample
# drawn from every row seen so far
MAX_CHUNK_COLLECT: int = 500_000

# Size of the independent sub-sample used to compute the content fingerprint
FINGERPRINT_SAMPLE_SIZE: int = 1_000

# Number of hex characters kept from the SHA-256 fingerprint digest
FINGERPRINT_LENGTH: int = 16

# Seed for the reservoir samplers (sample buffer and fingerprint sub-sample)
DEFAULT_RANDOM_SEED: int = 42

# Bytes read per block by the incremental JSON scanner
JSON_READ_BLOCK_SIZE: int = 64 * 1024

# Bytes sampled for delimiter and encoding detection
DETECTION_SAMPLE_BYTES: int = 8192

# Candidate encodings tried in order when decoding delimited text
CANDIDATE_ENCODINGS: list = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']

# Candidate delimiters offered to csv.Sniffer
CANDIDATE_DELIMITERS: str = ',\t|;:'

# Supported input formats
SUPPORTED_FILE_FORMATS: list = ["csv", "json", "jsonl"]

# File extension to format mapping
FILE_EXTENSION_MAP: dict = {
    ".csv": "csv",
    ".tsv": "csv",
    ".txt": "csv",
    ".json": "json",
    ".jsonl": "jsonl",
    ".ndjson": "jsonl",
}


# ============================================================================
# Type Inference Constants
# ============================================================================

# A string field is ordinal when unique values < ratio x sample size.
# Heuristic only: low cardinality suggests a bounded, orderable category set.
ORDINAL_CARDINALITY_RATIO: float = 0.3

# Date patterns accepted when classifying string cells as dates
DATE_PATTERNS: list = [
    r'^\d{4}-\d{2}-\d{2}([T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?)?(Z|[+-]\d{2}:?\d{2})?$',  # ISO 8601
    r'^\d{4}/\d{2}/\d{2}$',  # 2024/01/15
    r'^\d{1,2}/\d{1,2}/\d{4}$',  # 01/15/2024
]


# ============================================================================
# Profiler Constants
# ============================================================================

# IQR multiplier for outlier detection (Tukey's fence)
# Outliers are values < Q1 - 1.5xIQR or > Q3 + 1.5xIQR
OUTLIER_IQR_MULTIPLIER: float = 1.5

# Relative change between first- and last-quartile means that flags a trend
TREND_CHANGE_THRESHOLD: float = 0.2

# |skewness| above which a distribution counts as skewed
SKEWNESS_THRESHOLD: float = 1.0

# Pearson (non-excess) kurtosis below which a symmetric field counts as multi-modal
MULTIMODALITY_KURTOSIS_THRESHOLD: float = 2.5

# Coefficient of variation above which a field counts as high-variance
HIGH_VARIANCE_CV_THRESHOLD: float = 1.0

# |r| above which a relationship is classified as linear
LINEAR_CORRELATION_THRESHOLD: float = 0.7

# Density buckets on the mean unique ratio
SPARSE_DENSITY_THRESHOLD: float = 0.2
DENSE_DENSITY_THRESHOLD: float = 0.8

# A temporal interval larger than this multiple of the median interval is a gap
GAP_INTERVAL_MULTIPLIER: float = 2.0

# Minimum number of values before shape statistics (kurtosis) are trusted
MIN_POINTS_FOR_SHAPE: int = 8

# Minimum number of rows for a usable profile
MIN_ROWS_FOR_PROFILE: int = 2

# Unique integral values in an ascending step-1 run of at least this length
# look like a row identifier even when the field name does not say so
MIN_IDENTIFIER_RUN_LENGTH: int = 10


# ============================================================================
# Recommendation Constants
# ============================================================================

# Maximum number of recommendations returned
MAX_RECOMMENDATIONS: int = 5

# Relationship strength that triggers a scatter recommendation
STRONG_RELATIONSHIP_THRESHOLD: float = 0.7

# Category cardinality limits
MAX_COMPARISON_CATEGORIES: int = 15
MAX_PART_TO_WHOLE_CATEGORIES: int = 6

# Category labels longer than this suggest a horizontal (transposed) bar chart
LONG_LABEL_LENGTH: int = 10

# Maximum number of fields listed in a synthesized tooltip
MAX_TOOLTIP_FIELDS: int = 3

# Tooltip display formats (d3 format strings)
TEMPORAL_TOOLTIP_FORMAT: str = "%b %d, %Y"
QUANTITATIVE_TOOLTIP_FORMAT: str = ".1f"

# Default bin count for histogram and heatmap recommendations
DEFAULT_MAX_BINS: int = 20

# Recommendation confidences, named after the rule that emits them
CONFIDENCE_SCATTER: float = 0.9
CONFIDENCE_OUTLIER_BOXPLOT: float = 0.85
CONFIDENCE_TREND_LINE: float = 0.9
CONFIDENCE_STACKED_AREA: float = 0.85
CONFIDENCE_HEATMAP: float = 0.8
CONFIDENCE_HISTOGRAM: float = 0.85
CONFIDENCE_BAR: float = 0.9
CONFIDENCE_HORIZONTAL_BAR: float = 0.85
CONFIDENCE_GROUPED_BAR: float = 0.8
CONFIDENCE_ARC: float = 0.75
CONFIDENCE_TREEMAP: float = 0.7


# ============================================================================
# Synthesis Constants
# ============================================================================

VEGA_LITE_SCHEMA: str = 'https://vega.github.io/schema/vega-lite/v5.json'

# Minimum number of folded dimensions for parallel coordinates
MIN_FOLD_DIMENSIONS: int = 3

# Font size range for word clouds
WORDCLOUD_FONT_RANGE: list = [12, 48]

# Inner radius applied to donut charts when the caller does not give one
DONUT_INNER_RADIUS: int = 50


# ============================================================================
# Logging Constants
# ============================================================================

# Default log message format
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Log date format
LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"


# ============================================================================
# Configuration Security Limits
# ============================================================================

# Maximum YAML configuration file size (1MB)
MAX_YAML_FILE_SIZE: int = 1024 * 1024
