"""Constants used throughout the regiontree package."""

# Character replacement mapping for sequence IDs (Newick compatibility)
ILLEGAL_ID_CHARACTERS = {
    ",": "_",
    ";": "_",
    "(": "_",
    ")": "_",
    " ": "_",
    "'": "_",
    ":": "_",
    "[": "_",
    "]": "_",
}

# Regex patterns matching records made only of ambiguous characters
AMBIGUOUS_NUCLEOTIDE_PATTERN = r"^[?N\-.~!OX*]*$"
AMBIGUOUS_AMINO_ACID_PATTERN = r"^[UX?\-.~*!]*$"
AMBIGUOUS_OTHER_PATTERN = r"^[\-.*]*$"

# Valid characters for sequence type detection (IUPAC plus gap symbols)
NUCLEOTIDE_CHARACTERS = "ACGTURYWSMKBHDVNOX?\\-.~!*"
AMINO_ACID_CHARACTERS = "ARNDCQEGHILKMFPOSTWYVBZJUX?\\-.~*!"

# Number of records inspected when detecting the sequence type
SEQUENCE_TYPE_SAMPLE_SIZE = 10

# Supported alignment file formats, tried in this order
SUPPORTED_ALIGNMENT_FORMATS = [
    "phylip-relaxed",
    "phylip",
    "fasta",
    "nexus",
    "msf",
    "clustal",
]

# Supported formats for writing sequence collections
SUPPORTED_OUTPUT_FORMATS = ("fasta", "fasta-2line")

DEFAULT_LINE_WIDTH = 60

# Substitution rate labels in the order FastTree reports them
GTR_RATE_LABELS = ("AC", "AG", "AT", "CG", "CT", "GT")
NUCLEOTIDE_LABELS = ("A", "C", "G", "T")

DEFAULT_BOOTSTRAP_REPLICATES = 100
DEFAULT_DISTANCE_MODEL = "identity"
DEFAULT_TREE_METHOD = "upgma"

# Output file names written by the pipeline
REGION_FILENAME = "region.fasta"
ALIGNMENT_FILENAME = "alignment.fasta"
DISTANCES_FILENAME = "distances.csv"
DISTANCE_TREE_FILENAME = "{method}.newick"
ML_TREE_FILENAME = "ml.newick"
BOOTSTRAP_TREE_FILENAME = "ml_bootstrap.newick"
RESULT_FILENAME = "result.json"
